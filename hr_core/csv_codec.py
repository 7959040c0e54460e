"""CSV import/export for the employee table.

Export emits JSON-encoded field values joined by commas with CRLF line
endings. Import runs a quote-aware tokenizer and then applies one of two
policies:

- ``CSVMode.SCHEMA_FREE``: any header row becomes the new schema and every
  field that looks like a number is stored as one.
- ``CSVMode.FIXED``: the eleven employee columns must be present and only the
  two percentage columns are coerced to numbers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import numbers
import re
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Set, Union

import pandas as pd

from hr_core.errors import CSVImportError, CSVParseError, EmptyInputError, FileReadError, SchemaError
from hr_core.sample_data import EMPLOYEE_COLUMNS, Record, Scalar

if TYPE_CHECKING:
    from hr_core.store import TabularStore

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "employees.csv"
EXPORT_MIME_TYPE = "text/csv;charset=utf-8"
LINE_TERMINATOR = "\r\n"
BOM = "\ufeff"

REQUIRED_HEADERS = list(EMPLOYEE_COLUMNS)
PERCENT_COLUMNS = ("Average KPI (%)", "Productivity Rate (%)")

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")
_LEADING_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_HEADER_NEEDS_QUOTES = (",", '"', "\r", "\n")


class CSVMode(str, Enum):
    SCHEMA_FREE = "schema-free"
    FIXED = "fixed"


class ParseResult(NamedTuple):
    records: List[Record]
    headers: List[str]


class ExportFile(NamedTuple):
    filename: str
    mime_type: str
    content: str


# ---------------- Serialize ----------------
def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def encode_value(value: object) -> str:
    if _is_missing(value):
        return '""'
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, numbers.Integral):
        return json.dumps(int(value))
    if isinstance(value, numbers.Real):
        out = float(value)
        if math.isinf(out):
            return '""'
        return json.dumps(out)
    return json.dumps(str(value), ensure_ascii=False)


def encode_header(header: str) -> str:
    if any(token in header for token in _HEADER_NEEDS_QUOTES):
        return json.dumps(header, ensure_ascii=False)
    return header


def serialize(records: Optional[Sequence[Mapping[str, object]]], headers: Optional[Sequence[str]]) -> str:
    if not records or not headers:
        return ""
    lines = [",".join(encode_header(str(h)) for h in headers)]
    for record in records:
        lines.append(",".join(encode_value(record.get(h)) for h in headers))
    return LINE_TERMINATOR.join(lines)


# ---------------- Tokenize ----------------
def _unquote(token: str) -> str:
    value = token.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        # Exported values are JSON strings; plain spreadsheet CSV doubles quotes instead.
        if "\\" in value:
            try:
                decoded = json.loads(value)
            except ValueError:
                decoded = None
            if isinstance(decoded, str):
                return decoded
        value = value[1:-1].replace('""', '"')
    return value


def split_fields(line: str) -> List[str]:
    """Split one CSV line on commas that sit outside double quotes."""
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    escaped = False
    for ch in line:
        if escaped:
            buf.append(ch)
            escaped = False
        elif ch == "\\" and in_quotes:
            buf.append(ch)
            escaped = True
        elif ch == '"':
            in_quotes = not in_quotes
            buf.append(ch)
        elif ch == "," and not in_quotes:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    fields.append("".join(buf))
    return [_unquote(f) for f in fields]


def _dedupe_headers(names: Sequence[str]) -> List[str]:
    # Same naming as pandas.read_csv for blank and repeated columns.
    out: List[str] = []
    used: Set[str] = set()
    counts: Dict[str, int] = {}
    for idx, name in enumerate(names):
        base = name or f"Unnamed: {idx}"
        count = counts.get(base, 0)
        candidate = base
        while candidate in used:
            count += 1
            candidate = f"{base}.{count}"
        counts[base] = count
        used.add(candidate)
        out.append(candidate)
    return out


def parse_headers(line: str) -> List[str]:
    if line.startswith(BOM):
        line = line[len(BOM):]
    if not line.strip():
        return []
    return _dedupe_headers(split_fields(line))


# ---------------- Coerce ----------------
def _to_number(token: str) -> Union[int, float]:
    if _INTEGER_RE.fullmatch(token):
        return int(token)
    return float(token)


def coerce_field(value: str) -> Scalar:
    stripped = value.strip()
    if stripped and _NUMBER_RE.fullmatch(stripped):
        return _to_number(stripped)
    return value


def coerce_percent(value: str) -> Union[int, float]:
    match = _LEADING_NUMBER_RE.match(value or "")
    if not match:
        return 0
    return _to_number(match.group(1))


# ---------------- Parse ----------------
def _parse(text: str, mode: CSVMode) -> ParseResult:
    lines = _LINE_SPLIT_RE.split(text.strip())
    headers = parse_headers(lines[0])

    if mode is CSVMode.FIXED:
        if not headers:
            raise EmptyInputError("CSV file is empty.")
        missing = [h for h in REQUIRED_HEADERS if h not in headers]
        if missing:
            raise SchemaError(missing)

    if not headers:
        return ParseResult([], [])

    records: List[Record] = []
    for raw in lines[1:]:
        if not raw.strip():
            continue
        values = split_fields(raw)
        record: Record = {}
        for idx, key in enumerate(headers):
            value = values[idx] if idx < len(values) else ""
            if mode is CSVMode.FIXED:
                record[key] = coerce_percent(value) if key in PERCENT_COLUMNS else value
            else:
                record[key] = coerce_field(value)
        records.append(record)

    if mode is CSVMode.FIXED and not records:
        raise EmptyInputError("CSV file has a header row but no data rows.")
    return ParseResult(records, headers)


def parse(text: Optional[str], mode: Union[CSVMode, str] = CSVMode.SCHEMA_FREE) -> ParseResult:
    mode = CSVMode(mode)
    try:
        return _parse(text or "", mode)
    except CSVImportError:
        raise
    except Exception as exc:
        logger.error("Error parsing CSV: %s", exc)
        message = str(exc)
        if not message:
            raise CSVParseError("An unknown error occurred while parsing CSV.") from exc
        raise CSVParseError(f"Failed to parse CSV: {message}") from exc


# ---------------- Import / export workflow ----------------
def decode_upload(data: Union[bytes, bytearray, str]) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileReadError("Could not read the selected file.") from exc


async def read_upload(read: Callable[[], Awaitable[bytes]], timeout: float) -> str:
    """Await a file read with a deadline and decode it."""
    try:
        data = await asyncio.wait_for(read(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise FileReadError(f"Timed out after {timeout:g}s reading the selected file.") from exc
    except OSError as exc:
        raise FileReadError("Could not read the selected file.") from exc
    return decode_upload(data)


def import_csv(store: "TabularStore", text: str, mode: Union[CSVMode, str] = CSVMode.SCHEMA_FREE) -> ParseResult:
    result = parse(text, mode)
    if not result.headers or not result.records:
        raise EmptyInputError("CSV file appears to be empty or has no headers.")
    store.replace(result.records, result.headers)
    logger.info("Imported %s employee records with %s columns", len(result.records), len(result.headers))
    return result


def export_csv(store: "TabularStore") -> ExportFile:
    snapshot = store.get_snapshot()
    content = serialize(snapshot.records, snapshot.headers)
    return ExportFile(filename=EXPORT_FILENAME, mime_type=EXPORT_MIME_TYPE, content=content)
