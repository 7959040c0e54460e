from __future__ import annotations

import asyncio
import math

import pytest

from hr_core import csv_codec
from hr_core.csv_codec import (
    CSVMode,
    decode_upload,
    encode_header,
    encode_value,
    export_csv,
    import_csv,
    parse,
    read_upload,
    serialize,
    split_fields,
)
from hr_core.errors import CSVParseError, EmptyInputError, FileReadError, SchemaError
from hr_core.sample_data import EMPLOYEE_COLUMNS, sample_records
from hr_core.store import TabularStore


def _fixed_csv(rows):
    header = ",".join(EMPLOYEE_COLUMNS)
    return "\r\n".join([header, *rows])


def test_split_fields_respects_quotes():
    line = 'E001,"Smith, John",85.5,"He said ""hi"""'
    assert split_fields(line) == ["E001", "Smith, John", "85.5", 'He said "hi"']


def test_encode_value_handles_missing_and_zero():
    assert encode_value(0) == "0"
    assert encode_value(None) == '""'
    assert encode_value(math.nan) == '""'
    assert encode_value(12.5) == "12.5"
    assert encode_value("Café") == '"Café"'


def test_encode_header_only_quotes_when_needed():
    assert encode_header("Average KPI (%)") == "Average KPI (%)"
    assert encode_header("Last, First") == '"Last, First"'


def test_serialize_uses_crlf_and_json_values():
    out = serialize([{"a": 1, "b": "x"}, {"a": 2, "b": None}], ["a", "b"])
    assert out == 'a,b\r\n1,"x"\r\n2,""'


def test_serialize_empty_inputs():
    assert serialize([], ["a"]) == ""
    assert serialize([{"a": 1}], []) == ""


def test_sample_round_trip_schema_free():
    records = sample_records()
    result = parse(serialize(records, EMPLOYEE_COLUMNS))
    assert result.headers == EMPLOYEE_COLUMNS
    assert result.records == records


def test_parse_strips_bom_and_crlf():
    result = parse("\ufeffa,b\r\n1,2\r\n")
    assert result.headers == ["a", "b"]
    assert result.records == [{"a": 1, "b": 2}]


def test_parse_pads_short_rows_and_ignores_extra_fields():
    result = parse("a,b,c\n1\n4,5,6,7")
    assert result.records == [{"a": 1, "b": "", "c": ""}, {"a": 4, "b": 5, "c": 6}]


def test_parse_skips_blank_lines():
    result = parse("a\n1\n\n   \n2")
    assert [r["a"] for r in result.records] == [1, 2]


def test_parse_coerces_numbers_only_when_whole_field_is_numeric():
    result = parse("a,b,c,d\n7,2.5,85%,E010")
    assert result.records == [{"a": 7, "b": 2.5, "c": "85%", "d": "E010"}]
    assert isinstance(result.records[0]["a"], int)


def test_parse_dedupes_blank_and_repeated_headers():
    result = parse("a,a,\n1,2,3")
    assert result.headers == ["a", "a.1", "Unnamed: 2"]


def test_parse_empty_schema_free_returns_nothing():
    assert parse("") == ([], [])
    assert parse("   \r\n ") == ([], [])


def test_parse_empty_fixed_raises():
    with pytest.raises(EmptyInputError):
        parse("", CSVMode.FIXED)


def test_fixed_mode_reports_missing_headers():
    header = ",".join(h for h in EMPLOYEE_COLUMNS if h != "Employee ID")
    with pytest.raises(SchemaError) as excinfo:
        parse(header + "\nx", CSVMode.FIXED)
    assert excinfo.value.missing == ["Employee ID"]
    assert "Employee ID" in str(excinfo.value)
    assert "template" in str(excinfo.value)


def test_fixed_mode_without_rows_raises():
    with pytest.raises(EmptyInputError):
        parse(_fixed_csv([]), CSVMode.FIXED)


def test_fixed_mode_coerces_percent_columns_only():
    row = '"E001","Ann",Sales,Rep,Sam,85%,abc,Good,Yes,None,Retain'
    result = parse(_fixed_csv([row]), "fixed")
    record = result.records[0]
    assert record["Employee ID"] == "E001"
    assert record["Average KPI (%)"] == 85
    assert record["Productivity Rate (%)"] == 0
    assert record["Department"] == "Sales"


def test_unexpected_errors_are_wrapped(monkeypatch):
    def boom(line):
        raise ValueError("boom")

    monkeypatch.setattr(csv_codec, "split_fields", boom)
    with pytest.raises(CSVParseError, match="Failed to parse CSV: boom"):
        parse("a,b\n1,2")


def test_unexpected_error_without_message(monkeypatch):
    def boom(line):
        raise RuntimeError()

    monkeypatch.setattr(csv_codec, "split_fields", boom)
    with pytest.raises(CSVParseError, match="unknown error"):
        parse("a,b\n1,2")


def test_decode_upload_rejects_invalid_utf8():
    assert decode_upload("a,b".encode("utf-8")) == "a,b"
    with pytest.raises(FileReadError):
        decode_upload(b"\xff\xfe\xfa")


def test_read_upload_times_out():
    async def slow():
        await asyncio.sleep(1)
        return b"a\n1"

    with pytest.raises(FileReadError, match="Timed out"):
        asyncio.run(read_upload(slow, 0.01))


def test_read_upload_decodes():
    async def fast():
        return b"a\n1"

    assert asyncio.run(read_upload(fast, 1.0)) == "a\n1"


def test_export_first_line_matches_headers():
    store = TabularStore()
    export = export_csv(store)
    assert export.filename == "employees.csv"
    assert export.mime_type == "text/csv;charset=utf-8"
    lines = export.content.split("\r\n")
    assert lines[0].split(",") == EMPLOYEE_COLUMNS
    assert len(lines) == 1 + len(store.records)


def test_import_replaces_store_with_new_schema():
    store = TabularStore()
    result = import_csv(store, "ID,Score\nX1,10\nX2,20")
    assert len(result.records) == 2
    assert store.headers == ("ID", "Score")
    assert store.find_by_identity("X2") == {"ID": "X2", "Score": 20}


def test_import_of_empty_file_leaves_store_untouched():
    store = TabularStore()
    before = store.get_snapshot()
    with pytest.raises(EmptyInputError):
        import_csv(store, "")
    with pytest.raises(EmptyInputError):
        import_csv(store, "a,b\n")
    assert store.get_snapshot() is before


def test_import_fixed_schema_error_leaves_store_untouched():
    store = TabularStore()
    before = store.get_snapshot()
    with pytest.raises(SchemaError):
        import_csv(store, "ID,Score\nX1,10", CSVMode.FIXED)
    assert store.get_snapshot() is before


def test_backslashes_and_quotes_survive_export_and_import():
    records = [
        {"ID": "E1", "Path": "C:\\share\\hr", "Note": 'Say "hi"'},
        {"ID": "E2", "Path": "\\\\server", "Note": 'a "b, c" d'},
    ]
    once = parse(serialize(records, ["ID", "Path", "Note"]))
    assert once.records == records
    twice = parse(serialize(once.records, once.headers))
    assert twice.records == records


def test_spreadsheet_quoting_with_backslash_is_kept_literally():
    assert split_fields('"C:\\share ""x""",1') == ['C:\\share "x"', "1"]
