from __future__ import annotations

from typing import Iterable, List


class HRDashboardError(Exception):
    """Base exception for dashboard domain failures."""


class CSVImportError(HRDashboardError):
    """Raised when an uploaded CSV cannot become the new table snapshot."""


class SchemaError(CSVImportError):
    """Raised when the header row lacks required columns."""

    def __init__(self, missing: Iterable[str]):
        self.missing: List[str] = list(missing)
        super().__init__(
            f"CSV file is missing required headers: {', '.join(self.missing)}. "
            "Please use the downloaded CSV as a template."
        )


class EmptyInputError(CSVImportError):
    """Raised when a file has no usable header or data rows."""


class FileReadError(CSVImportError):
    """Raised when the uploaded file cannot be read as text."""


class CSVParseError(CSVImportError):
    """Wraps unexpected tokenizer/coercion failures."""


class RecordNotFoundError(HRDashboardError):
    """Raised when no record matches an identity value."""
