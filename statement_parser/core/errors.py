"""
Exceptions raised while decoding and parsing a statement.
"""
from typing import List


class StatementParseError(Exception):
    """Base class for every statement parsing failure."""


class DocumentFormatError(StatementParseError):
    """The input bytes are not a readable PDF document."""


class HeaderFieldNotFound(StatementParseError):
    """A required header field did not match its pattern."""

    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f"Header field not found: {field}")


class HeaderFieldsMissing(StatementParseError):
    """One or more header probes failed while collecting warnings."""

    def __init__(self, errors: List[HeaderFieldNotFound]):
        self.errors = list(errors)
        super().__init__(f"Header fields not found: {', '.join(self.fields)}")

    @property
    def fields(self) -> List[str]:
        return [error.field for error in self.errors]


class TransactionTableNotFound(StatementParseError):
    """The transaction table marker is missing from the statement."""

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(f"Transaction table marker not found: {marker!r}")


class RowExtractionError(StatementParseError):
    """A transaction row could not be parsed."""

    reason = "Failed to extract fields from transaction"

    def __init__(self, row_text: str, detail: str = None):
        self.row_text = row_text
        message = f"{self.reason}: {row_text}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DateExtractionFailed(RowExtractionError):
    reason = "Failed to extract dates from transaction"


class AmountExtractionFailed(RowExtractionError):
    reason = "Failed to extract transaction amounts from transaction"
