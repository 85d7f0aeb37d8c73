"""
Bank Statement Parser

Extracts statement metadata and transactions from the text of NBE-style
bank statement PDFs and renders them as CSV or JSON.
"""

__version__ = "1.0.0"
__author__ = "Statement Parser Team"

from .core.runner import parse_statement, parse_statement_pdf, StatementParser
from .core.detectors import detect_template, resolve_template
from .core.loader import extract_raw_text
from .core.export import serialize_for_export, to_csv, EXPORT_FIELDS
from .core.anchors import Strictness
from .core.errors import (
    StatementParseError,
    DocumentFormatError,
    HeaderFieldNotFound,
    HeaderFieldsMissing,
    TransactionTableNotFound,
    RowExtractionError,
    DateExtractionFailed,
    AmountExtractionFailed,
)
from .models.schema import StatementDocument, StatementHeader, TransactionRecord

__all__ = [
    "parse_statement",
    "parse_statement_pdf",
    "StatementParser",
    "detect_template",
    "resolve_template",
    "extract_raw_text",
    "serialize_for_export",
    "to_csv",
    "EXPORT_FIELDS",
    "Strictness",
    "StatementParseError",
    "DocumentFormatError",
    "HeaderFieldNotFound",
    "HeaderFieldsMissing",
    "TransactionTableNotFound",
    "RowExtractionError",
    "DateExtractionFailed",
    "AmountExtractionFailed",
    "StatementDocument",
    "StatementHeader",
    "TransactionRecord",
]
