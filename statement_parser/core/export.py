"""
Tabular export of parsed statements.
"""
import csv
import io
from typing import Any, Dict, List

from ..models.schema import StatementDocument


EXPORT_FIELDS = (
    'transactionDate',
    'valueDate',
    'referenceNo',
    'description',
    'debit',
    'credit',
    'balance',
)


def _export_number(value: float):
    """Integral amounts are written without a fractional part (1000, not 1000.0)."""
    return int(value) if float(value).is_integer() else value


def serialize_for_export(document: StatementDocument) -> List[Dict[str, Any]]:
    """
    Flatten the transactions of a document into export rows.

    Args:
        document: Parsed statement

    Returns:
        One dict per transaction, keyed by EXPORT_FIELDS in that order
    """
    rows = []
    for transaction in document.transactions:
        data = transaction.model_dump(mode='json', by_alias=True)
        rows.append({field: data[field] for field in EXPORT_FIELDS})
    return rows


def to_csv(document: StatementDocument) -> str:
    """
    Render the transactions of a document as CSV.

    The header row holds the quoted field names; text fields are quoted and
    amounts are written as bare numbers.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')
    writer.writerow(EXPORT_FIELDS)

    for row in serialize_for_export(document):
        writer.writerow([
            _export_number(value) if field in ('debit', 'credit', 'balance') else value
            for field, value in row.items()
        ])

    return buffer.getvalue()
