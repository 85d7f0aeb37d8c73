"""
Transaction table segmentation and per-row field extraction.

The transaction table comes out of the PDF as one run of text with no
reliable column delimiters. Rows are recovered by looking for the pair of
dates (transaction date, value date) that opens every row, and amounts are
recovered positionally from the last two decimal points of the row.
"""
import re
from typing import Iterable, List, Optional, Tuple
import logging

from .errors import AmountExtractionFailed, DateExtractionFailed, TransactionTableNotFound
from .normalize import normalize_date, normalize_money, normalize_text
from ..models.schema import TransactionRecord

logger = logging.getLogger(__name__)


TABLE_MARKER = "Transaction Date"
HEADER_END_MARKER = "Balance"
PAGE_ARTIFACT_WIDTH = 2

# A date may follow a year or an amount with no space in between.
DATE_START = r'(?:(?<!\d)|(?<=-\d{4})|(?<=\.\d{2}))'
DATE_TOKEN = DATE_START + r'\d{2}\s*-\s*[A-Za-z]{3,}\s*-\s*\d{4}'
ROW_BOUNDARY_RE = re.compile(r'(' + DATE_TOKEN + r')\s*(' + DATE_TOKEN + r')')
SPACED_DATE_RE = re.compile(DATE_START + r'(\d{2})\s*-\s*([A-Za-z]{3,})\s*-\s*(\d{4})')
DATE_RE = re.compile(DATE_START + r'\d{2}-[A-Za-z]{3,}-\d{4}')
AMOUNT_TOKEN_RE = re.compile(r'[\d,]+\.\d{2}')
AMOUNT_VALUE_RE = re.compile(r'[\d,]*\d\.\d{2}')

Span = Tuple[int, int]


class TransactionSegmenter:
    """Splits the transaction table of a statement into row substrings."""

    def __init__(self, marker: str = TABLE_MARKER, header_end: str = HEADER_END_MARKER,
                 page_artifact_width: int = PAGE_ARTIFACT_WIDTH):
        self.marker = marker
        self.header_end = header_end
        self.page_artifact_width = page_artifact_width

        escaped = re.escape(marker)
        self._artifact_re = re.compile(r'.{%d}(?=%s)' % (page_artifact_width, escaped))
        self._header_band_re = re.compile(escaped + r'.*?' + re.escape(header_end))

    def locate(self, text: str) -> int:
        """Offset of the first table marker."""
        start = text.find(self.marker)
        if start == -1:
            raise TransactionTableNotFound(self.marker)
        return start

    def clean_table(self, text: str, start: Optional[int] = None) -> str:
        """
        Cut the table out of the statement text.

        Drops everything before the marker, the page-number remnants in front
        of every repeated marker, and the repeated column header bands.
        """
        if start is None:
            start = self.locate(text)

        table = text[start:]
        table = self._artifact_re.sub('', table)
        table = self._header_band_re.sub('', table)
        return table

    def split_rows(self, table: str) -> List[str]:
        """Split cleaned table text on row boundaries (date pairs)."""
        boundaries = [match.start() for match in ROW_BOUNDARY_RE.finditer(table)]
        if not boundaries:
            logger.warning("No row boundaries found in transaction table")
            row = table.strip()
            return [row] if row else []

        ends = boundaries[1:] + [len(table)]
        rows = [table[begin:end].strip() for begin, end in zip(boundaries, ends)]

        # Leading text is a row whose dates did not match; extraction rejects it.
        preamble = table[:boundaries[0]].strip()
        if preamble:
            logger.debug(f"Text before the first row boundary kept as a row: {preamble!r}")
            rows.insert(0, preamble)
        return rows

    def segment(self, text: str, start: Optional[int] = None) -> List[str]:
        """
        Split the statement text into one substring per transaction row.

        Args:
            text: Normalized statement text
            start: Offset of the table marker, located when omitted

        Returns:
            Row substrings in printed order
        """
        rows = self.split_rows(self.clean_table(text, start))
        logger.debug(f"Segmented {len(rows)} transaction rows")
        return rows


def normalize_date_tokens(row: str) -> str:
    """Remove whitespace around the hyphens of DD-Month-YYYY tokens."""
    return SPACED_DATE_RE.sub(r'\1-\2-\3', row)


def extract_dates(row: str) -> Tuple[str, str]:
    """
    Extract the transaction date and value date from a row.

    Raises:
        DateExtractionFailed: Unless exactly two valid dates are present
    """
    dates = DATE_RE.findall(normalize_date_tokens(row))
    if len(dates) != 2:
        raise DateExtractionFailed(row, f"found {len(dates)} dates")

    try:
        return normalize_date(dates[0]), normalize_date(dates[1])
    except ValueError as e:
        raise DateExtractionFailed(row, str(e)) from e


def split_amounts(row: str) -> Tuple[Span, Span]:
    """
    Locate the transaction amount and the resulting balance in a row.

    Amounts always carry two decimals, so the last two decimal points belong
    to the amount and the balance. The amount is found by walking back from
    the second-to-last point over digits and commas; the balance is whatever
    follows it up to the last point and its two decimals. This also works
    when the two numbers are printed with no separator ("500.0012,500.00").

    Args:
        row: Transaction row text

    Returns:
        (amount_span, balance_span) as (start, end) offsets into the row

    Raises:
        AmountExtractionFailed: If the row does not end in two amounts
    """
    last_dot = row.rfind('.')
    if last_dot == -1:
        raise AmountExtractionFailed(row, "no balance amount")

    second_last_dot = row.rfind('.', 0, last_dot)
    if second_last_dot == -1:
        raise AmountExtractionFailed(row, "no transaction amount")

    amount_start = second_last_dot
    while amount_start > 0 and (row[amount_start - 1].isdigit() or row[amount_start - 1] == ','):
        amount_start -= 1
    amount_end = second_last_dot + 3

    balance_start = amount_end
    while balance_start < last_dot and row[balance_start].isspace():
        balance_start += 1
    balance_end = last_dot + 3

    amount_span = (amount_start, amount_end)
    balance_span = (balance_start, balance_end)
    for begin, end in (amount_span, balance_span):
        if not AMOUNT_VALUE_RE.fullmatch(row[begin:end]):
            raise AmountExtractionFailed(row, f"invalid amount {row[begin:end]!r}")

    return amount_span, balance_span


def extract_amounts(row: str) -> Tuple[float, float]:
    """Transaction amount and resulting balance of a row."""
    (amount_start, amount_end), (balance_start, balance_end) = split_amounts(row)
    try:
        amount = normalize_money(row[amount_start:amount_end])
        balance = normalize_money(row[balance_start:balance_end])
    except ValueError as e:
        raise AmountExtractionFailed(row, str(e)) from e
    return amount, balance


def classify(amount: float, balance: float, baseline: float) -> Tuple[float, float]:
    """
    Classify an amount as debit or credit from the balance movement.

    Returns:
        (debit, credit); both zero when the balance did not change
    """
    if balance < baseline:
        return amount, 0.0
    if balance > baseline:
        return 0.0, amount
    return 0.0, 0.0


def extract_description(row: str) -> str:
    """Row text with every amount and date token removed."""
    description = AMOUNT_TOKEN_RE.sub(' ', row)
    description = DATE_RE.sub(' ', normalize_date_tokens(description))
    return normalize_text(description)


def extract_row(row: str, baseline: float) -> TransactionRecord:
    """
    Extract a transaction record from one row.

    Args:
        row: Row substring produced by the segmenter
        baseline: Balance before this transaction

    Returns:
        TransactionRecord
    """
    transaction_date, value_date = extract_dates(row)
    amount, balance = extract_amounts(row)
    debit, credit = classify(amount, balance, baseline)

    # TODO: extract reference numbers once a statement layout shows a reliable pattern for them
    return TransactionRecord(
        transaction_date=transaction_date,
        value_date=value_date,
        reference_no='',
        description=extract_description(row),
        debit=debit,
        credit=credit,
        balance=balance,
    )


def extract_transactions(rows: Iterable[str], opening_balance: float) -> List[TransactionRecord]:
    """
    Extract transaction records from rows in printed order.

    The first row is classified against the opening balance and every later
    row against the balance of the row before it. Any failing row aborts the
    whole extraction.
    """
    transactions = []
    baseline = opening_balance

    for row in rows:
        transaction = extract_row(row, baseline)
        transactions.append(transaction)
        baseline = transaction.balance

    logger.debug(f"Extracted {len(transactions)} transactions")
    return transactions
