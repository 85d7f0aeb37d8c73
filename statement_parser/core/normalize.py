"""
Data normalization and cleaning functions.
"""
import re
from datetime import date
import logging

logger = logging.getLogger(__name__)


MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

LINE_BREAK_RE = re.compile(r'\r\n|[\r\n\u2028\u2029]')
ISO_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
MONTH_DATE_RE = re.compile(r'^(\d{1,2})\s*-\s*([A-Za-z]+)\s*-\s*(\d{4})$')


def normalize_statement_text(raw_text: str) -> str:
    """
    Turn raw extracted text into a single line.

    Every line break becomes one space and the result is trimmed. Other
    spacing is left alone because later stages rely on character positions.

    Args:
        raw_text: Text as produced by the document loader

    Returns:
        Single-line statement text
    """
    if not raw_text:
        return ""

    return LINE_BREAK_RE.sub(' ', raw_text).strip()


def normalize_text(value: str) -> str:
    """
    Normalize text by trimming and cleaning.

    Args:
        value: Raw text string

    Returns:
        Cleaned text string
    """
    if not value:
        return ""

    # Remove extra whitespace
    cleaned = re.sub(r'\s+', ' ', value.strip())

    return cleaned


def month_number(name: str) -> int:
    """
    Map an English month name to its number.

    Full names and prefixes of at least three letters are accepted
    ("Feb", "Sept", "February"), case-insensitively.

    Raises:
        ValueError: If the name is not a recognized month
    """
    key = name.strip().lower()
    if len(key) >= 3:
        for number, month in enumerate(MONTHS, 1):
            if month.startswith(key):
                return number

    raise ValueError(f"Unknown month name: {name!r}")


def normalize_date(value: str) -> str:
    """
    Normalize a statement date to the canonical YYYY-MM-DD form.

    Args:
        value: Date such as "01-Feb-2024", "1 - February - 2024" or an
            already canonical "2024-02-01"

    Returns:
        Date string in YYYY-MM-DD format

    Raises:
        ValueError: If the value is not a valid date
    """
    cleaned = (value or "").strip()

    iso_match = ISO_DATE_RE.match(cleaned)
    if iso_match:
        # Validates the calendar date as well
        date.fromisoformat(cleaned)
        return cleaned

    match = MONTH_DATE_RE.match(cleaned)
    if not match:
        raise ValueError(f"Could not parse date: {value!r}")

    day, month_name, year = match.groups()
    parsed = date(int(year), month_number(month_name), int(day))
    return parsed.isoformat()


def normalize_money(value: str) -> float:
    """
    Normalize money values by removing comma thousands separators.

    Args:
        value: Raw money string such as "1,234.50"

    Returns:
        Float value

    Raises:
        ValueError: If the cleaned value is not a number
    """
    cleaned = re.sub(r'[,\s]', '', value or '')
    if not cleaned:
        raise ValueError(f"Empty money value: {value!r}")

    return float(cleaned)
