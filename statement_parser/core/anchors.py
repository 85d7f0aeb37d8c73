"""
Header extraction using text anchors.

Each header field is found by a probe anchored on a fixed label in the
normalized statement text, so probes do not depend on the order of
unrelated fields.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging

from .errors import HeaderFieldNotFound, HeaderFieldsMissing
from .normalize import month_number, normalize_date, normalize_money, normalize_text
from ..models.schema import ACCEPTED_CURRENCIES, StatementHeader

logger = logging.getLogger(__name__)


DEFAULT_LABELS = {
    'timestamp': 'as of',
    'customer_name': 'Customer Name',
    'account_info': 'To Date',
    'balance': 'Opening Balance',
}

TIMESTAMP_PATTERN = (
    r'(\d{2})\s+([A-Za-z]+)\s+(\d{4})\s+(\d{2}):(\d{2}):(\d{2})\s+GMT\s*([+-])(\d{2})(\d{2})'
)
AMOUNT_PATTERN = r'[\d,]+\.\d{2}'
PERIOD_DATE_RE = re.compile(r'(?<!\d)\d{1,2}\s*-\s*[A-Za-z]+\s*-\s*\d{4}')


class Strictness(str, Enum):
    """How the header extractor reacts to a missing field."""
    FAIL_FAST = "fail_fast"
    COLLECT_WARNINGS = "collect_warnings"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single header probe: a value or the error it raised."""
    field: str
    value: Any = None
    error: Optional[HeaderFieldNotFound] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HeaderExtractor:
    """Extracts statement metadata from normalized text."""

    FIELDS = ('timestamp', 'customer_name', 'account_info', 'balance', 'period')

    def __init__(self, labels: Optional[Dict[str, str]] = None,
                 currencies: Optional[Sequence[str]] = None):
        self.labels = dict(DEFAULT_LABELS)
        self.labels.update(labels or {})
        self.currencies = tuple(currencies or ACCEPTED_CURRENCIES)

        currency_group = '(' + '|'.join(re.escape(c) for c in self.currencies) + ')'
        timestamp_label = re.escape(self.labels['timestamp'])

        self._timestamp_re = re.compile(timestamp_label + r'\s+' + TIMESTAMP_PATTERN)
        self._customer_name_re = re.compile(
            timestamp_label + r'\s+' + TIMESTAMP_PATTERN
            + r'\s+(.*?)\s*:?\s*' + re.escape(self.labels['customer_name'])
        )
        self._account_info_re = re.compile(
            re.escape(self.labels['account_info'])
            + r'\D*(\d+)\D+(?:\d+\D+)*?(\d{19})(?!\d)\s*' + currency_group
        )
        self._balance_re = re.compile(
            re.escape(self.labels['balance'])
            + r'.*?' + currency_group + '(' + AMOUNT_PATTERN + ')(' + AMOUNT_PATTERN + ')'
        )

    def probe_timestamp(self, text: str) -> datetime:
        """Parse the "as of DD Month YYYY HH:MM:SS GMT +ZZZZ" clause."""
        match = self._timestamp_re.search(text)
        if not match:
            raise HeaderFieldNotFound('timestamp')

        day, month_name, year, hour, minute, second, sign, tz_hours, tz_minutes = match.groups()
        try:
            offset = timedelta(hours=int(tz_hours), minutes=int(tz_minutes))
            if sign == '-':
                offset = -offset
            return datetime(
                int(year), month_number(month_name), int(day),
                int(hour), int(minute), int(second),
                tzinfo=timezone(offset),
            )
        except ValueError as e:
            raise HeaderFieldNotFound('timestamp', f"Invalid statement timestamp {match.group(0)!r}: {e}") from e

    def probe_customer_name(self, text: str) -> str:
        """Text between the timestamp clause and the customer name label."""
        match = self._customer_name_re.search(text)
        name = normalize_text(match.group(10)) if match else ""
        if not name:
            raise HeaderFieldNotFound('customer_name')
        return name

    def probe_account_info(self, text: str) -> Tuple[str, str]:
        """Customer id and 19-digit account number after the "To Date" marker."""
        match = self._account_info_re.search(text)
        if not match:
            raise HeaderFieldNotFound('account_info')
        return match.group(1), match.group(2)

    def probe_balance(self, text: str) -> Tuple[str, float, float]:
        """Currency plus opening and closing balance after "Opening Balance"."""
        match = self._balance_re.search(text)
        if not match:
            raise HeaderFieldNotFound('balance')

        currency, opening, closing = match.groups()
        return currency, normalize_money(opening), normalize_money(closing)

    def probe_period(self, text: str) -> Tuple[str, str]:
        """First two D[D]-Month-YYYY tokens in the text are the period bounds."""
        dates = PERIOD_DATE_RE.findall(text)
        if len(dates) < 2:
            raise HeaderFieldNotFound('period', f"Could not extract both from and to dates (found {len(dates)})")

        try:
            return normalize_date(dates[0]), normalize_date(dates[1])
        except ValueError as e:
            raise HeaderFieldNotFound('period', f"Invalid statement period: {e}") from e

    def _probes(self) -> List[Tuple[str, Callable[[str], Any]]]:
        return [
            ('timestamp', self.probe_timestamp),
            ('customer_name', self.probe_customer_name),
            ('account_info', self.probe_account_info),
            ('balance', self.probe_balance),
            ('period', self.probe_period),
        ]

    def run_probes(self, text: str, strictness: Strictness = Strictness.FAIL_FAST) -> List[ProbeResult]:
        """
        Run every probe against the text.

        With FAIL_FAST the first failing probe raises. With COLLECT_WARNINGS
        each failure is logged and kept in its ProbeResult.
        """
        results = []
        for field, probe in self._probes():
            try:
                results.append(ProbeResult(field, value=probe(text)))
            except HeaderFieldNotFound as e:
                if strictness == Strictness.FAIL_FAST:
                    raise
                logger.warning(f"Header probe '{field}' failed: {e}")
                results.append(ProbeResult(field, error=e))
        return results

    def extract(self, text: str, strictness: Strictness = Strictness.FAIL_FAST) -> StatementHeader:
        """
        Extract the statement header.

        Args:
            text: Normalized statement text
            strictness: Reaction to missing fields

        Returns:
            StatementHeader built only when every probe succeeded

        Raises:
            HeaderFieldNotFound: First missing field (FAIL_FAST)
            HeaderFieldsMissing: All missing fields (COLLECT_WARNINGS)
        """
        results = self.run_probes(text, strictness)

        errors = [result.error for result in results if not result.ok]
        if errors:
            raise HeaderFieldsMissing(errors)

        values = {result.field: result.value for result in results}
        customer_id, account_number = values['account_info']
        currency, opening_balance, closing_balance = values['balance']
        period_start, period_end = values['period']

        header = StatementHeader(
            timestamp=values['timestamp'],
            customer_id=customer_id,
            customer_name=values['customer_name'],
            account_number=account_number,
            currency=currency,
            opening_balance=opening_balance,
            closing_balance=closing_balance,
            period_start=period_start,
            period_end=period_end,
        )
        logger.debug(f"Extracted header for account {header.account_number} ({header.period_start} - {header.period_end})")
        return header


def extract_header(text: str, strictness: Strictness = Strictness.FAIL_FAST) -> StatementHeader:
    """Extract the header using the default labels."""
    return HeaderExtractor().extract(text, strictness)
