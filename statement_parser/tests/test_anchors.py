"""
Tests for the header probes.
"""
import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from ..core.anchors import HeaderExtractor, ProbeResult, Strictness, extract_header
from ..core.errors import HeaderFieldNotFound, HeaderFieldsMissing


ACCOUNT_BLOCK = "Customer ID Account Number Currency From Date To Date {customer_id} {account} EGP 01-Feb-2024 29-Feb-2024"


class TestHeaderProbes:

    @pytest.fixture
    def extractor(self):
        return HeaderExtractor()

    def test_timestamp(self, extractor, normalized_text):
        timestamp = extractor.probe_timestamp(normalized_text)
        assert timestamp == datetime(2024, 3, 15, 10, 15, 30, tzinfo=timezone(timedelta(hours=2)))

    def test_timestamp_negative_offset(self, extractor):
        timestamp = extractor.probe_timestamp("as of 01 January 2024 23:00:00 GMT -0530")
        assert timestamp.utcoffset() == -timedelta(hours=5, minutes=30)

    def test_timestamp_unknown_month(self, extractor):
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_timestamp("as of 15 Smarch 2024 10:15:30 GMT +0200")
        assert exc_info.value.field == "timestamp"

    def test_customer_name(self, extractor, normalized_text):
        assert extractor.probe_customer_name(normalized_text) == "AHMED MOHAMED ALI"

    def test_customer_name_without_colon(self, extractor):
        text = "as of 15 March 2024 10:15:30 GMT +0200  SARA HASSAN   Customer Name"
        assert extractor.probe_customer_name(text) == "SARA HASSAN"

    def test_customer_name_missing(self, extractor):
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_customer_name("as of 15 March 2024 10:15:30 GMT +0200 SARA HASSAN")
        assert exc_info.value.field == "customer_name"

    def test_account_info(self, extractor, normalized_text):
        assert extractor.probe_account_info(normalized_text) == ("1234567", "1234567890123456789")

    @pytest.mark.parametrize("account", ["123456789012345678", "12345678901234567890"])
    def test_account_number_must_be_19_digits(self, extractor, account):
        text = ACCOUNT_BLOCK.format(customer_id="1234567", account=account)
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_account_info(text)
        assert exc_info.value.field == "account_info"

    def test_account_info_needs_accepted_currency(self, extractor):
        text = "To Date 1234567 1234567890123456789 JPY"
        with pytest.raises(HeaderFieldNotFound):
            extractor.probe_account_info(text)

    def test_account_info_skips_intervening_numbers(self, extractor):
        text = "To Date 1234567 Branch 042 opened 01-Feb-2024 1234567890123456789 USD"
        assert extractor.probe_account_info(text) == ("1234567", "1234567890123456789")

    def test_account_info_missing_from_long_text(self, extractor):
        text = "To Date 1234567 " + "ref 12 " * 5000 + "EGP"
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_account_info(text)
        assert exc_info.value.field == "account_info"

    def test_balance(self, extractor, normalized_text):
        assert extractor.probe_balance(normalized_text) == ("EGP", 10000.0, 12500.0)

    def test_balance_other_currency(self, extractor):
        text = "Opening Balance Closing Balance USD1,250,000.500.75"
        assert extractor.probe_balance(text) == ("USD", 1250000.5, 0.75)

    def test_balance_unknown_currency(self, extractor):
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_balance("Opening Balance Closing Balance JPY10.0020.00")
        assert exc_info.value.field == "balance"

    def test_period(self, extractor, normalized_text):
        assert extractor.probe_period(normalized_text) == ("2024-02-01", "2024-02-29")

    def test_period_with_spaced_hyphens(self, extractor):
        assert extractor.probe_period("From 1 - Jan - 2024 To 31-January -2024") == ("2024-01-01", "2024-01-31")

    def test_period_ignores_longer_numbers(self, extractor):
        text = "Ref 123-Feb-2024 From 01-Feb-2024 To 29-Feb-2024"
        assert extractor.probe_period(text) == ("2024-02-01", "2024-02-29")

    def test_period_needs_two_dates(self, extractor):
        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extractor.probe_period("From Date 01-Feb-2024")
        assert exc_info.value.field == "period"

    def test_custom_labels(self):
        extractor = HeaderExtractor(labels={"balance": "Start Balance"}, currencies=["GBP"])
        assert extractor.probe_balance("Start Balance GBP5.0010.00") == ("GBP", 5.0, 10.0)


class TestHeaderExtraction:

    def test_extract_header(self, normalized_text):
        header = extract_header(normalized_text)

        assert header.customer_id == "1234567"
        assert header.customer_name == "AHMED MOHAMED ALI"
        assert header.account_number == "1234567890123456789"
        assert header.currency == "EGP"
        assert header.opening_balance == 10000.0
        assert header.closing_balance == 12500.0
        assert header.period_start == date(2024, 2, 1)
        assert header.period_end == date(2024, 2, 29)

    def test_missing_opening_balance_fails_fast(self, normalized_text):
        text = normalized_text.replace("Opening Balance", "Balance Summary")

        with pytest.raises(HeaderFieldNotFound) as exc_info:
            extract_header(text)
        assert exc_info.value.field == "balance"

    def test_collect_warnings_reports_every_missing_field(self, normalized_text, caplog):
        text = normalized_text.replace("Opening Balance", "Balance Summary").replace("Customer Name", "Client")

        with caplog.at_level(logging.WARNING):
            with pytest.raises(HeaderFieldsMissing) as exc_info:
                extract_header(text, Strictness.COLLECT_WARNINGS)

        assert exc_info.value.fields == ["customer_name", "balance"]
        assert all(isinstance(error, HeaderFieldNotFound) for error in exc_info.value.errors)
        assert "customer_name" in caplog.text
        assert "balance" in caplog.text

    def test_run_probes_collects_results(self, normalized_text):
        text = normalized_text.replace("Opening Balance", "Balance Summary")
        results = HeaderExtractor().run_probes(text, Strictness.COLLECT_WARNINGS)

        assert [result.field for result in results] == list(HeaderExtractor.FIELDS)
        failed = [result for result in results if not result.ok]
        assert len(failed) == 1
        assert failed[0].field == "balance"
        assert failed[0].value is None

    def test_probe_result_ok(self):
        assert ProbeResult("period", value=("2024-01-01", "2024-01-31")).ok
        assert not ProbeResult("period", error=HeaderFieldNotFound("period")).ok
