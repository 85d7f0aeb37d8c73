"""
End-to-end tests for statement parsing.
"""
from datetime import date

import pytest

from ..core.anchors import Strictness
from ..core.errors import (
    AmountExtractionFailed,
    DateExtractionFailed,
    HeaderFieldNotFound,
    HeaderFieldsMissing,
    TransactionTableNotFound,
)
from ..core.runner import StatementParser, parse_statement, parse_statement_pdf
from ..models.schema import StatementDocument
from .conftest import PAGE_ONE, PAGE_TWO


class TestParseStatement:

    def test_parse_statement(self, statement_text):
        result = parse_statement(statement_text)

        assert isinstance(result, StatementDocument)
        assert result.template_id == "nbe_v1"
        assert result.header.customer_name == "AHMED MOHAMED ALI"
        assert result.header.account_number == "1234567890123456789"
        assert result.header.period_start == date(2024, 2, 1)
        assert len(result.transactions) == 3

    def test_transactions(self, statement_text):
        result = parse_statement(statement_text)
        first, second, third = result.transactions

        assert first.transaction_date == date(2024, 2, 1)
        assert first.description == "Salary Transfer"
        assert (first.debit, first.credit, first.balance) == (0, 5000.0, 15000.0)

        assert second.value_date == date(2024, 2, 6)
        assert (second.debit, second.credit, second.balance) == (2000.0, 0, 13000.0)

        assert third.description == "POS Purchase"
        assert (third.debit, third.credit, third.balance) == (500.0, 0, 12500.0)

    def test_balance_equation(self, statement_text):
        result = parse_statement(statement_text)

        balance = result.header.opening_balance
        for transaction in result.transactions:
            balance = balance - transaction.debit + transaction.credit
            assert transaction.balance == pytest.approx(balance)
        assert balance == pytest.approx(result.header.closing_balance)

    def test_missing_opening_balance(self, statement_text):
        text = statement_text.replace("Opening Balance", "Balance Summary")

        with pytest.raises(HeaderFieldNotFound) as exc_info:
            parse_statement(text)
        assert exc_info.value.field == "balance"

    def test_collect_warnings(self, statement_text):
        text = statement_text.replace("Opening Balance", "Balance Summary")

        with pytest.raises(HeaderFieldsMissing) as exc_info:
            parse_statement(text, strictness=Strictness.COLLECT_WARNINGS)
        assert exc_info.value.fields == ["balance"]

    def test_strictness_accepts_plain_strings(self):
        parser = StatementParser(strictness="collect_warnings")
        assert parser.strictness is Strictness.COLLECT_WARNINGS

    def test_missing_transaction_table(self, statement_text):
        text = statement_text.replace("Transaction Date", "Txn Date")

        with pytest.raises(TransactionTableNotFound):
            parse_statement(text)

    def test_malformed_row_aborts_parse(self, statement_text):
        text = statement_text.replace("POS Purchase 500.0012,500.00", "POS Purchase 500 12500")

        with pytest.raises(AmountExtractionFailed) as exc_info:
            parse_statement(text)
        assert exc_info.value.row_text == "10-Feb-2024 10-Feb-2024 POS Purchase 500 12500"

    def test_malformed_first_row_date_aborts_parse(self):
        page_one = list(PAGE_ONE)
        page_one[8] = "1-Feb-2024 01-Feb-2024 Salary Transfer 5,000.0015,000.00"

        with pytest.raises(DateExtractionFailed) as exc_info:
            parse_statement("\n".join(page_one + PAGE_TWO))
        assert exc_info.value.row_text == page_one[8]

    def test_transactions_are_immutable(self, statement_text):
        result = parse_statement(statement_text)

        assert isinstance(result.transactions, tuple)
        with pytest.raises(AttributeError):
            result.transactions.append(result.transactions[0])

    def test_invalid_template(self, statement_text):
        with pytest.raises(ValueError):
            parse_statement(statement_text, template_id="invalid_template")

    def test_schema_validation(self, statement_text):
        result = parse_statement(statement_text)

        json_data = result.model_dump_json(by_alias=True)
        assert '"transactionDate":"2024-02-01"' in json_data
        assert '"accountNumber":"1234567890123456789"' in json_data

        recreated = StatementDocument.model_validate_json(json_data)
        assert recreated == result


class TestParsePDF:

    def test_parse_statement_pdf(self, statement_pdf_bytes):
        result = parse_statement_pdf(statement_pdf_bytes)

        assert result.template_id == "nbe_v1"
        assert result.header.customer_id == "1234567"
        assert [t.balance for t in result.transactions] == [15000.0, 13000.0, 12500.0]

    def test_parse_pdf_file(self, statement_pdf_bytes, tmp_path):
        pdf_path = tmp_path / "statement.pdf"
        pdf_path.write_bytes(statement_pdf_bytes)

        result = StatementParser().parse_pdf(pdf_path)
        assert len(result.transactions) == 3

    def test_undetectable_template_uses_default(self, tmp_path):
        fpdf = pytest.importorskip("fpdf")
        pdf = fpdf.FPDF()
        pdf.add_page()
        pdf.set_font("Helvetica", size=12)
        pdf.cell(0, 10, "Quarterly newsletter")

        with pytest.raises(HeaderFieldNotFound) as exc_info:
            parse_statement_pdf(bytes(pdf.output()))
        assert exc_info.value.field == "timestamp"
