"""
Shared fixtures: a synthetic two-page NBE-style statement.
"""
import pytest


PAGE_ONE = [
    "National Bank of Egypt",
    "Account Statement as of 15 March 2024 10:15:30 GMT +0200",
    "AHMED MOHAMED ALI : Customer Name",
    "Customer ID Account Number Currency From Date To Date",
    "1234567 1234567890123456789 EGP 01-Feb-2024 29-Feb-2024",
    "Opening Balance Closing Balance",
    "EGP10,000.0012,500.00",
    "Transaction Date Value Date Reference No Description Debit Credit Balance",
    "01-Feb-2024 01-Feb-2024 Salary Transfer 5,000.0015,000.00",
    "05-Feb-2024 06-Feb-2024 ATM Withdrawal 2,000.0013,000.00",
    "1",
]

PAGE_TWO = [
    "Transaction Date Value Date Reference No Description Debit Credit Balance",
    "10-Feb-2024 10-Feb-2024 POS Purchase 500.0012,500.00",
]

EXPECTED_ROWS = [
    "01-Feb-2024 01-Feb-2024 Salary Transfer 5,000.0015,000.00",
    "05-Feb-2024 06-Feb-2024 ATM Withdrawal 2,000.0013,000.00",
    "10-Feb-2024 10-Feb-2024 POS Purchase 500.0012,500.00",
]


@pytest.fixture
def statement_text():
    """Raw statement text as the PDF loader returns it."""
    return "\n".join(PAGE_ONE + PAGE_TWO)


@pytest.fixture
def normalized_text(statement_text):
    return statement_text.replace("\n", " ")


def build_statement_pdf(pages):
    """Render each list of lines as one PDF page."""
    fpdf = pytest.importorskip("fpdf")
    from fpdf.enums import XPos, YPos

    pdf = fpdf.FPDF()
    pdf.set_font("Helvetica", size=9)
    for page in pages:
        pdf.add_page()
        for line in page:
            pdf.cell(0, 8, line, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    return bytes(pdf.output())


@pytest.fixture
def statement_pdf_bytes():
    """The same statement rendered as a two-page PDF."""
    return build_statement_pdf((PAGE_ONE, PAGE_TWO))
