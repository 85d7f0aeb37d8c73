"""
End-to-end parsing orchestration.
"""
from typing import Optional
import logging

from .anchors import HeaderExtractor, Strictness
from .detectors import DEFAULT_TEMPLATE_ID, TemplateDetector
from .loader import DocumentSource, extract_raw_text
from .normalize import normalize_statement_text
from .tables import TransactionSegmenter, extract_transactions
from ..models.schema import StatementDocument

logger = logging.getLogger(__name__)


class StatementParser:
    """Main parser class that orchestrates the entire parsing process."""

    def __init__(self, template_id: str = DEFAULT_TEMPLATE_ID,
                 strictness: Strictness = Strictness.FAIL_FAST, verbose: bool = False):
        self.template_id = template_id
        self.strictness = Strictness(strictness)
        self.verbose = verbose

        # Load template
        detector = TemplateDetector()
        self.template = detector.get_template(template_id)
        if not self.template:
            raise ValueError(f"Template not found: {template_id}")

        header_config = self.template.get('header', {})
        self.header_extractor = HeaderExtractor(
            labels=header_config.get('labels'),
            currencies=header_config.get('currencies'),
        )
        self.segmenter = TransactionSegmenter(**self.template.get('transactions', {}))

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, raw_text: str) -> StatementDocument:
        """
        Parse extracted statement text into structured data.

        Args:
            raw_text: Text extracted from the statement document

        Returns:
            StatementDocument object
        """
        text = normalize_statement_text(raw_text)

        # Header first: the opening balance seeds debit/credit classification
        header = self.header_extractor.extract(text, self.strictness)

        start = self.segmenter.locate(text)
        rows = self.segmenter.segment(text, start)
        transactions = extract_transactions(rows, header.opening_balance)

        logger.info(
            f"Parsed statement for account {header.account_number}: "
            f"{len(transactions)} transactions"
        )
        return StatementDocument(
            template_id=self.template_id,
            header=header,
            transactions=transactions,
        )

    def parse_pdf(self, source: DocumentSource) -> StatementDocument:
        """Extract the text of a PDF and parse it."""
        return self.parse(extract_raw_text(source))


def parse_statement(raw_text: str, template_id: str = DEFAULT_TEMPLATE_ID,
                    strictness: Strictness = Strictness.FAIL_FAST,
                    verbose: bool = False) -> StatementDocument:
    """
    Parse the extracted text of a bank statement.

    Args:
        raw_text: Text extracted from the statement document
        template_id: Template ID to use
        strictness: Reaction to missing header fields
        verbose: Enable verbose logging

    Returns:
        StatementDocument object
    """
    parser = StatementParser(template_id, strictness, verbose)
    return parser.parse(raw_text)


def parse_statement_pdf(source: DocumentSource, template_id: Optional[str] = None,
                        strictness: Strictness = Strictness.FAIL_FAST,
                        verbose: bool = False) -> StatementDocument:
    """
    Parse a bank statement PDF.

    Args:
        source: Path to a PDF file or the PDF bytes
        template_id: Template ID to use, detected from the text when omitted
        strictness: Reaction to missing header fields
        verbose: Enable verbose logging

    Returns:
        StatementDocument object
    """
    raw_text = extract_raw_text(source)

    if not template_id:
        template_id = TemplateDetector().resolve_template(raw_text)
        if not template_id:
            raise ValueError("Could not detect template for this statement")

    return parse_statement(raw_text, template_id, strictness, verbose)
