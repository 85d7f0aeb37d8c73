"""
Debug view of transaction row segmentation for checking new statement layouts.
"""
from typing import List, Optional
import logging

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.detectors import TemplateDetector
from ..core.errors import RowExtractionError
from ..core.normalize import normalize_statement_text
from ..core.tables import TransactionSegmenter, extract_dates, split_amounts

logger = logging.getLogger(__name__)


class RowDebugger:
    """Shows how a statement text is cut into rows and where amounts are found."""

    def __init__(self, template_id: str):
        self.template_id = template_id

        detector = TemplateDetector()
        self.template = detector.get_template(template_id)
        if not self.template:
            raise ValueError(f"Template not found: {template_id}")

        self.segmenter = TransactionSegmenter(**self.template.get('transactions', {}))

    def segment(self, raw_text: str) -> List[str]:
        return self.segmenter.segment(normalize_statement_text(raw_text))

    def build_table(self, raw_text: str) -> Table:
        """
        Build a table with one line per segmented row.

        Rows that would fail extraction are kept and flagged in red so a
        layout change can be located in the source text.
        """
        table = Table(title=f"Transaction rows ({self.template_id})")
        table.add_column("#", justify="right")
        table.add_column("Dates")
        table.add_column("Amount", justify="right")
        table.add_column("Balance", justify="right")
        table.add_column("Row text")

        for i, row in enumerate(self.segment(raw_text), 1):
            try:
                transaction_date, value_date = extract_dates(row)
                (a_start, a_end), (b_start, b_end) = split_amounts(row)
                table.add_row(
                    str(i),
                    f"{transaction_date} / {value_date}",
                    row[a_start:a_end],
                    row[b_start:b_end],
                    Text(row),
                )
            except RowExtractionError as e:
                logger.debug(f"Row {i} failed: {e}")
                table.add_row(str(i), Text("error", style="red"), "", "", Text(row, style="red"))

        return table


def print_rows(raw_text: str, template_id: str, console: Optional[Console] = None):
    """Print the row segmentation of a statement text."""
    console = console or Console()
    console.print(RowDebugger(template_id).build_table(raw_text))
