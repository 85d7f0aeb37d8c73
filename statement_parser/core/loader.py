"""
PDF loading and text extraction using pdfplumber.
"""
import io
import pdfplumber
from pathlib import Path
from typing import List, Union
import logging

from .errors import DocumentFormatError

logger = logging.getLogger(__name__)


LIGATURES = {
    'ﬁ': 'fi',
    'ﬂ': 'fl',
    'ﬀ': 'ff',
    'ﬃ': 'ffi',
    'ﬄ': 'ffl',
    'ﬆ': 'st',
    'ﬅ': 'st'
}

DocumentSource = Union[str, Path, bytes]


class PDFLoader:
    """Handles PDF loading and page text extraction."""

    def __init__(self, source: DocumentSource):
        self.source = source
        self._pdf = None
        self._pages = []

    def _open(self):
        if isinstance(self.source, (bytes, bytearray)):
            return pdfplumber.open(io.BytesIO(self.source))

        pdf_path = Path(self.source)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")
        return pdfplumber.open(pdf_path)

    def load(self) -> List[str]:
        """Load the PDF and extract the text of every page."""
        if self._pages:
            return self._pages

        try:
            self._pdf = self._open()
            logger.info(f"Loaded PDF with {len(self._pdf.pages)} pages")

            for i, page in enumerate(self._pdf.pages, 1):
                text = self._normalize_text(page.extract_text() or '')
                self._pages.append(text)
                logger.debug(f"Page {i}: {len(text)} characters extracted")

            return self._pages

        except FileNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Error loading PDF: {e}")
            raise DocumentFormatError(f"Could not read PDF document: {e}") from e

    def _normalize_text(self, text: str) -> str:
        """Expand ligatures; line breaks are kept for the statement normalizer."""
        for ligature, replacement in LIGATURES.items():
            text = text.replace(ligature, replacement)
        return text

    def extract_text(self) -> str:
        """Text of the whole document, one page after another."""
        return '\n'.join(self.load())

    def close(self):
        """Close the PDF file."""
        if self._pdf:
            self._pdf.close()
            self._pdf = None


def extract_raw_text(source: DocumentSource) -> str:
    """
    Extract the raw text of a PDF document.

    Args:
        source: Path to a PDF file or the PDF bytes

    Returns:
        Raw text with page breaks as newlines

    Raises:
        FileNotFoundError: If a path does not exist
        DocumentFormatError: If the input is not a readable PDF
    """
    loader = PDFLoader(source)
    try:
        return loader.extract_text()
    finally:
        loader.close()
