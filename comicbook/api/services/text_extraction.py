"""Story text extraction from uploaded PDFs."""

import io
import logging

import pdfplumber

from ...core.errors import TextExtractionError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Extracts plain text from PDF bytes with pdfplumber."""

    def extract(self, data: bytes) -> str:
        """
        Extract the text of every page, joined by newlines.

        Raises:
            TextExtractionError: If the bytes are not a readable PDF
        """
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            raise TextExtractionError(f"Failed to extract text from PDF: {e}") from e

        logger.info(f"Extracted text from {len(pages)} PDF page(s)")
        return "\n".join(pages)
