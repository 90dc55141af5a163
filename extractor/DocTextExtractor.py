# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-10-12
# Description: DocTextExtractor
# -----------------------------------------------------------------------------
import time
from typing import List, Optional

import fitz

from utility.errors import ExtractionError
from utility.logging_utils import get_class_logger

PLAIN_TEXT_SUFFIXES = (".txt", ".md")


class DocTextExtractor:
    def __init__(self, logger=None):
        self.logger = logger or get_class_logger(self.__class__)

    def extract(self, data: bytes, filename: Optional[str] = None) -> str:
        """
        Turn document bytes into plain text.
        PDF pages are joined with a blank line so page breaks act as paragraph breaks.
        Raises ExtractionError when the bytes cannot be parsed or yield no text.
        """
        if filename and filename.lower().endswith(PLAIN_TEXT_SUFFIXES):
            text = self._decode_plain_text(data, filename)
        else:
            text = "\n\n".join(p for p in self.extract_pages(data) if p)

        if not text.strip():
            self.logger.warning("No text content found in document %r", filename)
            raise ExtractionError(f"No text content found in {filename or 'document'}")
        return text

    def extract_pages(self, pdf_bytes: bytes) -> List[str]:
        """
        Extracts text from PDF bytes using PyMuPDF (fitz).
        Returns: list of page texts (page 1 = index 0)
        """
        if not pdf_bytes:
            raise ExtractionError("Empty document")

        start = time.time()
        page_texts: List[str] = []
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
                for page in doc:
                    text = page.get_text("text") or ""
                    page_texts.append(text.strip())

                elapsed = (time.time() - start) * 1000.0
                self.logger.info(
                    "Extracted text from PDF (%d pages, %.1f ms)", len(doc), elapsed
                )

            return page_texts

        except Exception as e:
            self.logger.error("Failed to extract text from PDF: %s", e)
            raise ExtractionError("Failed to extract text from PDF") from e

    def _decode_plain_text(self, data: bytes, filename: str) -> str:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            self.logger.error("Failed to decode %r as UTF-8: %s", filename, e)
            raise ExtractionError(f"{filename} is not valid UTF-8 text") from e

        self.logger.info("Decoded plain text document %r (%d chars)", filename, len(text))
        return text
