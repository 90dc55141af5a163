# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-10-16
# Description: test_doc_text_extractor.py
# -----------------------------------------------------------------------------
import pytest

from extractor.DocTextExtractor import DocTextExtractor
from utility.errors import ExtractionError


def test_pdf_pages_are_joined_with_blank_line(make_pdf):
    extractor = DocTextExtractor()
    data = make_pdf("First page text", "Second page text")

    pages = extractor.extract_pages(data)
    text = extractor.extract(data, "manual.pdf")

    assert len(pages) == 2
    assert "First page text" in pages[0]
    assert "Second page text" in pages[1]
    assert text == pages[0] + "\n\n" + pages[1]


def test_blank_pages_are_skipped(make_pdf):
    extractor = DocTextExtractor()
    text = extractor.extract(make_pdf("Only content", ""), "manual.pdf")

    assert text.strip() == "Only content"


def test_pdf_without_text_raises(make_pdf):
    with pytest.raises(ExtractionError):
        DocTextExtractor().extract(make_pdf(""), "scan.pdf")


def test_garbage_bytes_raise_extraction_error():
    with pytest.raises(ExtractionError):
        DocTextExtractor().extract(b"definitely not a pdf", "broken.pdf")


def test_empty_bytes_raise_extraction_error():
    with pytest.raises(ExtractionError):
        DocTextExtractor().extract(b"", "empty.pdf")


def test_plain_text_is_decoded():
    text = DocTextExtractor().extract("Héllo\n\nworld".encode("utf-8"), "notes.txt")
    assert text == "Héllo\n\nworld"


def test_invalid_utf8_text_raises():
    with pytest.raises(ExtractionError):
        DocTextExtractor().extract(b"\xff\xfe\xfa", "notes.md")
