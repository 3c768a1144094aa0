"""
Unit tests for resume text extraction.
"""

import pytest

from app.services.text_extraction import (
    PLACEHOLDER_MARKER,
    extract_text,
    is_placeholder,
    name_from_filename,
)


class TestNameFromFilename:

    @pytest.mark.parametrize("filename,expected", [
        ("jane_doe-resume.pdf", "Jane Doe"),
        ("ada-lovelace.docx", "Ada Lovelace"),
        ("/tmp/uploads/john smith cv.pdf", "John Smith"),
        ("resume.pdf", "Not specified"),
        ("jsmith", "Not specified"),
        ("", "Not specified"),
    ])
    def test_name_from_filename(self, filename, expected):
        assert name_from_filename(filename) == expected


class TestExtractText:

    def test_plain_text_is_decoded(self):
        content = "Jane Roe\nBackend Engineer\n".encode("utf-8")

        text = extract_text(content, "text/plain", "jane.txt")

        assert text.startswith("Jane Roe")
        assert not is_placeholder(text)

    def test_invalid_utf8_bytes_are_dropped(self):
        text = extract_text(b"Jane \xff\xfeRoe", "text/plain", "jane.txt")

        assert text == "Jane Roe"

    def test_empty_file_gives_placeholder(self):
        text = extract_text(b"   \n", "text/plain", "maria_garcia.txt")

        assert is_placeholder(text)
        assert "Name: Maria Garcia" in text
        assert "maria_garcia.txt" in text

    def test_corrupt_pdf_gives_placeholder(self):
        text = extract_text(b"definitely not a pdf", "application/pdf", "john_smith.pdf")

        assert is_placeholder(text)
        assert "Error processing file" in text

    def test_extension_drives_format_when_mime_is_generic(self):
        text = extract_text(b"garbage", "application/octet-stream", "broken.docx")

        assert is_placeholder(text)


class TestIsPlaceholder:

    def test_long_text_with_marker_is_not_placeholder(self):
        text = f"{PLACEHOLDER_MARKER} a real document\n" + "experience " * 50

        assert not is_placeholder(text)

    def test_text_without_marker(self):
        assert not is_placeholder("Jane Roe")
