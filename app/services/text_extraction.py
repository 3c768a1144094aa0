"""
Resume text extraction (RawTextProvider).

Turns an uploaded file into best-effort plain text:
- PDF: parsed with pdfplumber
- DOCX: parsed with docx2txt
- Plain text / anything else: decoded as UTF-8

Never raises. When nothing usable comes out, a short placeholder containing
PLACEHOLDER_MARKER is returned so the extraction orchestrator can skip the
paid AI strategies and fall back to the filename.
"""

import io
import logging
import os
import re
import docx2txt
import pdfplumber

logger = logging.getLogger(__name__)

PLACEHOLDER_MARKER = "Resume extracted from"
PLACEHOLDER_MAX_LENGTH = 200

PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}


def name_from_filename(filename: str) -> str:
    """
    Guess a person name from a resume filename.

    "jane_doe-resume.pdf" -> "Jane Doe"; a single token such as "resume.pdf"
    is not a name.
    """
    base = re.sub(r"\.[^./]+$", "", os.path.basename(filename or ""))
    tokens = re.sub(r"[_\-]+", " ", base).split()
    if len(tokens) < 2:
        return "Not specified"
    return " ".join(token[:1].upper() + token[1:] for token in tokens[:2])


def placeholder_text(filename: str, reason: str) -> str:
    return (
        f"Name: {name_from_filename(filename)}\n"
        f"{PLACEHOLDER_MARKER} {filename}\n"
        f"{reason}"
    )


def is_placeholder(text: str) -> bool:
    """True for the degenerate text produced when extraction failed."""
    return PLACEHOLDER_MARKER in text and len(text) < PLACEHOLDER_MAX_LENGTH


def _extract_pdf(content: bytes) -> str:
    extracted_text = ""
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for page_num, page in enumerate(pdf.pages, 1):
            text = page.extract_text()
            if text:
                extracted_text += text + "\n"
                logger.debug(f"Extracted {len(text)} chars from page {page_num}")
    return extracted_text


def _extract_docx(content: bytes) -> str:
    # docx2txt accepts a path or a file-like object
    return docx2txt.process(io.BytesIO(content)) or ""


def extract_text(content: bytes, mime_type: str, filename: str) -> str:
    """
    Extract plain text from an uploaded resume.

    Args:
        content: Raw file bytes
        mime_type: Content type reported by the upload
        filename: Original filename (also drives format detection)

    Returns:
        str: Extracted text, or a placeholder when nothing could be read
    """
    file_ext = os.path.splitext(filename or "")[1].lower()

    try:
        if mime_type in PDF_TYPES or file_ext == ".pdf":
            text = _extract_pdf(content)
        elif mime_type in DOCX_TYPES or file_ext == ".docx":
            text = _extract_docx(content)
        else:
            text = content.decode("utf-8", errors="ignore")
    except Exception as e:
        logger.warning(f"Text extraction failed for {filename}: {e}")
        return placeholder_text(filename, "Error processing file. Please review and update candidate information manually.")

    if not text.strip():
        logger.warning(f"No text could be extracted from {filename}, using filename-based extraction")
        return placeholder_text(filename, "Please review and update candidate information manually.")

    logger.info(f"Extracted {len(text)} chars from {filename}")
    return text
