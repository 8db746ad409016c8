"""Resume document text: recognizes supported uploads and turns PDF/DOCX/TXT/DOC/RTF bytes into plain text."""

from __future__ import annotations

import io
import logging
from pathlib import PurePath

import fitz  # PyMuPDF
import pdfplumber
from docx import Document
from docx.oxml.table import CT_Tbl
from docx.oxml.text.paragraph import CT_P
from docx.table import Table

from resume_intake.core.config import settings

logger = logging.getLogger("resumes.documents")

RESUME_EXTENSIONS = {"pdf", "doc", "docx", "txt", "rtf"}


def _extension(filename: str | None) -> str:
    return PurePath(filename or "").suffix.lower().lstrip(".")


def is_resume_file(filename: str | None, content_type: str | None) -> bool:
    """Accept by extension first, then by a loose content-type check."""
    ctype = (content_type or "").lower()
    return (
        _extension(filename) in RESUME_EXTENSIONS
        or "pdf" in ctype
        or "word" in ctype
        or "document" in ctype
        or ctype == "text/plain"
        or "rtf" in ctype
    )


def _is_extraction_broken(text: str) -> bool:
    """
    Heuristic to check if text extraction resulted in one-char-per-line garbage.
    """
    if not text or not text.strip():
        return True
    lines = text.strip().split("\n")
    short_lines = sum(1 for line in lines if len(line.strip()) <= 2)
    # If more than 40% of lines are 1-2 chars, it's likely broken
    return len(lines) > 10 and (short_lines / len(lines)) > 0.4


def parse_pdf_content(data: bytes) -> str:
    """PyMuPDF reading-order text; pdfplumber when PyMuPDF yields nothing usable."""
    text = ""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = "\n".join(page.get_text("text", sort=True) for page in doc)
    except Exception as e:
        logger.warning("PyMuPDF failed to read PDF: %s", e)

    if text and not _is_extraction_broken(text):
        return text

    logger.info("PyMuPDF extraction empty or fragmented, falling back to pdfplumber")
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text(x_tolerance=2, y_tolerance=3) or "" for page in pdf.pages]
        return "\n".join(pages)
    except Exception as e:
        logger.warning("pdfplumber failed to read PDF: %s", e)
        return text


def parse_docx_content(data: bytes) -> str:
    """Body paragraphs and tables in document order; table rows joined with ' | '."""
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        logger.warning("Error reading DOCX: %s", e)
        return ""

    full_text = []
    for element in doc.element.body:
        if isinstance(element, CT_P):
            para_text = "".join(node.text or "" for node in element.iter() if node.tag.endswith("}t")).strip()
            if para_text:
                full_text.append(para_text)
        elif isinstance(element, CT_Tbl):
            table = Table(element, doc)
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    full_text.append(" | ".join(row_text))
    return "\n".join(full_text)


def parse_text_content(data: bytes, limit: int | None = None) -> str:
    """Helper for plain text (and best-effort DOC/RTF) files."""
    if limit is not None:
        data = data[:limit]
    return data.decode("utf-8", errors="replace")


def extract_text_from_bytes(filename: str | None, content_type: str | None, data: bytes) -> str:
    """
    Main entry point to extract text based on file extension / content type.
    Returns "" when nothing could be read; callers decide how to report that.
    """
    ext = _extension(filename)
    ctype = (content_type or "").lower()

    if ext == "txt" or ctype == "text/plain":
        return parse_text_content(data)
    if ext == "pdf" or (not ext and "pdf" in ctype):
        return parse_pdf_content(data)
    if ext == "docx":
        return parse_docx_content(data)
    if ext in {"doc", "rtf"}:
        return parse_text_content(data, limit=settings.MAX_RESUME_CHARS)
    return parse_text_content(data)
