"""
Text extraction from stored documents.

Uses PyPDF2 for PDFs; plain-text uploads are read directly. Other types
(Word files, images) yield no text. Extraction is blocking; async callers
run it through asyncio.to_thread.
"""

import logging
from pathlib import Path
from typing import List

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)


def extract_text_from_pdf(file_path: str | Path) -> str:
    """Extract all text from a PDF file, page by page."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")

    reader = PdfReader(str(path))
    parts: List[str] = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            parts.append(text)
    return "\n".join(parts)


def extract_document_text(file_path: str | Path, mimetype: str = "") -> str:
    """Best available text for a stored upload; empty string when the type has none."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Stored file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".pdf" or "pdf" in mimetype:
        try:
            return extract_text_from_pdf(path)
        except PdfReadError as e:
            logger.warning("Unreadable PDF %s: %s", path, e)
            return ""
    if suffix == ".txt" or mimetype.startswith("text/"):
        return path.read_text(encoding="utf-8", errors="replace")
    return ""


def excerpt(text: str, size: int = 500) -> str:
    """Leading slice of text, cut on a word boundary when possible."""
    text = (text or "").strip()
    if len(text) <= size:
        return text
    end = size
    last_space = text.rfind(" ", 0, size + 1)
    if last_space > 0:
        end = last_space
    return text[:end].rstrip()
