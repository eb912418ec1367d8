"""
Plain-text extraction from uploaded documents (PDF, DOCX, TXT, MD).
"""
import io
import os

import fitz  # PyMuPDF
from docx import Document

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md")


class UnsupportedDocumentError(ValueError):
    """The uploaded file type cannot be parsed."""


class DocumentParseError(ValueError):
    """The document was readable but yielded no text."""


def parse_pdf(content: bytes) -> str:
    """Extract text from PDF page by page."""
    with fitz.open(stream=content, filetype="pdf") as pdf_document:
        return "\n".join(page.get_text() for page in pdf_document)


def parse_docx(content: bytes) -> str:
    """Extract paragraph text from a DOCX file."""
    document = Document(io.BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def parse_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def parse_document(filename: str, content: bytes) -> str:
    """
    Extract raw text from a document based on its extension.

    Args:
        filename: Original filename (used only for the extension)
        content: Raw file bytes

    Returns:
        Extracted text (may be empty)

    Raises:
        UnsupportedDocumentError for anything but PDF, DOCX, TXT or MD
    """
    extension = os.path.splitext(filename or "")[1].lower()

    if extension == ".pdf":
        return parse_pdf(content)
    if extension == ".docx":
        return parse_docx(content)
    if extension in (".txt", ".md"):
        return parse_text(content)

    raise UnsupportedDocumentError("Unsupported file type. Please upload PDF, DOCX, or TXT files.")
