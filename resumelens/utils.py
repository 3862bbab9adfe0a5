from __future__ import annotations
import io
import logging
import re
import unicodedata
from pathlib import Path
from typing import List

from .errors import ExtractionError
from .state import Document, ExtractedText

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPES = {"text/plain", "text/markdown"}

SUFFIX_MEDIA_TYPES = {
    ".pdf": PDF,
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".docx": DOCX,
}


def media_type_for(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    try:
        return SUFFIX_MEDIA_TYPES[suffix]
    except KeyError:
        raise ValueError("Unsupported CV format. Use .pdf, .txt, .md or .docx") from None


def load_document(path: str) -> Document:
    p = Path(path)
    return Document(content=p.read_bytes(), media_type=media_type_for(p.name), name=p.name)


def slugify(value: str) -> str:
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9-]+", "-", value).strip("-")
    value = re.sub(r"-+", "-", value)
    return value.lower() or "report"


def pdf_to_pages(content: bytes) -> List[str]:
    from pypdf import PdfReader

    try:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError("PDF is encrypted and cannot be opened without a password.")
        return [(page.extract_text() or "").strip() for page in reader.pages]
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to read PDF file: {e}") from e


def docx_to_paragraphs(content: bytes) -> List[str]:
    from docx import Document as DocxDocument

    try:
        document = DocxDocument(io.BytesIO(content))
    except Exception as e:
        raise ExtractionError(f"Failed to read DOCX file: {e}") from e
    return [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]


def decode_text(content: bytes) -> List[str]:
    try:
        return [content.decode("utf-8-sig")]
    except UnicodeDecodeError as e:
        raise ExtractionError(f"Text file is not valid UTF-8: {e}") from e


class DocumentTextExtractor:
    """Converts an uploaded resume into ordered text fragments, one per page or segment."""

    def extract(self, document: Document) -> ExtractedText:
        if document.content is None:
            logger.info("Document %s has no readable payload here; skipping extraction", document.name or "<unnamed>")
            return ExtractedText()

        media_type = (document.media_type or "").split(";")[0].strip().lower()
        if media_type == PDF:
            fragments = pdf_to_pages(document.content)
        elif media_type == DOCX:
            fragments = docx_to_paragraphs(document.content)
        elif media_type in TEXT_TYPES:
            fragments = decode_text(document.content)
        else:
            raise ExtractionError(f"Unsupported media type '{document.media_type}'")

        extracted = ExtractedText(fragments=fragments)
        if extracted.low_confidence:
            logger.warning("No extractable text found in %s", document.name or media_type)
        return extracted
