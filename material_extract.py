from __future__ import annotations

import enum
import io
import logging
import mimetypes
import zipfile
from pathlib import Path
from typing import Union

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from core.errors import ParseFailed, UnsupportedFileType
from image_convert import encode_image
from models import RequiresPageSelection, StudyMaterial, TextMaterial
from page_extract import open_pdf

log = logging.getLogger(__name__)

DOCX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}
EXTENSION_TYPES = {
    ".pdf": "application/pdf",
    ".docx": DOCX_CONTENT_TYPE,
    ".txt": "text/plain",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}

NormalizeResult = Union[StudyMaterial, RequiresPageSelection]


class FileKind(str, enum.Enum):
    IMAGE = "image"
    PDF = "pdf"
    WORD = "word"
    TEXT = "text"
    UNKNOWN = "unknown"


def resolve_content_type(file_name: str, content_type: str | None) -> str:
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type not in GENERIC_CONTENT_TYPES:
        return content_type
    suffix = Path(file_name).suffix.lower()
    if suffix in EXTENSION_TYPES:
        return EXTENSION_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or content_type


def detect_kind(file_name: str, content_type: str | None) -> FileKind:
    resolved = resolve_content_type(file_name, content_type)
    suffix = Path(file_name).suffix.lower()
    if resolved.startswith("image/"):
        return FileKind.IMAGE
    if resolved == "application/pdf":
        return FileKind.PDF
    if suffix == ".docx" or resolved == DOCX_CONTENT_TYPE:
        return FileKind.WORD
    if resolved == "text/plain":
        return FileKind.TEXT
    return FileKind.UNKNOWN


# ---- Word: body paragraphs and table cells in document order ----
def extract_docx_text(data: bytes) -> str:
    try:
        doc = Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        log.warning("DOCX could not be opened: %s", exc)
        raise ParseFailed(f"Invalid Word document: {exc}") from exc

    paragraphs: list[str] = []
    body = doc.element.body
    for block in body.iterchildren():
        tag = block.tag
        if tag.endswith("}p"):
            paragraphs.append(_paragraph_text(block))
        elif tag.endswith("}tbl"):
            for p in block.iter():
                if p.tag.endswith("}p"):
                    paragraphs.append(_paragraph_text(p))

    text = "\n\n".join(p for p in paragraphs if p.strip())
    log.info("DOCX text extracted: %d paragraphs, %d chars", len(paragraphs), len(text))
    return text


def _paragraph_text(p) -> str:
    parts: list[str] = []
    for node in p.iter():
        tag = node.tag
        if tag.endswith("}t") and node.text:
            parts.append(node.text)
        elif tag.endswith("}tab"):
            parts.append("\t")
        elif tag.endswith("}br") or tag.endswith("}cr"):
            parts.append("\n")
    return "".join(parts)


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        log.warning("Text file is not valid UTF-8: %s", exc)
        raise ParseFailed("Text file is not valid UTF-8") from exc


def count_pdf_pages(data: bytes) -> int:
    with open_pdf(data) as pdf:
        return pdf.page_count


def normalize_file(
    file_name: str, data: bytes, content_type: str | None = None
) -> NormalizeResult:
    """
    Turn an uploaded document into study material.

    PDFs are not extracted here: the caller gets RequiresPageSelection and
    extracts once the user picks a page range.
    """
    kind = detect_kind(file_name, content_type)
    log.info("Normalizing %s as %s (%d bytes)", file_name, kind.value, len(data))

    if kind is FileKind.IMAGE:
        return encode_image(data, resolve_content_type(file_name, content_type))
    if kind is FileKind.PDF:
        return RequiresPageSelection(total_pages=count_pdf_pages(data))
    if kind is FileKind.WORD:
        return TextMaterial(extract_docx_text(data))
    if kind is FileKind.TEXT:
        return TextMaterial(decode_text(data))

    raise UnsupportedFileType(f"Unsupported file: {file_name} ({content_type or 'unknown type'})")
