import base64

import pytest

from conftest import make_docx, make_image, make_pdf
from core.errors import ParseFailed, UnsupportedFileType
from material_extract import (
    DOCX_CONTENT_TYPE,
    FileKind,
    detect_kind,
    extract_docx_text,
    normalize_file,
)
from models import ImageMaterial, MaterialKind, RequiresPageSelection, TextMaterial


@pytest.mark.parametrize(
    "name, content_type, expected",
    [
        ("scan.png", "image/png", FileKind.IMAGE),
        ("photo.jpeg", None, FileKind.IMAGE),
        ("photo.webp", "application/octet-stream", FileKind.IMAGE),
        ("book.pdf", "application/pdf", FileKind.PDF),
        ("book.PDF", "", FileKind.PDF),
        ("notes.docx", "application/octet-stream", FileKind.WORD),
        ("notes", DOCX_CONTENT_TYPE, FileKind.WORD),
        ("notes.txt", "text/plain; charset=utf-8", FileKind.TEXT),
        ("data.csv", "text/csv", FileKind.UNKNOWN),
        ("archive.zip", None, FileKind.UNKNOWN),
    ],
)
def test_detect_kind(name: str, content_type: str | None, expected: FileKind) -> None:
    assert detect_kind(name, content_type) is expected


def test_image_becomes_base64_material() -> None:
    data = make_image("PNG")
    result = normalize_file("diagram.png", data, "image/png")
    assert isinstance(result, ImageMaterial)
    assert result.kind is MaterialKind.IMAGE
    assert result.mime_type == "image/png"
    assert base64.b64decode(result.data) == data


def test_pdf_requires_page_selection() -> None:
    data = make_pdf(["one", "two", "three"])
    result = normalize_file("lecture.pdf", data, "application/pdf")
    assert result == RequiresPageSelection(total_pages=3)


def test_docx_text_includes_paragraphs_and_tables() -> None:
    data = make_docx(["Mitochondria", "Powerhouse of the cell"], table_rows=["ATP", "NADH"])
    result = normalize_file("bio.docx", data, None)
    assert isinstance(result, TextMaterial)
    assert result.kind is MaterialKind.TEXT
    assert result.text == "Mitochondria\n\nPowerhouse of the cell\n\nATP\n\nNADH"


def test_docx_skips_empty_paragraphs() -> None:
    text = extract_docx_text(make_docx(["First", "", "Second"]))
    assert text == "First\n\nSecond"


def test_plain_text_is_read_whole() -> None:
    content = "Line one\nLine two\nПривет"
    result = normalize_file("notes.txt", content.encode("utf-8"), "text/plain")
    assert result == TextMaterial(content)


def test_plain_text_with_bom() -> None:
    result = normalize_file("notes.txt", "\ufeffhello".encode("utf-8"), "text/plain")
    assert result == TextMaterial("hello")


def test_unsupported_type_fails() -> None:
    with pytest.raises(UnsupportedFileType):
        normalize_file("table.csv", b"a,b\n1,2", "text/csv")


def test_invalid_utf8_text_fails() -> None:
    with pytest.raises(ParseFailed):
        normalize_file("notes.txt", b"\xff\xfe\xfa", "text/plain")


def test_corrupt_docx_fails() -> None:
    with pytest.raises(ParseFailed):
        normalize_file("broken.docx", b"not a zip archive", None)


def test_corrupt_pdf_fails() -> None:
    with pytest.raises(ParseFailed):
        normalize_file("broken.pdf", b"%PDF-garbage", "application/pdf")


def test_normalize_is_repeatable() -> None:
    data = make_docx(["Same every time"])
    assert normalize_file("a.docx", data) == normalize_file("a.docx", data)
