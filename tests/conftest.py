import io
from typing import Callable

import fitz
import pytest
from docx import Document
from PIL import Image

from models import MultipleChoiceQuestion, Question, TrueFalseQuestion
from session_machine import SessionController


class FakePdf:
    """Stands in for PdfDocument: one string per page, split into fragments on spaces."""

    def __init__(self, pages: list[str], fail_on: int | None = None):
        self.pages = pages
        self.fail_on = fail_on
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_fragments(self, page_number: int) -> list[str]:
        if page_number == self.fail_on:
            raise RuntimeError("corrupt content stream")
        return self.pages[page_number - 1].split(" ")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False


class FakeGenerator:
    def __init__(self, questions: list[Question] | None = None, error: Exception | None = None):
        self.questions = questions if questions is not None else []
        self.error = error
        self.calls: list[tuple] = []

    def __call__(self, material, question_type, count, language):
        self.calls.append((material, question_type, count, language))
        if self.error is not None:
            raise self.error
        return list(self.questions)


def mc(question: str = "Capital of France?", correct: str = "Paris") -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(question, ["Paris", "Rome", "Berlin", "Madrid"], correct)


def tf(question: str = "Water boils at 100C at sea level.", answer: bool = True) -> TrueFalseQuestion:
    return TrueFalseQuestion(question, answer)


def make_pdf(page_texts: list[str]) -> bytes:
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs: list[str], table_rows: list[str] | None = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=1)
        for index, text in enumerate(table_rows):
            table.cell(index, 0).text = text
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def make_image(fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (10, 10), color="red").save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_controller() -> Callable[..., SessionController]:
    def _make(generator=None, **kwargs) -> SessionController:
        kwargs.setdefault("processing_delay", 0)
        return SessionController(generator or FakeGenerator([mc(), mc("Capital of Italy?", "Rome")]), **kwargs)

    return _make
