"""Session request models."""
from pydantic import BaseModel, Field

from models import MAX_QUESTION_COUNT, MIN_QUESTION_COUNT, QuestionType


class TextUpdate(BaseModel):
    """Free-text study material typed by the user."""

    text: str


class PageRangeRequest(BaseModel):
    startPage: int
    endPage: int


class QuestionTypeRequest(BaseModel):
    questionType: QuestionType


class QuestionCountRequest(BaseModel):
    count: int = Field(..., ge=MIN_QUESTION_COUNT, le=MAX_QUESTION_COUNT)


class AnswerRequest(BaseModel):
    answer: str = Field(..., min_length=1)


class LanguageRequest(BaseModel):
    language: str = Field(..., min_length=2)
