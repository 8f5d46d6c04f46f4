"""Pydantic models."""
from api.models.session import (
    AnswerRequest,
    LanguageRequest,
    PageRangeRequest,
    QuestionCountRequest,
    QuestionTypeRequest,
    TextUpdate,
)

__all__ = [
    "AnswerRequest",
    "LanguageRequest",
    "PageRangeRequest",
    "QuestionCountRequest",
    "QuestionTypeRequest",
    "TextUpdate",
]
