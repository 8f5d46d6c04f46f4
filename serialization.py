from __future__ import annotations

from typing import Any, Iterable

from core.errors import QuestionFormatError
from models import (
    ImageMaterial,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    Session,
    StudyMaterial,
    TextMaterial,
    TrueFalseQuestion,
)

TEXT_PREVIEW_CHARS = 500


def _require(item: dict[str, Any], key: str) -> Any:
    if key not in item or item[key] is None:
        raise QuestionFormatError(f"Generated question is missing '{key}'")
    return item[key]


def question_from_payload(item: object, question_type: QuestionType) -> Question:
    """Build a question of the requested type; missing or malformed fields fail fast."""
    if not isinstance(item, dict):
        raise QuestionFormatError("Generated question is not an object")

    text = _require(item, "question")
    if not isinstance(text, str) or not text.strip():
        raise QuestionFormatError("Generated question text is empty")

    try:
        if question_type is QuestionType.MULTIPLE_CHOICE:
            options = _require(item, "options")
            correct = _require(item, "correctAnswer")
            if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
                raise QuestionFormatError("Generated options must be a list of strings")
            if not isinstance(correct, str):
                raise QuestionFormatError("Generated correctAnswer must be a string")
            return MultipleChoiceQuestion(text.strip(), list(options), correct)

        if question_type is QuestionType.TRUE_FALSE:
            return TrueFalseQuestion(text.strip(), _require(item, "answer"))
    except ValueError as exc:
        raise QuestionFormatError(str(exc)) from exc

    raise QuestionFormatError(f"Unsupported question type: {question_type}")


def questions_from_payload(
    items: object, question_type: QuestionType
) -> list[Question]:
    if not isinstance(items, list):
        raise QuestionFormatError("Generator response is not a list")
    return [question_from_payload(item, question_type) for item in items]


def question_to_payload(question: Question, reveal: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": question.question_type.value,
        "question": question.question,
    }
    if isinstance(question, MultipleChoiceQuestion):
        payload["options"] = list(question.options)
        if reveal:
            payload["correctAnswer"] = question.correct_answer
    elif isinstance(question, TrueFalseQuestion):
        if reveal:
            payload["answer"] = question.answer
    return payload


def questions_to_payload(questions: Iterable[Question]) -> list[dict[str, Any]]:
    return [question_to_payload(q) for q in questions]


def material_to_payload(material: StudyMaterial | None) -> dict[str, Any] | None:
    if material is None:
        return None
    if isinstance(material, TextMaterial):
        return {
            "kind": material.kind.value,
            "length": len(material.text),
            "preview": material.text[:TEXT_PREVIEW_CHARS],
        }
    if isinstance(material, ImageMaterial):
        return {
            "kind": material.kind.value,
            "mimeType": material.mime_type,
            "size": len(material.data),
        }
    raise TypeError(f"Unknown study material: {type(material).__name__}")


def serialize_session(
    session: Session, summary: dict[str, int] | None = None
) -> dict[str, Any]:
    """Snapshot for clients. Correct answers stay hidden until that question has feedback."""
    questions = [
        question_to_payload(q, reveal=index in session.feedback)
        for index, q in enumerate(session.questions)
    ]
    payload: dict[str, Any] = {
        "stage": session.stage.value,
        "language": session.language,
        "material": material_to_payload(session.material),
        "file": {
            "name": session.file_name,
            "contentType": session.content_type,
        } if session.has_file else None,
        "pagination": {
            "totalPages": session.total_pages,
            "startPage": session.start_page,
            "endPage": session.end_page,
        } if session.total_pages else None,
        "questionType": session.question_type.value if session.question_type else None,
        "questionCount": session.question_count,
        "questions": questions,
        "currentIndex": session.current_index,
        "userAnswers": {str(k): v for k, v in session.user_answers.items()},
        "feedback": {str(k): v for k, v in session.feedback.items()},
        "answerStatus": {str(k): v for k, v in session.answer_status.items()},
        "error": {
            "kind": session.error.kind,
            "message": session.error.message,
        } if session.error else None,
    }
    if summary is not None:
        payload["summary"] = summary
    return payload
