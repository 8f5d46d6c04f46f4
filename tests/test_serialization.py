import pytest

from conftest import mc, tf
from core.errors import QuestionFormatError
from models import (
    MultipleChoiceQuestion,
    QuestionType,
    Session,
    Stage,
    TextMaterial,
    TrueFalseQuestion,
)
from serialization import question_from_payload, questions_from_payload, serialize_session


def test_multiple_choice_payload() -> None:
    question = question_from_payload(
        {"question": "2 + 2?", "options": ["3", "4", "5", "6"], "correctAnswer": "4"},
        QuestionType.MULTIPLE_CHOICE,
    )
    assert isinstance(question, MultipleChoiceQuestion)
    assert question.question_type is QuestionType.MULTIPLE_CHOICE
    assert question.correct_answer == "4"


def test_true_false_payload() -> None:
    question = question_from_payload(
        {"question": "The sun is a star.", "answer": True}, QuestionType.TRUE_FALSE
    )
    assert isinstance(question, TrueFalseQuestion)
    assert question.answer is True


@pytest.mark.parametrize(
    "item",
    [
        {"question": "Missing options", "correctAnswer": "a"},
        {"question": "Three options", "options": ["a", "b", "c"], "correctAnswer": "a"},
        {"question": "Wrong answer", "options": ["a", "b", "c", "d"], "correctAnswer": "z"},
        {"question": "", "options": ["a", "b", "c", "d"], "correctAnswer": "a"},
        {"options": ["a", "b", "c", "d"], "correctAnswer": "a"},
        "not an object",
    ],
)
def test_malformed_multiple_choice_fails_fast(item: object) -> None:
    with pytest.raises(QuestionFormatError):
        question_from_payload(item, QuestionType.MULTIPLE_CHOICE)


@pytest.mark.parametrize(
    "item",
    [{"question": "No answer"}, {"question": "String answer", "answer": "true"}],
)
def test_malformed_true_false_fails_fast(item: dict) -> None:
    with pytest.raises(QuestionFormatError):
        question_from_payload(item, QuestionType.TRUE_FALSE)


def test_response_must_be_a_list() -> None:
    with pytest.raises(QuestionFormatError):
        questions_from_payload({"questions": []}, QuestionType.TRUE_FALSE)


def test_snapshot_hides_answers_until_feedback() -> None:
    session = Session(stage=Stage.ANSWERING, material=TextMaterial("notes"))
    session.replace_questions([mc(), tf()])
    session.user_answers[0] = "Rome"
    session.feedback[0] = "Incorrect. The correct answer is: Paris"

    payload = serialize_session(session)

    assert payload["stage"] == "answering"
    assert payload["questions"][0]["correctAnswer"] == "Paris"
    assert "answer" not in payload["questions"][1]
    assert payload["questions"][1]["type"] == "true-false"
    assert payload["userAnswers"] == {"0": "Rome"}
    assert payload["material"]["kind"] == "text"
    assert payload["file"] is None
    assert payload["error"] is None
