from __future__ import annotations

import logging
from typing import Callable

from models import MultipleChoiceQuestion, Session, Stage, TrueFalseQuestion
from translations import translate

log = logging.getLogger(__name__)

STATUS_CORRECT = "correct"
STATUS_INCORRECT = "incorrect"


class QuizRuntime:
    """Answer bookkeeping and navigation over ``session.questions``."""

    def __init__(self, session: Session, translator: Callable[[str, str], str] = translate):
        self.session = session
        self._t = translator

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.session.questions):
            raise IndexError(
                f"Question index {index} out of range (0..{len(self.session.questions) - 1})"
            )

    def select_answer(self, index: int, value: str) -> bool:
        """Record an answer. Answers are locked once the question has feedback."""
        self._check_index(index)
        if index in self.session.feedback:
            log.info("Ignoring answer change for checked question %d", index)
            return False
        self.session.user_answers[index] = value
        return True

    def check_answer(self, index: int) -> str | None:
        self._check_index(index)
        answer = self.session.user_answers.get(index)
        if answer is None:
            log.info("No answer recorded for question %d; nothing to check", index)
            return None

        question = self.session.questions[index]
        language = self.session.language
        if isinstance(question, MultipleChoiceQuestion):
            is_correct = answer == question.correct_answer
            correct_text = question.correct_answer
        elif isinstance(question, TrueFalseQuestion):
            is_correct = answer == str(question.answer).lower()
            correct_text = self._t(language, "true" if question.answer else "false")
        else:
            raise TypeError(f"Unknown question variant: {type(question).__name__}")

        if is_correct:
            message = self._t(language, "correct_feedback")
        else:
            message = f"{self._t(language, 'incorrect_feedback')} {correct_text}"

        self.session.feedback[index] = message
        self.session.answer_status[index] = STATUS_CORRECT if is_correct else STATUS_INCORRECT
        log.debug("Question %d checked: %s", index, self.session.answer_status[index])
        return message

    def advance(self) -> Stage:
        if self.session.current_index < len(self.session.questions) - 1:
            self.session.current_index += 1
        else:
            self.session.stage = Stage.COMPLETED
            log.info("Quiz completed: %s", self.summary())
        return self.session.stage

    def summary(self) -> dict[str, int]:
        status = self.session.answer_status
        return {
            "total": len(self.session.questions),
            "answered": len(status),
            "correct": sum(1 for v in status.values() if v == STATUS_CORRECT),
        }
