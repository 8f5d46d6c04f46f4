from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, List

import requests

from core.errors import GenerationFailed, GeneratorConfigError, QuestionFormatError
from models import ImageMaterial, Question, QuestionType, StudyMaterial, TextMaterial
from serialization import questions_from_payload

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_REQUEST_TIMEOUT = 60

QuestionGenerator = Callable[[StudyMaterial, QuestionType, int, str], List[Question]]

MULTIPLE_CHOICE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "question": {"type": "STRING", "description": "The question text."},
        "options": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "An array of exactly 4 possible answers.",
        },
        "correctAnswer": {
            "type": "STRING",
            "description": "The correct answer from the options.",
        },
    },
    "required": ["question", "options", "correctAnswer"],
}

TRUE_FALSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "question": {"type": "STRING", "description": "The true/false statement."},
        "answer": {"type": "BOOLEAN", "description": "The correct answer, true or false."},
    },
    "required": ["question", "answer"],
}

SCHEMAS = {
    QuestionType.MULTIPLE_CHOICE: (MULTIPLE_CHOICE_SCHEMA, "multiple-choice questions"),
    QuestionType.TRUE_FALSE: (TRUE_FALSE_SCHEMA, "true/false questions"),
}


def build_prompt(question_type: QuestionType, count: int, language: str) -> str:
    _, type_name = SCHEMAS[question_type]
    difficulty = ""
    if question_type is QuestionType.MULTIPLE_CHOICE:
        difficulty = (
            "For the multiple-choice questions, ensure there are exactly four options. "
            "Make the incorrect options (distractors) plausible and closely related "
            "to the correct answer.\n"
        )
    return (
        f"Based on the following content, generate exactly {count} {type_name} in {language}.\n"
        "Focus on the core concepts and the most important information that is likely "
        "to be on a test: key features, conditions, methods, definitions and other "
        "significant details. Ignore secondary details or filler content.\n"
        "The questions must be self-contained and must not refer to the source with "
        'phrases like "According to the text".\n'
        f"{difficulty}"
        "Respond with a JSON array of objects that strictly follows the provided schema."
    )


def build_parts(material: StudyMaterial, prompt: str) -> list[dict[str, Any]]:
    if isinstance(material, TextMaterial):
        return [{"text": f"{prompt}\n\nText:\n---\n{material.text}\n---"}]
    if isinstance(material, ImageMaterial):
        return [
            {"text": prompt},
            {"inline_data": {"mime_type": material.mime_type, "data": material.data}},
        ]
    raise TypeError(f"Unknown study material: {type(material).__name__}")


def _response_text(payload: dict[str, Any]) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        feedback = payload.get("promptFeedback")
        raise GenerationFailed(f"Gemini returned no candidates: {feedback}")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise GenerationFailed("Gemini returned an empty response")
    return text.strip()


class GeminiQuestionGenerator:
    """Question generator backed by the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        api_url: str = DEFAULT_API_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else os.environ.get("GEMINI_API_KEY", "")
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/models/{self.model}:generateContent"

    def __call__(
        self,
        material: StudyMaterial,
        question_type: QuestionType,
        count: int,
        language: str,
    ) -> list[Question]:
        return self.generate(material, question_type, count, language)

    def generate(
        self,
        material: StudyMaterial,
        question_type: QuestionType,
        count: int,
        language: str,
    ) -> list[Question]:
        if not self.api_key:
            raise GeneratorConfigError("GEMINI_API_KEY is not set")
        if question_type not in SCHEMAS:
            raise GenerationFailed(f"Unsupported question type: {question_type}")

        schema, _ = SCHEMAS[question_type]
        body = {
            "contents": [
                {"parts": build_parts(material, build_prompt(question_type, count, language))}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": {"type": "ARRAY", "items": schema},
            },
        }

        session = requests.Session()
        session.headers.update({"x-goog-api-key": self.api_key})
        log.info(
            "Requesting %d %s question(s) in %s from %s",
            count, question_type.value, language, self.model,
        )
        try:
            response = session.post(self.endpoint, json=body, timeout=self.request_timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            log.error("Gemini request failed: %s", exc)
            raise GenerationFailed(f"Gemini request failed: {exc}") from exc
        finally:
            session.close()

        text = _response_text(payload)
        try:
            items = json.loads(text)
        except json.JSONDecodeError as exc:
            raise QuestionFormatError(f"Gemini response is not valid JSON: {exc}") from exc

        questions = questions_from_payload(items, question_type)
        if len(questions) != count:
            log.warning("Asked for %d questions, got %d", count, len(questions))
        return questions
