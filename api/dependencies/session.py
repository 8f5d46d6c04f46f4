"""Session controller dependency for FastAPI."""
from fastapi import Request

from api.config import (
    DEFAULT_LANGUAGE,
    GEMINI_API_KEY,
    GEMINI_API_URL,
    GEMINI_MODEL,
    GEMINI_REQUEST_TIMEOUT_SECONDS,
    GENERATION_TIMEOUT_SECONDS,
    PROCESSING_DELAY_SECONDS,
)
from question_generator import GeminiQuestionGenerator
from session_machine import SessionController


def build_controller() -> SessionController:
    """Create the single in-process session controller from configuration."""
    generator = GeminiQuestionGenerator(
        api_key=GEMINI_API_KEY,
        model=GEMINI_MODEL,
        api_url=GEMINI_API_URL,
        request_timeout=GEMINI_REQUEST_TIMEOUT_SECONDS,
    )
    return SessionController(
        generator,
        language=DEFAULT_LANGUAGE,
        processing_delay=PROCESSING_DELAY_SECONDS,
        generation_timeout=GENERATION_TIMEOUT_SECONDS,
    )


def get_controller(request: Request) -> SessionController:
    """Get the controller owned by the running application."""
    return request.app.state.controller
