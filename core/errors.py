"""Domain errors raised by the ingestion pipeline and the session controller."""
from __future__ import annotations


class QuizError(Exception):
    """Base class for errors that end up on the session as a user-visible message."""

    kind = "QuizError"
    message_key = "error_generic"


class UnsupportedFileType(QuizError):
    kind = "UnsupportedFileType"
    message_key = "error_unsupported_file"


class ParseFailed(QuizError):
    kind = "ParseFailed"
    message_key = "error_parsing_failed"


class InvalidPageRange(QuizError):
    kind = "InvalidPageRange"
    message_key = "error_invalid_page_range"


class PageExtractionFailed(QuizError):
    kind = "PageExtractionFailed"
    message_key = "error_parsing_failed"

    def __init__(self, page_number: int, reason: str = ""):
        self.page_number = page_number
        detail = f"Failed to read page {page_number}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class NoMaterialProvided(QuizError):
    kind = "NoMaterialProvided"
    message_key = "error_no_text"


class GenerationFailed(QuizError):
    kind = "GenerationFailed"
    message_key = "error_generation_failed"


class GenerationTimeout(GenerationFailed):
    kind = "GenerationTimeout"


class QuestionFormatError(GenerationFailed):
    """The generator returned an item that does not match the question schema."""

    kind = "QuestionFormatError"


class GeneratorConfigError(GenerationFailed):
    kind = "GeneratorConfigError"


class InvalidTransition(Exception):
    """An action was requested from a stage where it is not defined.

    This is a caller error and is never stored on the session.
    """

    def __init__(self, action: str, stage: object):
        self.action = action
        self.stage = stage
        super().__init__(f"Action '{action}' is not allowed in stage {stage}")
