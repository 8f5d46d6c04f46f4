"""Shared infrastructure: logging setup and domain errors."""
from core.errors import (
    GenerationFailed,
    GenerationTimeout,
    GeneratorConfigError,
    InvalidPageRange,
    InvalidTransition,
    NoMaterialProvided,
    PageExtractionFailed,
    ParseFailed,
    QuestionFormatError,
    QuizError,
    UnsupportedFileType,
)
from core.logging_setup import setup_console_logging

__all__ = [
    "GenerationFailed",
    "GenerationTimeout",
    "GeneratorConfigError",
    "InvalidPageRange",
    "InvalidTransition",
    "NoMaterialProvided",
    "PageExtractionFailed",
    "ParseFailed",
    "QuestionFormatError",
    "QuizError",
    "UnsupportedFileType",
    "setup_console_logging",
]
