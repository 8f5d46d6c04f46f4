"""Application configuration and constants."""
import os

from question_generator import DEFAULT_API_URL, DEFAULT_MODEL
from translations import DEFAULT_LANGUAGE as _FALLBACK_LANGUAGE


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Parse float from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Gemini
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
GEMINI_API_URL = os.environ.get("GEMINI_API_URL", DEFAULT_API_URL)
GEMINI_REQUEST_TIMEOUT_SECONDS = _parse_float_env("GEMINI_REQUEST_TIMEOUT_SECONDS", 60.0)

# Session flow
GENERATION_TIMEOUT_SECONDS = _parse_float_env("GENERATION_TIMEOUT_SECONDS", 90.0)
PROCESSING_DELAY_SECONDS = _parse_float_env("PROCESSING_DELAY_SECONDS", 1.5)
DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", _FALLBACK_LANGUAGE)

# Uploads
MAX_UPLOAD_BYTES = _parse_int_env("MAX_UPLOAD_BYTES", 20 * 1024 * 1024)  # 20 MB

# Server
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = _parse_int_env("PORT", 8000)
