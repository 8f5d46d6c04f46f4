from __future__ import annotations
import logging
import os

NOISY_LOGGERS = ("urllib3", "multipart", "python_multipart", "PIL")


def _level_from_env(default: int) -> int:
    raw = os.environ.get("LOG_LEVEL")
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def setup_console_logging(level: int = logging.INFO) -> None:
    """
    Call once at process start. LOG_LEVEL overrides the given level.
    """
    level = _level_from_env(level)
    root = logging.getLogger()
    if root.handlers:
        # already configured by uvicorn or a previous call
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
