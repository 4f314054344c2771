"""Logging setup for MoltView with credential masking."""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE_NAME = "moltview.log"
LOGGER_NAME = "moltview"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(threadName)s - %(message)s"


class SensitiveDataFilter(logging.Filter):
    """Mask bearer tokens and URL query strings.

    Search terms and agent names travel in the query string, so the whole
    query is hidden while the path stays readable.
    """

    BEARER_PATTERN = re.compile(r'(Bearer\s+)[^\s\'",]+', re.IGNORECASE)
    QUERY_PATTERN = re.compile(r'(https?://[^\s?]+)\?[^\s]*')

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.mask(record.msg)
        return True

    @classmethod
    def mask(cls, text: str) -> str:
        text = cls.BEARER_PATTERN.sub(r'\1[TOKEN_MASKED]', text)
        return cls.QUERY_PATTERN.sub(r'\1?[QUERY_MASKED]', text)


def _build_handlers(log_level: str, log_dir: Path) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    rotating = logging.handlers.RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    for handler in (console, rotating):
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
    return [console, rotating]


def setup_logger(log_level: str = "INFO", mask_logs: bool = True,
                 log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure the "moltview" logger once at startup.

    Adds a console handler and a rotating file handler under ``log_dir``
    (default LOG_DIR). Calling it again returns the already configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    target_dir = log_dir or LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    logger.setLevel(log_level)

    masking = SensitiveDataFilter() if mask_logs else None
    for handler in _build_handlers(log_level, target_dir):
        if masking is not None:
            handler.addFilter(masking)
        logger.addHandler(handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
