"""Locale strings for MoltView, with English as the fallback catalogue."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from src.core.fetch_state import FetchError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOCALE_DIR = PROJECT_ROOT / "src" / "resources" / "locales"
FALLBACK_LOCALE = "en_US"

logger = logging.getLogger("moltview")


class I18nManager:
    """Thread-safe singleton holding the active locale catalogue.

    Keys use dot notation ("errors.http_status"). A key the active locale
    lacks is looked up in the fallback catalogue next; a key neither has is
    returned as-is.
    """

    _instance = None
    _lock = threading.RLock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._catalogue: dict[str, Any] = {}
        self._fallback: dict[str, Any] = {}
        self._locale = FALLBACK_LOCALE
        self._initialized = True

    def load_locale(self, locale: str) -> None:
        """Switch to LOCALE_DIR/{locale}.json.

        A missing or unreadable file is logged and the current catalogue kept.
        """
        with self._lock:
            catalogue = self._read(locale)
            if catalogue is None:
                return
            self._catalogue = catalogue
            self._locale = locale
            if locale == FALLBACK_LOCALE:
                self._fallback = catalogue
            else:
                self._fallback = self._read(FALLBACK_LOCALE) or {}
            logger.info(f"Loaded locale: {locale}")

    def get(self, key: str, **kwargs) -> str:
        """Translated string for ``key`` with ``{placeholders}`` filled in.

        Never raises; unknown keys come back unchanged.
        """
        with self._lock:
            template = self._lookup(self._catalogue, key)
            if template is None:
                template = self._lookup(self._fallback, key)
            if template is None:
                return key

        if not kwargs:
            return template
        try:
            return template.format_map(kwargs)
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to format i18n string for key '{key}': {e}")
            return template

    def describe_error(self, error: FetchError) -> str:
        """User-facing message for a failed fetch."""
        return self.get(error.i18n_key, code=error.status_code)

    @property
    def locale(self) -> str:
        with self._lock:
            return self._locale

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (tests)."""
        with cls._lock:
            cls._instance = None

    @staticmethod
    def _read(locale: str) -> Optional[dict]:
        path = LOCALE_DIR / f"{locale}.json"
        if not path.exists():
            logger.warning(f"Locale file not found: {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse locale file {path}: {e}")
            return None
        except OSError as e:
            logger.warning(f"Failed to load locale file {path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Locale file {path} is not a JSON object")
            return None
        return data

    @staticmethod
    def _lookup(catalogue: dict, key: str) -> Optional[str]:
        node: Any = catalogue
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None
