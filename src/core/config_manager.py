"""Thread-safe singleton configuration manager for MoltView."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from src.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


SUPPORTED_LOCALES = ["en_US", "ko_KR"]
FEED_SORTS = ["hot", "new", "top", "rising"]

DEFAULT_CONFIG = {
    "app": {
        "locale": "en_US",
        "version": "1.0.0",
        "log_level": "INFO",
    },
    "api": {
        "base_url": "https://www.moltbook.com/api/v1",
        "timeout": 30,
        "mock_mode": False,
    },
    "feed": {
        "sort": "hot",
        "limit": 25,
    },
    "search": {
        "debounce_ms": 300,
    },
    "auth": {
        "token_path": "config/token",
    },
    "security": {
        "mask_logs": True,
    },
}


# --- Validators: return the value to store, or None to ignore the change ---

def _one_of(choices: list) -> Callable[[str, Any], Optional[Any]]:
    def check(key: str, value: Any) -> Optional[Any]:
        if value not in choices:
            logger.warning(f"Invalid {key} '{value}'. Must be one of {choices}. Ignoring.")
            return None
        return value
    return check


def _int_range(minimum: int, maximum: Optional[int] = None) -> Callable[[str, Any], Optional[int]]:
    def check(key: str, value: Any) -> Optional[int]:
        try:
            number = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid {key} '{value}'. Must be int. Ignoring.")
            return None
        clamped = max(number, minimum)
        if maximum is not None:
            clamped = min(clamped, maximum)
        if clamped != number:
            logger.warning(f"{key} {number} out of range. Forcing to {clamped}.")
        return clamped
    return check


VALIDATORS = {
    "app.locale": _one_of(SUPPORTED_LOCALES),
    "api.timeout": _int_range(5),
    "feed.sort": _one_of(FEED_SORTS),
    "feed.limit": _int_range(1, 100),
    "search.debounce_ms": _int_range(0),
}


class ConfigManager:
    """Thread-safe singleton over ``config/settings.yaml``.

    The file is created from DEFAULT_CONFIG on first run. Keys missing from
    an existing file fall back to their defaults. Access uses dot notation
    ("feed.limit"); ``update()`` validates through VALIDATORS and saves.
    """

    _instance = None
    _lock = threading.RLock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, '_initialized'):
            return

        with self._lock:
            if hasattr(self, '_initialized'):
                return

            self.PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
            self.CONFIG_PATH = self.PROJECT_ROOT / "config" / "settings.yaml"
            self._config = {}
            self._instance_lock = threading.RLock()

            self._load_or_create_config()
            self._initialized = True

    def _load_or_create_config(self):
        if not self.CONFIG_PATH.exists():
            logger.info(f"No settings at {self.CONFIG_PATH}; writing defaults")
            self._config = self._deep_copy(DEFAULT_CONFIG)
            self.save()
            return

        try:
            with open(self.CONFIG_PATH, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.error(f"Failed to read {self.CONFIG_PATH}: {e}. Using defaults.")
            self._config = self._deep_copy(DEFAULT_CONFIG)
            return

        if not isinstance(loaded, dict):
            logger.error(f"{self.CONFIG_PATH} is not a mapping. Using defaults.")
            loaded = {}
        self._config = self._merge(DEFAULT_CONFIG, loaded)
        self._validate_loaded()
        logger.info(f"Loaded configuration from {self.CONFIG_PATH}")

    def _validate_loaded(self):
        """Run VALIDATORS over file values; a rejected value reverts to its default."""
        for key, validator in VALIDATORS.items():
            checked = validator(key, self.get(key))
            if checked is None:
                section, name = key.split(".")
                checked = DEFAULT_CONFIG[section][name]
            self.set(key, checked)

    def get(self, key: str, default=None) -> Any:
        """Value at a dot-notation key, or ``default``.

        Example:
            >>> config.get("api.base_url")
            'https://www.moltbook.com/api/v1'
        """
        with self._instance_lock:
            node = self._config
            for part in key.split('.'):
                if not isinstance(node, dict) or part not in node:
                    return default
                node = node[part]
            return node

    def set(self, key: str, value: Any) -> None:
        """Set a value in memory only; see save()."""
        with self._instance_lock:
            *parents, leaf = key.split('.')
            node = self._config
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = value

    def update(self, changes: dict) -> None:
        """Validate a flat {dot.key: value} batch, apply it and save once."""
        with self._instance_lock:
            for key, value in changes.items():
                validator = VALIDATORS.get(key)
                if validator is not None:
                    value = validator(key, value)
                    if value is None:
                        continue
                self.set(key, value)
            self.save()

    def save(self) -> None:
        with self._instance_lock:
            try:
                self.CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
                with open(self.CONFIG_PATH, 'w', encoding='utf-8') as f:
                    yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to save configuration: {e}")
                raise ConfigError(f"Failed to save configuration: {e}")
            logger.debug(f"Saved configuration to {self.CONFIG_PATH}")

    def get_token_path(self) -> Path:
        """Absolute path of the stored bearer token file."""
        relative = self.get("auth.token_path", DEFAULT_CONFIG["auth"]["token_path"])
        return self.PROJECT_ROOT / relative

    @property
    def debounce_sec(self) -> float:
        """Search debounce interval in seconds."""
        return self.get("search.debounce_ms", DEFAULT_CONFIG["search"]["debounce_ms"]) / 1000

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (tests)."""
        with cls._lock:
            cls._instance = None

    @staticmethod
    def _deep_copy(obj):
        if isinstance(obj, dict):
            return {k: ConfigManager._deep_copy(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [ConfigManager._deep_copy(item) for item in obj]
        return obj

    @staticmethod
    def _merge(defaults: dict, overrides: dict) -> dict:
        """Defaults overlaid with user values, recursing into sections."""
        merged = ConfigManager._deep_copy(defaults)
        for key, value in overrides.items():
            if isinstance(merged.get(key), dict):
                if isinstance(value, dict):
                    merged[key] = ConfigManager._merge(merged[key], value)
                else:
                    logger.warning(f"Config section '{key}' is not a mapping. Using defaults.")
            else:
                merged[key] = ConfigManager._deep_copy(value)
        return merged
