"""Bearer token storage injected into the transport."""

import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from src.core.exceptions import ConfigError

logger = logging.getLogger("moltview")


class CredentialStore(ABC):
    """Holds the API bearer token. Never talks to the network."""

    @abstractmethod
    def get_token(self) -> Optional[str]:
        ...

    @abstractmethod
    def set_token(self, token: Optional[str]) -> None:
        """Store a token, or delete it when ``token`` is None."""
        ...

    @property
    def is_authenticated(self) -> bool:
        return self.get_token() is not None


class MemoryCredentialStore(CredentialStore):
    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._lock = threading.Lock()

    def get_token(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set_token(self, token: Optional[str]) -> None:
        with self._lock:
            self._token = token


class FileCredentialStore(CredentialStore):
    """Token kept in a single owner-readable file.

    An empty or whitespace-only file counts as no token.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def get_token(self) -> Optional[str]:
        with self._lock:
            try:
                token = self._path.read_text(encoding="utf-8").strip()
            except FileNotFoundError:
                return None
            except OSError as e:
                logger.warning(f"Could not read token file {self._path}: {e}")
                return None
            return token or None

    def set_token(self, token: Optional[str]) -> None:
        with self._lock:
            if token is None:
                self._path.unlink(missing_ok=True)
                logger.info("Stored token removed")
                return
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(token)
            except OSError as e:
                raise ConfigError(f"Failed to store token: {e}")
            logger.info("Stored token updated")
