"""Fetch state machine values and the user-facing error taxonomy."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from src.core.exceptions import (
    DecodeError,
    HttpStatusError,
    InvalidRequestError,
    NetworkError,
    UnauthorizedError,
)

logger = logging.getLogger("moltview")

T = TypeVar("T")


class ErrorKind(Enum):
    INVALID_REQUEST = "invalid_request"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    UNAUTHORIZED = "unauthorized"
    DECODE = "decode"


@dataclass(frozen=True)
class FetchError:
    """Closed error value stored in a Failed state."""

    kind: ErrorKind
    status_code: Optional[int] = None
    detail: str = ""

    @property
    def i18n_key(self) -> str:
        """Locale key for the message shown to the user.

        Decode failures share the network message; they stay distinguishable
        through ``kind`` and the logs.
        """
        if self.kind is ErrorKind.UNAUTHORIZED:
            return "errors.unauthorized"
        if self.kind is ErrorKind.HTTP_STATUS:
            return "errors.http_status"
        if self.kind is ErrorKind.INVALID_REQUEST:
            return "errors.invalid_request"
        return "errors.network"


def classify_error(error: BaseException) -> FetchError:
    """Map any exception raised below an orchestrator to a FetchError."""
    if isinstance(error, UnauthorizedError):
        return FetchError(ErrorKind.UNAUTHORIZED, 401, error.message)
    if isinstance(error, HttpStatusError):
        return FetchError(ErrorKind.HTTP_STATUS, error.status_code, error.message)
    if isinstance(error, NetworkError):
        return FetchError(ErrorKind.NETWORK, detail=error.message)
    if isinstance(error, DecodeError):
        logger.warning(f"Decode failure: {error.message} (literal={error.literal!r})")
        return FetchError(ErrorKind.DECODE, detail=error.message)
    if isinstance(error, InvalidRequestError):
        logger.error(f"Invalid request built: {error.message}")
        return FetchError(ErrorKind.INVALID_REQUEST, detail=error.message)
    logger.error(f"Unexpected fetch error: {error!r}")
    return FetchError(ErrorKind.NETWORK, detail=str(error))


class FetchStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchState(Generic[T]):
    """Immutable snapshot of one orchestrator's state.

    Build instances through the classmethods so ``data`` and ``error`` are
    never set together.
    """

    status: FetchStatus = FetchStatus.IDLE
    data: Optional[T] = None
    error: Optional[FetchError] = None

    @classmethod
    def idle(cls) -> "FetchState[Any]":
        return cls(FetchStatus.IDLE)

    @classmethod
    def loading(cls) -> "FetchState[Any]":
        return cls(FetchStatus.LOADING)

    @classmethod
    def loaded(cls, data: T) -> "FetchState[T]":
        return cls(FetchStatus.LOADED, data=data)

    @classmethod
    def failed(cls, error: FetchError) -> "FetchState[Any]":
        return cls(FetchStatus.FAILED, error=error)

    @property
    def is_idle(self) -> bool:
        return self.status is FetchStatus.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def is_loaded(self) -> bool:
        return self.status is FetchStatus.LOADED

    @property
    def is_failed(self) -> bool:
        return self.status is FetchStatus.FAILED
