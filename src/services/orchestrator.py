"""Per-screen fetch orchestration base class."""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Generic, Optional, TypeVar

from src.core.fetch_state import FetchState, classify_error

logger = logging.getLogger("moltview")

T = TypeVar("T")

StateListener = Callable[[FetchState], None]


class Orchestrator(ABC, Generic[T]):
    """Owns one screen's FetchState and runs its loads off the caller's thread.

    State machine: Idle -> Loading -> (Loaded | Failed), re-entrant on load().
    Every load takes a new generation number; a result is committed only if
    its generation is still current, so a superseded load never writes state.
    Errors are classified into FetchError and stored; nothing propagates.

    Subclasses implement ``_fetch()``, which runs on a worker thread.
    """

    name = "orchestrator"

    def __init__(self, executor: Optional[ThreadPoolExecutor] = None):
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix=f"moltview-{self.name}"
        )
        self._lock = threading.RLock()
        self._state: FetchState = FetchState.idle()
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._closed = False

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with each new state.

        Listeners run on whichever thread committed the state. Returns a
        callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def load(self) -> Future:
        """Start (or restart) a load. Returns the worker future.

        The future resolves to the committed state, or None when the load was
        superseded before it finished.
        """
        with self._lock:
            generation = self._begin()
            self._set_state(FetchState.loading())
        return self._executor.submit(self._run, generation)

    def close(self) -> None:
        """Invalidate in-flight work and release the executor if owned."""
        with self._lock:
            self._closed = True
            self._generation += 1
            self._listeners.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    @abstractmethod
    def _fetch(self, *args) -> T:
        ...

    def _begin(self) -> int:
        """Invalidate previous work and return the new generation. Caller holds lock."""
        self._generation += 1
        return self._generation

    def _run(self, generation: int, *args) -> Optional[FetchState]:
        try:
            data = self._fetch(*args)
        except Exception as e:
            error = classify_error(e)
            logger.error(f"{self.name} load failed: {error.kind.value} {error.detail}")
            return self._commit(generation, FetchState.failed(error))
        return self._commit(generation, FetchState.loaded(data))

    def _commit(self, generation: int, state: FetchState) -> Optional[FetchState]:
        with self._lock:
            if generation != self._generation or self._closed:
                logger.debug(f"{self.name}: dropping stale result (gen {generation})")
                return None
            self._set_state(state)
            return state

    def _set_state(self, state: FetchState) -> None:
        """Store and broadcast a state. Caller holds lock."""
        self._state = state
        for listener in list(self._listeners):
            listener(state)
