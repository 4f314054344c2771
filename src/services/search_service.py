"""Search-as-you-type orchestration with debounce and stale-response suppression."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.fetch_state import FetchState
from src.core.types import SearchResult
from src.services.orchestrator import Orchestrator

logger = logging.getLogger("moltview")

DEFAULT_DEBOUNCE_SEC = 0.3


class SearchOrchestrator(Orchestrator[tuple[SearchResult, ...]]):
    """Runs searches as the query changes.

    On every query change:
    1. The pending debounce timer is cancelled and any in-flight request is
       invalidated (its result will be dropped).
    2. An empty or whitespace-only query clears results and ``has_searched``
       right away, without a request.
    3. Otherwise the first search runs immediately; once a search has been
       performed, later ones wait for ``debounce_sec`` of quiescence.

    Only the latest query's results ever reach the state.
    """

    name = "search"

    def __init__(
        self,
        adapter: MoltbookAdapter,
        debounce_sec: float = DEFAULT_DEBOUNCE_SEC,
        executor: Optional[ThreadPoolExecutor] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        super().__init__(executor)
        self._adapter = adapter
        self._debounce_sec = debounce_sec
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._query = ""
        self._has_searched = False

    @property
    def query(self) -> str:
        with self._lock:
            return self._query

    @property
    def has_searched(self) -> bool:
        with self._lock:
            return self._has_searched

    def set_query(self, query: str) -> Optional[Future]:
        """Handle a query edit.

        Returns the request future when the search started immediately,
        otherwise None (cleared, or waiting on the debounce timer).
        """
        with self._lock:
            self._query = query
            generation = self._begin()
            self._cancel_timer()

            trimmed = query.strip()
            if not trimmed:
                self._has_searched = False
                self._set_state(FetchState.idle())
                return None

            if self._has_searched and self._debounce_sec > 0:
                timer = self._timer_factory(self._debounce_sec, self._fire, args=(generation, trimmed))
                timer.daemon = True
                self._timer = timer
                timer.start()
                return None

        return self._fire(generation, trimmed)

    def load(self) -> Optional[Future]:
        """Re-run the current query now, skipping the debounce."""
        with self._lock:
            generation = self._begin()
            self._cancel_timer()
            trimmed = self._query.strip()
            if not trimmed:
                self._has_searched = False
                self._set_state(FetchState.idle())
                return None
        return self._fire(generation, trimmed)

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()
        super().close()

    def _fire(self, generation: int, query: str) -> Optional[Future]:
        with self._lock:
            if generation != self._generation or self._closed:
                return None
            self._timer = None
            self._has_searched = True
            self._set_state(FetchState.loading())
            logger.debug(f"search: issuing request (gen {generation})")
            return self._executor.submit(self._run, generation, query)

    def _fetch(self, query: str) -> tuple[SearchResult, ...]:
        response = self._adapter.search(query)
        if response.error:
            logger.warning(f"Search API reported: {response.error}")
        return response.results

    def _cancel_timer(self) -> None:
        """Caller holds lock."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
