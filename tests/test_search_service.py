"""Tests for SearchOrchestrator debounce and cancellation."""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.core.exceptions import HttpStatusError
from src.core.fetch_state import ErrorKind, FetchStatus
from src.core.types import SearchResponse, SearchResult
from src.services.search_service import SearchOrchestrator

WAIT = 5


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        return self.function(*self.args)


def result_for(query):
    return SearchResult(
        id=f"r_{query}", type="post", title=query, upvotes=1, downvotes=0,
        created_at=datetime(2026, 1, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def adapter():
    mock = MagicMock()
    mock.search.side_effect = lambda q: SearchResponse(results=(result_for(q),), query=q)
    return mock


@pytest.fixture
def timers():
    return []


@pytest.fixture
def orchestrator(adapter, timers):
    def factory(interval, function, args=()):
        timer = FakeTimer(interval, function, args)
        timers.append(timer)
        return timer

    orch = SearchOrchestrator(adapter, debounce_sec=0.3, timer_factory=factory)
    yield orch
    orch.close()


class TestFirstSearch:

    def test_first_search_runs_immediately(self, orchestrator, adapter, timers):
        future = orchestrator.set_query("crabs")

        state = future.result(timeout=WAIT)

        assert state.is_loaded
        assert state.data[0].title == "crabs"
        assert orchestrator.has_searched
        assert timers == []
        adapter.search.assert_called_once_with("crabs")

    def test_query_is_trimmed(self, orchestrator, adapter):
        orchestrator.set_query("  crabs  ").result(timeout=WAIT)
        adapter.search.assert_called_once_with("crabs")
        assert orchestrator.query == "  crabs  "

    def test_failure_is_classified(self, orchestrator, adapter):
        adapter.search.side_effect = HttpStatusError(502)

        state = orchestrator.set_query("crabs").result(timeout=WAIT)

        assert state.error.kind is ErrorKind.HTTP_STATUS
        assert state.error.status_code == 502


class TestDebounce:

    def test_rapid_edits_issue_one_request(self, orchestrator, adapter, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)

        for text in ("a", "ab", "abc"):
            assert orchestrator.set_query(text) is None

        assert len(timers) == 3
        assert [t.cancelled for t in timers] == [True, True, False]
        assert all(t.started and t.daemon for t in timers)
        assert timers[-1].interval == 0.3
        assert orchestrator.state.is_loading is False

        state = timers[-1].fire().result(timeout=WAIT)

        assert state.data[0].title == "abc"
        assert [c.args[0] for c in adapter.search.call_args_list] == ["crabs", "abc"]

    def test_cancelled_timer_firing_late_is_ignored(self, orchestrator, adapter, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)
        orchestrator.set_query("a")
        orchestrator.set_query("ab")

        # A timer that raced past cancel() must not start a request
        assert timers[0].fire() is None
        timers[1].fire().result(timeout=WAIT)

        assert [c.args[0] for c in adapter.search.call_args_list] == ["crabs", "ab"]

    def test_zero_debounce_always_immediate(self, adapter, timers):
        orch = SearchOrchestrator(adapter, debounce_sec=0, timer_factory=lambda *a, **k: timers.append(a))
        orch.set_query("a").result(timeout=WAIT)
        orch.set_query("ab").result(timeout=WAIT)
        assert timers == []
        assert adapter.search.call_count == 2
        orch.close()

    def test_load_skips_debounce(self, orchestrator, adapter, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)
        orchestrator.set_query("lobsters")

        state = orchestrator.load().result(timeout=WAIT)

        assert state.data[0].title == "lobsters"
        assert timers[0].cancelled


class TestStaleResponses:

    def test_late_result_for_old_query_is_dropped(self, orchestrator, adapter, timers):
        release_a = threading.Event()
        a_started = threading.Event()

        def search(q):
            if q == "a":
                a_started.set()
                release_a.wait(WAIT)
            return SearchResponse(results=(result_for(q),), query=q)

        adapter.search.side_effect = search

        future_a = orchestrator.set_query("a")
        assert a_started.wait(WAIT)
        orchestrator.set_query("ab")
        future_ab = timers[-1].fire()
        assert future_ab.result(timeout=WAIT).data[0].title == "ab"

        release_a.set()
        assert future_a.result(timeout=WAIT) is None
        assert orchestrator.state.data[0].title == "ab"

    def test_listener_never_sees_stale_results(self, orchestrator, adapter, timers):
        release_a = threading.Event()
        a_started = threading.Event()

        def search(q):
            if q == "a":
                a_started.set()
                release_a.wait(WAIT)
            return SearchResponse(results=(result_for(q),), query=q)

        adapter.search.side_effect = search
        loaded_titles = []
        orchestrator.subscribe(
            lambda s: s.is_loaded and loaded_titles.append(s.data[0].title)
        )

        future_a = orchestrator.set_query("a")
        assert a_started.wait(WAIT)
        orchestrator.set_query("ab")
        timers[-1].fire().result(timeout=WAIT)
        release_a.set()
        future_a.result(timeout=WAIT)

        assert loaded_titles == ["ab"]


class TestClearing:

    def test_empty_query_clears_synchronously(self, orchestrator, adapter, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)
        orchestrator.set_query("crab")

        assert orchestrator.set_query("   ") is None

        assert orchestrator.state.status is FetchStatus.IDLE
        assert orchestrator.state.data is None
        assert not orchestrator.has_searched
        assert timers[0].cancelled
        adapter.search.assert_called_once_with("crabs")

    def test_search_after_clear_is_immediate_again(self, orchestrator, adapter, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)
        orchestrator.set_query("")

        future = orchestrator.set_query("lobsters")

        assert future is not None
        future.result(timeout=WAIT)
        assert timers == []

    def test_clear_drops_in_flight_request(self, orchestrator, adapter):
        release = threading.Event()
        started = threading.Event()

        def search(q):
            started.set()
            release.wait(WAIT)
            return SearchResponse(results=(result_for(q),), query=q)

        adapter.search.side_effect = search
        future = orchestrator.set_query("crabs")
        assert started.wait(WAIT)
        orchestrator.set_query("")
        release.set()

        assert future.result(timeout=WAIT) is None
        assert orchestrator.state.is_idle

    def test_close_cancels_pending_timer(self, orchestrator, timers):
        orchestrator.set_query("crabs").result(timeout=WAIT)
        orchestrator.set_query("crab")
        orchestrator.close()
        assert timers[0].cancelled
        assert timers[0].fire() is None
