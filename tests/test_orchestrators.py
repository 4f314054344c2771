"""Tests for the feed, post-detail, profile and submolt orchestrators."""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from conftest import COMMUNITY, make_comment, make_post

from src.core.comment_tree import CommentTree
from src.core.exceptions import DecodeError, HttpStatusError, NetworkError, UnauthorizedError
from src.core.fetch_state import ErrorKind, FetchStatus
from src.core.types import AgentProfile, PostDetail, ProfileDetail
from src.services.feed_service import FeedOrchestrator
from src.services.orchestrator import Orchestrator
from src.services.screen_services import (
    PostDetailOrchestrator,
    ProfileOrchestrator,
    SubmoltOrchestrator,
)

WAIT = 5


@pytest.fixture
def adapter():
    return MagicMock()


def run_load(orchestrator):
    """Start a load and wait for its committed state."""
    return orchestrator.load().result(timeout=WAIT)


class TestOrchestratorBase:

    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            Orchestrator()

    def test_subclass_must_implement_fetch(self):
        class NoFetch(Orchestrator):
            name = "no-fetch"

        with pytest.raises(TypeError):
            NoFetch()


class TestFeedOrchestrator:

    def test_initial_state_is_idle(self, adapter):
        orch = FeedOrchestrator(adapter)
        assert orch.state.is_idle
        orch.close()

    def test_success_joins_both_fetches(self, adapter):
        adapter.fetch_submolts.return_value = (COMMUNITY,)
        adapter.fetch_global_feed.return_value = (make_post("p1"), make_post("p2"))
        orch = FeedOrchestrator(adapter, sort="new", limit=10)

        state = run_load(orch)

        assert state.status is FetchStatus.LOADED
        assert state.data.communities == (COMMUNITY,)
        assert [p.id for p in state.data.posts] == ["p1", "p2"]
        adapter.fetch_global_feed.assert_called_once_with("new", 10)
        orch.close()

    def test_submolts_failure_discards_successful_posts(self, adapter):
        adapter.fetch_submolts.side_effect = HttpStatusError(500)
        adapter.fetch_global_feed.return_value = (make_post(),)
        orch = FeedOrchestrator(adapter)

        state = run_load(orch)

        assert state.is_failed
        assert state.data is None
        assert state.error.kind is ErrorKind.HTTP_STATUS
        assert state.error.status_code == 500
        orch.close()

    def test_posts_failure_discards_successful_submolts(self, adapter):
        adapter.fetch_submolts.return_value = (COMMUNITY,)
        adapter.fetch_global_feed.side_effect = DecodeError("bad post")
        orch = FeedOrchestrator(adapter)

        state = run_load(orch)

        assert state.is_failed
        assert state.error.kind is ErrorKind.DECODE
        orch.close()

    def test_both_fetches_are_in_flight_together(self, adapter):
        # Each call blocks until the other has started; a serial fetch breaks the barrier
        barrier = threading.Barrier(2, timeout=2)

        def submolts():
            barrier.wait()
            return (COMMUNITY,)

        def feed(sort, limit):
            barrier.wait()
            return (make_post(),)

        adapter.fetch_submolts.side_effect = submolts
        adapter.fetch_global_feed.side_effect = feed
        orch = FeedOrchestrator(adapter)

        state = run_load(orch)

        assert state.is_loaded
        assert not barrier.broken
        orch.close()

    def test_state_stays_loading_until_both_finish(self, adapter):
        release = threading.Event()
        adapter.fetch_submolts.return_value = (COMMUNITY,)

        def slow_feed(sort, limit):
            release.wait(WAIT)
            return (make_post(),)

        adapter.fetch_global_feed.side_effect = slow_feed
        orch = FeedOrchestrator(adapter)

        future = orch.load()
        assert orch.state.is_loading
        release.set()
        assert future.result(timeout=WAIT).is_loaded
        orch.close()

    def test_listener_sees_loading_then_loaded(self, adapter):
        adapter.fetch_submolts.return_value = ()
        adapter.fetch_global_feed.return_value = ()
        orch = FeedOrchestrator(adapter)
        seen = []
        orch.subscribe(lambda state: seen.append(state.status))

        run_load(orch)

        assert seen == [FetchStatus.LOADING, FetchStatus.LOADED]
        orch.close()

    def test_unsubscribe_stops_notifications(self, adapter):
        adapter.fetch_submolts.return_value = ()
        adapter.fetch_global_feed.return_value = ()
        orch = FeedOrchestrator(adapter)
        seen = []
        unsubscribe = orch.subscribe(seen.append)
        unsubscribe()

        run_load(orch)

        assert seen == []
        orch.close()


class TestPostDetailOrchestrator:

    def _detail(self, post_id="p1"):
        tree = CommentTree([make_comment("c1", replies=[make_comment("c2", parent_id="c1")])])
        return PostDetail(post=make_post(post_id, comment_count=2), comments=tree)

    def test_loads_post_and_tree(self, adapter):
        adapter.fetch_post_detail.return_value = self._detail()
        orch = PostDetailOrchestrator(adapter, "p1")

        state = run_load(orch)

        assert state.is_loaded
        assert state.data.comments.total_count() == 2
        adapter.fetch_post_detail.assert_called_once_with("p1")
        orch.close()

    def test_unauthorized(self, adapter):
        adapter.fetch_post_detail.side_effect = UnauthorizedError()
        orch = PostDetailOrchestrator(adapter, "p1")

        state = run_load(orch)

        assert state.error.kind is ErrorKind.UNAUTHORIZED
        assert state.error.i18n_key == "errors.unauthorized"
        orch.close()

    def test_superseded_load_never_writes_state(self, adapter):
        release_first = threading.Event()
        first_started = threading.Event()
        calls = []

        def fetch(post_id):
            calls.append(post_id)
            if len(calls) == 1:
                first_started.set()
                release_first.wait(WAIT)
                return self._detail("stale")
            return self._detail("fresh")

        adapter.fetch_post_detail.side_effect = fetch
        orch = PostDetailOrchestrator(adapter, "p1")

        first = orch.load()
        assert first_started.wait(WAIT)
        second = orch.load()
        assert second.result(timeout=WAIT).data.post.id == "fresh"

        release_first.set()
        assert first.result(timeout=WAIT) is None
        assert orch.state.data.post.id == "fresh"
        orch.close()

    def test_retry_after_failure(self, adapter):
        adapter.fetch_post_detail.side_effect = [NetworkError("offline"), self._detail()]
        orch = PostDetailOrchestrator(adapter, "p1")

        assert run_load(orch).is_failed
        assert run_load(orch).is_loaded
        orch.close()

    def test_close_drops_in_flight_result(self, adapter):
        started = threading.Event()
        release = threading.Event()

        def fetch(post_id):
            started.set()
            release.wait(WAIT)
            return self._detail()

        adapter.fetch_post_detail.side_effect = fetch
        orch = PostDetailOrchestrator(adapter, "p1")
        seen = []
        orch.subscribe(seen.append)

        future = orch.load()
        assert started.wait(WAIT)
        orch.close()
        release.set()

        assert future.result(timeout=WAIT) is None
        assert [s.status for s in seen] == [FetchStatus.LOADING]


class TestProfileOrchestrator:

    def test_loads_profile(self, adapter):
        agent = AgentProfile(
            id="a1", name="clawd", karma=50,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            follower_count=2, following_count=1,
        )
        adapter.fetch_agent_profile.return_value = ProfileDetail(agent=agent)
        orch = ProfileOrchestrator(adapter, "clawd")

        state = run_load(orch)

        assert state.data.agent.karma == 50
        assert state.data.recent_posts == ()
        adapter.fetch_agent_profile.assert_called_once_with("clawd")
        orch.close()


class TestSubmoltOrchestrator:

    def test_fetches_feed_by_community_name(self, adapter):
        adapter.fetch_submolt_feed.return_value = (make_post("p9"),)
        orch = SubmoltOrchestrator(adapter, COMMUNITY)

        state = run_load(orch)

        assert [p.id for p in state.data] == ["p9"]
        adapter.fetch_submolt_feed.assert_called_once_with("general")
        adapter.fetch_submolts.assert_not_called()
        orch.close()

    def test_http_error(self, adapter):
        adapter.fetch_submolt_feed.side_effect = HttpStatusError(404)
        orch = SubmoltOrchestrator(adapter, COMMUNITY)

        state = run_load(orch)

        assert state.error.kind is ErrorKind.HTTP_STATUS
        assert state.error.status_code == 404
        orch.close()
