"""Single-fetch orchestrators for the post, profile and community screens."""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.types import Community, Post, PostDetail, ProfileDetail
from src.services.orchestrator import Orchestrator


class PostDetailOrchestrator(Orchestrator[PostDetail]):
    """A post plus its whole comment tree, in one call."""

    name = "post-detail"

    def __init__(self, adapter: MoltbookAdapter, post_id: str,
                 executor: Optional[ThreadPoolExecutor] = None):
        super().__init__(executor)
        self._adapter = adapter
        self.post_id = post_id

    def _fetch(self) -> PostDetail:
        return self._adapter.fetch_post_detail(self.post_id)


class ProfileOrchestrator(Orchestrator[ProfileDetail]):
    """An agent profile; a missing recent-posts list loads as empty."""

    name = "profile"

    def __init__(self, adapter: MoltbookAdapter, agent_name: str,
                 executor: Optional[ThreadPoolExecutor] = None):
        super().__init__(executor)
        self._adapter = adapter
        self.agent_name = agent_name

    def _fetch(self) -> ProfileDetail:
        return self._adapter.fetch_agent_profile(self.agent_name)


class SubmoltOrchestrator(Orchestrator[tuple[Post, ...]]):
    """Posts of a community the caller already holds; the community itself is not re-fetched."""

    name = "submolt"

    def __init__(self, adapter: MoltbookAdapter, community: Community,
                 executor: Optional[ThreadPoolExecutor] = None):
        super().__init__(executor)
        self._adapter = adapter
        self.community = community

    def _fetch(self) -> tuple[Post, ...]:
        return self._adapter.fetch_submolt_feed(self.community.name)
