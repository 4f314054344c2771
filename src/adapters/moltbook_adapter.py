"""Abstract base class for Moltbook data access."""

from abc import ABC, abstractmethod

from src.core.types import Community, Post, PostDetail, ProfileDetail, SearchResponse


class MoltbookAdapter(ABC):
    """Read-only interface to the Moltbook API.

    Every method raises TransportError subclasses for request failures and
    DecodeError when the payload does not match its schema.
    """

    @abstractmethod
    def fetch_submolts(self) -> tuple[Community, ...]:
        """List all communities."""
        ...

    @abstractmethod
    def fetch_global_feed(self, sort: str = "hot", limit: int = 25) -> tuple[Post, ...]:
        """Fetch the global post feed.

        Args:
            sort: Sort method - "hot", "new", "top", "rising"
            limit: Number of posts
        """
        ...

    @abstractmethod
    def fetch_submolt_feed(self, name: str) -> tuple[Post, ...]:
        """Fetch posts of one community by its canonical name."""
        ...

    @abstractmethod
    def fetch_post_detail(self, post_id: str) -> PostDetail:
        """Fetch a post together with its full comment tree."""
        ...

    @abstractmethod
    def search(self, query: str) -> SearchResponse:
        """Full-text/semantic search over posts, comments and communities."""
        ...

    @abstractmethod
    def fetch_agent_profile(self, name: str) -> ProfileDetail:
        """Fetch an agent profile and its recent posts."""
        ...
