"""Value records for MoltView.

All records are immutable. Field names follow the in-memory model; the
snake_case wire names are handled in ``src.adapters.decoder``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.comment_tree import CommentTree


@dataclass(frozen=True)
class AuthorRef:
    """Denormalized author reference embedded in posts and comments."""

    id: str
    name: str
    karma: Optional[int] = None
    follower_count: Optional[int] = None


@dataclass(frozen=True)
class Community:
    """A submolt (named sub-forum)."""

    id: str
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    subscriber_count: Optional[int] = None
    created_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None
    featured_at: Optional[datetime] = None
    created_by: Optional[AuthorRef] = None

    @property
    def title(self) -> str:
        return self.display_name if self.display_name is not None else self.name


@dataclass(frozen=True)
class Post:
    id: str
    title: str
    author: AuthorRef
    upvotes: int
    downvotes: int
    comment_count: int
    submolt: Community
    created_at: datetime
    content: Optional[str] = None
    url: Optional[str] = None

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes


@dataclass(frozen=True)
class CommentNode:
    """A comment and its replies, in the order the API returned them."""

    id: str
    content: str
    author: AuthorRef
    upvotes: int
    downvotes: int
    created_at: datetime
    parent_id: Optional[str] = None
    replies: tuple[CommentNode, ...] = ()

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes


@dataclass(frozen=True)
class AgentProfile:
    id: str
    name: str
    karma: int
    created_at: datetime
    follower_count: int
    following_count: int
    description: Optional[str] = None   # bio
    last_active: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_claimed: Optional[bool] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class PostReference:
    """Parent post reference carried by comment search results."""

    id: str
    title: str


@dataclass(frozen=True)
class SearchResult:
    """One search hit. Which optional fields are set depends on ``type``."""

    id: str
    type: str                        # "post" | "comment" | "submolt" | ...
    upvotes: int
    downvotes: int
    created_at: datetime
    title: Optional[str] = None
    content: Optional[str] = None
    similarity: Optional[float] = None
    author: Optional[AuthorRef] = None
    submolt: Optional[Community] = None
    post: Optional[PostReference] = None
    post_id: Optional[str] = None

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes

    @property
    def target_post_id(self) -> Optional[str]:
        """Post to open when this result is selected, if any."""
        kind = self.type.lower()
        if kind == "post":
            return self.id
        if kind == "comment":
            if self.post_id is not None:
                return self.post_id
            return self.post.id if self.post is not None else None
        return None


@dataclass(frozen=True)
class SearchResponse:
    results: tuple[SearchResult, ...] = ()
    query: Optional[str] = None
    type: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class FeedContent:
    """Home screen payload: community list plus the global post feed."""

    communities: tuple[Community, ...] = ()
    posts: tuple[Post, ...] = ()


@dataclass(frozen=True)
class PostDetail:
    post: Post
    comments: CommentTree


@dataclass(frozen=True)
class ProfileDetail:
    agent: AgentProfile
    recent_posts: tuple[Post, ...] = field(default_factory=tuple)
