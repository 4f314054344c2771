"""Moltbook REST adapter: transport + decoder, with an offline mock mode."""

import logging
from typing import Any, Optional

from src.adapters import decoder
from src.adapters.endpoints import Endpoint
from src.adapters.moltbook_adapter import MoltbookAdapter
from src.adapters.transport import HttpTransport
from src.core.types import Community, Post, PostDetail, ProfileDetail, SearchResponse

logger = logging.getLogger("moltview")


class MoltbookAPIAdapter(MoltbookAdapter):
    """Fetches Moltbook data through HttpTransport and decodes it strictly."""

    def __init__(self, transport: Optional[HttpTransport] = None, mock_mode: bool = False):
        if transport is None and not mock_mode:
            raise ValueError("transport is required unless mock_mode is set")
        self._transport = transport
        self._mock_mode = mock_mode

    def fetch_submolts(self) -> tuple[Community, ...]:
        communities = decoder.decode_submolts_response(self._fetch(Endpoint.submolts()))
        logger.info(f"Fetched {len(communities)} submolts")
        return communities

    def fetch_global_feed(self, sort: str = "hot", limit: int = 25) -> tuple[Post, ...]:
        posts = decoder.decode_posts_response(self._fetch(Endpoint.global_feed(sort, limit)))
        logger.info(f"Fetched {len(posts)} posts from global feed ({sort})")
        return posts

    def fetch_submolt_feed(self, name: str) -> tuple[Post, ...]:
        posts = decoder.decode_posts_response(self._fetch(Endpoint.submolt_feed(name)))
        logger.info(f"Fetched {len(posts)} posts from m/{name}")
        return posts

    def fetch_post_detail(self, post_id: str) -> PostDetail:
        detail = decoder.decode_post_detail_response(self._fetch(Endpoint.post_detail(post_id)))
        logger.info(f"Fetched post {post_id} with {detail.comments.total_count()} comments")
        return detail

    def search(self, query: str) -> SearchResponse:
        response = decoder.decode_search_response(self._fetch(Endpoint.search(query)))
        logger.info(f"Search returned {len(response.results)} results")
        return response

    def fetch_agent_profile(self, name: str) -> ProfileDetail:
        profile = decoder.decode_profile_response(self._fetch(Endpoint.agent_profile(name)))
        logger.info(f"Fetched profile for {name}")
        return profile

    def _fetch(self, endpoint: Endpoint) -> Any:
        if self._mock_mode:
            return _mock_payload(endpoint)
        return self._transport.request(endpoint)


# --- Mock mode payloads (wire format, no network) ---

_MOCK_AUTHOR = {"id": "agent_1", "name": "mock_agent", "karma": 120, "follower_count": 8}
_MOCK_SUBMOLT = {
    "id": "sm_general",
    "name": "general",
    "display_name": "General",
    "description": "Mock community",
    "subscriber_count": 42,
    "created_at": "2026-01-28T09:00:00.000Z",
}


def _mock_post(i: int, submolt: dict = _MOCK_SUBMOLT) -> dict:
    return {
        "id": f"mock_{i}",
        "title": f"[Mock] Sample post {i + 1}",
        "content": f"This is mock post body #{i + 1}.",
        "author": _MOCK_AUTHOR,
        "upvotes": (i + 1) * 10,
        "downvotes": i,
        "comment_count": 3,
        "submolt": submolt,
        "created_at": f"2026-01-30T1{i}:00:00Z",
        "url": None,
    }


def _mock_comment(cid: str, body: str, parent: Optional[str], replies: Optional[list]) -> dict:
    return {
        "id": cid,
        "content": body,
        "author": _MOCK_AUTHOR,
        "parent_id": parent,
        "upvotes": 5,
        "downvotes": 1,
        "created_at": "2026-01-30T12:30:00.123456Z",
        "replies": replies,
    }


def _mock_payload(endpoint: Endpoint) -> dict:
    """Canned response for an endpoint, shaped like the real API."""
    segments = endpoint.segments
    if segments == ("submolts",):
        return {"success": True, "submolts": [_MOCK_SUBMOLT]}
    if segments == ("posts",):
        return {"success": True, "posts": [_mock_post(i) for i in range(5)]}
    if segments[0] == "submolts" and segments[-1] == "feed":
        submolt = dict(_MOCK_SUBMOLT, id=f"sm_{segments[1]}", name=segments[1], display_name=None)
        return {"success": True, "posts": [_mock_post(i, submolt) for i in range(3)]}
    if segments[0] == "posts":
        post = dict(_mock_post(0), id=segments[1])
        comments = [
            _mock_comment("mock_c1", "This is a top-level mock comment.", None, [
                _mock_comment("mock_c2", "This is a reply to the first comment.", "mock_c1", None),
            ]),
            _mock_comment("mock_c3", "Another top-level comment.", None, []),
        ]
        return {"success": True, "post": post, "comments": comments}
    if segments == ("search",):
        query = dict(endpoint.query or ()).get("q", "")
        return {
            "success": True,
            "query": query,
            "type": "all",
            "results": [
                {"id": "mock_0", "type": "post", "title": f"[Mock] Result for {query}",
                 "content": "Matching post body.", "upvotes": 10, "downvotes": 0,
                 "created_at": "2026-01-30T10:00:00Z", "similarity": 0.91,
                 "author": _MOCK_AUTHOR, "submolt": _MOCK_SUBMOLT},
                {"id": "mock_c1", "type": "comment", "content": "Matching comment.",
                 "upvotes": 5, "downvotes": 1, "created_at": "2026-01-30T12:30:00.5Z",
                 "author": _MOCK_AUTHOR, "post": {"id": "mock_0", "title": "[Mock] Sample post 1"},
                 "post_id": "mock_0"},
            ],
        }
    if segments == ("agents", "profile"):
        name = dict(endpoint.query or ()).get("name", "mock_agent")
        return {
            "success": True,
            "agent": {
                "id": "agent_1", "name": name, "description": "A mock agent.",
                "karma": 120, "created_at": "2026-01-28T09:00:00Z",
                "last_active": "2026-01-30T12:00:00.250Z", "is_active": True,
                "is_claimed": False, "follower_count": 8, "following_count": 3,
                "avatar_url": None,
            },
            "recent_posts": [_mock_post(i) for i in range(2)],
        }
    return {"success": False}
