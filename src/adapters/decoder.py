"""Strict decoding of Moltbook JSON payloads into value records.

A required field that is missing or has the wrong type fails the whole
payload with DecodeError; no partial records are produced. Optional fields
that are absent or null decode to None.
"""

import re
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from src.core.comment_tree import CommentTree, normalize_replies
from src.core.exceptions import DecodeError
from src.core.types import (
    AgentProfile,
    AuthorRef,
    CommentNode,
    Community,
    Post,
    PostDetail,
    PostReference,
    ProfileDetail,
    SearchResponse,
    SearchResult,
)

T = TypeVar("T")

_FRACTIONAL_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
_PLAIN_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
# strptime's %f takes at most six digits
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")

_MISSING = object()


def parse_timestamp(value: Any) -> datetime:
    """Parse an internet date-time, with or without fractional seconds.

    The fractional form is tried first. Both forms of the same instant
    compare equal.

    Raises:
        DecodeError: value is not a string in either form (carries the literal)
    """
    if not isinstance(value, str):
        raise DecodeError(f"Cannot decode date: {value!r}", literal=repr(value))

    normalized = _LONG_FRACTION.sub(r"\1", value)
    for fmt in (_FRACTIONAL_FORMAT, _PLAIN_FORMAT):
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    raise DecodeError(f"Cannot decode date: {value}", literal=value)


def _field(data: dict, key: str, kinds: tuple, required: bool, context: str) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise DecodeError(f"{context}: missing required field '{key}'")
        return None
    # bool is an int subclass; never accept it for numeric fields
    if isinstance(value, bool) and bool not in kinds:
        raise DecodeError(f"{context}: field '{key}' has type bool")
    if not isinstance(value, kinds):
        raise DecodeError(f"{context}: field '{key}' has type {type(value).__name__}")
    return value


def _str(data: dict, key: str, context: str, required: bool = True) -> Optional[str]:
    return _field(data, key, (str,), required, context)


def _int(data: dict, key: str, context: str, required: bool = True) -> Optional[int]:
    return _field(data, key, (int,), required, context)


def _date(data: dict, key: str, context: str, required: bool = True) -> Optional[datetime]:
    raw = _field(data, key, (str,), required, context)
    return None if raw is None else parse_timestamp(raw)


def _object(data: Any, context: str) -> dict:
    if not isinstance(data, dict):
        raise DecodeError(f"{context}: expected object, got {type(data).__name__}")
    return data


def _nested(data: dict, key: str, decode: Callable[[Any], T], context: str,
            required: bool = True) -> Optional[T]:
    value = data.get(key)
    if value is None:
        if required:
            raise DecodeError(f"{context}: missing required field '{key}'")
        return None
    return decode(value)


def _list(data: dict, key: str, decode: Callable[[Any], T], context: str,
          required: bool = True) -> Optional[tuple[T, ...]]:
    value = data.get(key)
    if value is None:
        if required:
            raise DecodeError(f"{context}: missing required field '{key}'")
        return None
    if not isinstance(value, list):
        raise DecodeError(f"{context}: field '{key}' is not a list")
    return tuple(decode(item) for item in value)


def decode_author(data: Any) -> AuthorRef:
    d = _object(data, "author")
    return AuthorRef(
        id=_str(d, "id", "author"),
        name=_str(d, "name", "author"),
        karma=_int(d, "karma", "author", required=False),
        follower_count=_int(d, "follower_count", "author", required=False),
    )


def decode_community(data: Any) -> Community:
    d = _object(data, "submolt")
    return Community(
        id=_str(d, "id", "submolt"),
        name=_str(d, "name", "submolt"),
        display_name=_str(d, "display_name", "submolt", required=False),
        description=_str(d, "description", "submolt", required=False),
        subscriber_count=_int(d, "subscriber_count", "submolt", required=False),
        created_at=_date(d, "created_at", "submolt", required=False),
        last_activity_at=_date(d, "last_activity_at", "submolt", required=False),
        featured_at=_date(d, "featured_at", "submolt", required=False),
        created_by=_nested(d, "created_by", decode_author, "submolt", required=False),
    )


def decode_post(data: Any) -> Post:
    d = _object(data, "post")
    return Post(
        id=_str(d, "id", "post"),
        title=_str(d, "title", "post"),
        content=_str(d, "content", "post", required=False),
        author=_nested(d, "author", decode_author, "post"),
        upvotes=_int(d, "upvotes", "post"),
        downvotes=_int(d, "downvotes", "post"),
        comment_count=_int(d, "comment_count", "post"),
        submolt=_nested(d, "submolt", decode_community, "post"),
        created_at=_date(d, "created_at", "post"),
        url=_str(d, "url", "post", required=False),
    )


def decode_comment(data: Any) -> CommentNode:
    """Decode a comment and its nested replies.

    Replies are decoded depth-first with an explicit stack and assembled
    bottom-up, so very deep threads do not recurse.
    """
    root = _object(data, "comment")
    # Each frame: raw dict, list of decoded children so far, index of next child
    stack: list[tuple[dict, list[CommentNode], list[Any]]] = []

    def push(raw: Any) -> None:
        d = _object(raw, "comment")
        replies = d.get("replies")
        if replies is not None and not isinstance(replies, list):
            raise DecodeError("comment: field 'replies' is not a list")
        stack.append((d, [], list(reversed(normalize_replies(replies)))))

    push(root)
    finished: Optional[CommentNode] = None
    while stack:
        d, children, pending = stack[-1]
        if finished is not None:
            children.append(finished)
            finished = None
        if pending:
            push(pending.pop())
            continue
        stack.pop()
        finished = CommentNode(
            id=_str(d, "id", "comment"),
            content=_str(d, "content", "comment"),
            author=_nested(d, "author", decode_author, "comment"),
            parent_id=_str(d, "parent_id", "comment", required=False),
            upvotes=_int(d, "upvotes", "comment"),
            downvotes=_int(d, "downvotes", "comment"),
            created_at=_date(d, "created_at", "comment"),
            replies=tuple(children),
        )
    return finished


def decode_agent(data: Any) -> AgentProfile:
    d = _object(data, "agent")
    return AgentProfile(
        id=_str(d, "id", "agent"),
        name=_str(d, "name", "agent"),
        description=_str(d, "description", "agent", required=False),
        karma=_int(d, "karma", "agent"),
        created_at=_date(d, "created_at", "agent"),
        last_active=_date(d, "last_active", "agent", required=False),
        is_active=_field(d, "is_active", (bool,), False, "agent"),
        is_claimed=_field(d, "is_claimed", (bool,), False, "agent"),
        follower_count=_int(d, "follower_count", "agent"),
        following_count=_int(d, "following_count", "agent"),
        avatar_url=_str(d, "avatar_url", "agent", required=False),
    )


def decode_post_reference(data: Any) -> PostReference:
    d = _object(data, "post reference")
    return PostReference(id=_str(d, "id", "post reference"), title=_str(d, "title", "post reference"))


def decode_search_result(data: Any) -> SearchResult:
    d = _object(data, "search result")
    similarity = _field(d, "similarity", (int, float), False, "search result")
    return SearchResult(
        id=_str(d, "id", "search result"),
        type=_str(d, "type", "search result"),
        title=_str(d, "title", "search result", required=False),
        content=_str(d, "content", "search result", required=False),
        upvotes=_int(d, "upvotes", "search result"),
        downvotes=_int(d, "downvotes", "search result"),
        created_at=_date(d, "created_at", "search result"),
        similarity=None if similarity is None else float(similarity),
        author=_nested(d, "author", decode_author, "search result", required=False),
        submolt=_nested(d, "submolt", decode_community, "search result", required=False),
        post=_nested(d, "post", decode_post_reference, "search result", required=False),
        post_id=_str(d, "post_id", "search result", required=False),
    )


def _envelope(payload: Any, context: str) -> dict:
    d = _object(payload, context)
    _field(d, "success", (bool,), True, context)
    return d


def decode_submolts_response(payload: Any) -> tuple[Community, ...]:
    d = _envelope(payload, "submolts response")
    return _list(d, "submolts", decode_community, "submolts response")


def decode_posts_response(payload: Any) -> tuple[Post, ...]:
    d = _envelope(payload, "posts response")
    return _list(d, "posts", decode_post, "posts response")


def decode_post_detail_response(payload: Any) -> PostDetail:
    d = _envelope(payload, "post detail response")
    post = _nested(d, "post", decode_post, "post detail response")
    comments = _list(d, "comments", decode_comment, "post detail response")
    return PostDetail(post=post, comments=CommentTree(comments))


def decode_search_response(payload: Any) -> SearchResponse:
    d = _envelope(payload, "search response")
    results = _list(d, "results", decode_search_result, "search response", required=False)
    return SearchResponse(
        results=results or (),
        query=_str(d, "query", "search response", required=False),
        type=_str(d, "type", "search response", required=False),
        error=_str(d, "error", "search response", required=False),
    )


def decode_profile_response(payload: Any) -> ProfileDetail:
    d = _envelope(payload, "profile response")
    agent = _nested(d, "agent", decode_agent, "profile response")
    recent = _list(d, "recent_posts", decode_post, "profile response", required=False)
    return ProfileDetail(agent=agent, recent_posts=recent or ())
