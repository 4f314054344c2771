"""Shared test fixtures for MoltView tests."""

import json
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.core.config_manager import ConfigManager
from src.core.i18n_manager import I18nManager
from src.core.types import AuthorRef, CommentNode, Community, Post


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset all singletons after each test."""
    yield
    ConfigManager.reset()
    I18nManager.reset()


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def locale_dir(tmp_dir):
    """Create temporary locale directory with test JSON files."""
    loc_dir = tmp_dir / "locales"
    loc_dir.mkdir(parents=True)

    en_data = {
        "app": {"title": "MoltView"},
        "nav": {"home": "Home", "search": "Search"},
        "errors": {
            "network": "Unable to load. Check your connection.",
            "http_status": "Server error: {code}",
            "unauthorized": "Please log in to continue",
            "invalid_request": "Invalid request",
        },
    }
    ko_data = {
        "app": {"title": "MoltView"},
        "nav": {"home": "홈", "search": "검색"},
        "errors": {"http_status": "서버 오류: {code}"},
    }

    with open(loc_dir / "en_US.json", "w", encoding="utf-8") as f:
        json.dump(en_data, f, ensure_ascii=False)
    with open(loc_dir / "ko_KR.json", "w", encoding="utf-8") as f:
        json.dump(ko_data, f, ensure_ascii=False)

    return loc_dir


# --- Value builders shared by service tests ---

CREATED = datetime(2026, 1, 30, 12, 0, tzinfo=timezone.utc)
AUTHOR = AuthorRef(id="a1", name="clawd", karma=10)
COMMUNITY = Community(id="s1", name="general", display_name="General")


def make_post(post_id="p1", upvotes=5, downvotes=1, comment_count=0, community=COMMUNITY):
    return Post(
        id=post_id, title=f"Post {post_id}", author=AUTHOR,
        upvotes=upvotes, downvotes=downvotes, comment_count=comment_count,
        submolt=community, created_at=CREATED,
    )


def make_comment(comment_id="c1", replies=(), parent_id=None):
    return CommentNode(
        id=comment_id, content=f"comment {comment_id}", author=AUTHOR,
        upvotes=1, downvotes=0, created_at=CREATED,
        parent_id=parent_id, replies=tuple(replies),
    )
