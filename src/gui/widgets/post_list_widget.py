"""Reusable post list used by the home, community and profile screens."""

from datetime import datetime, timezone
from typing import Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QListWidgetItem, QPushButton, QLabel,
)
from PyQt6.QtCore import Qt, pyqtSignal

from src.core.fetch_state import FetchState
from src.core.i18n_manager import I18nManager
from src.core.types import Post


def format_age(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Compact relative age such as "5m", "3h" or "2d"."""
    now = now or datetime.now(timezone.utc)
    seconds = max(int((now - created_at).total_seconds()), 0)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def post_item_text(post: Post) -> str:
    return (
        f"{post.title}\n"
        f"{post.submolt.title} · u/{post.author.name} · {format_age(post.created_at)}"
        f"  [↑{post.score}]  [\U0001f4ac{post.comment_count}]"
    )


class PostListWidget(QWidget):
    """Header label + refresh button + list of posts."""

    post_selected = pyqtSignal(str)      # post id
    refresh_requested = pyqtSignal()

    def __init__(self, title_key: str, parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()
        self._title_key = title_key
        self._posts: tuple[Post, ...] = ()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        self._label = QLabel(self._i18n.get(title_key))
        self._label.setStyleSheet("font-weight: bold;")
        header.addWidget(self._label)
        header.addStretch()
        self._refresh_btn = QPushButton(self._i18n.get("nav.refresh"))
        self._refresh_btn.clicked.connect(self.refresh_requested.emit)
        header.addWidget(self._refresh_btn)
        layout.addLayout(header)

        self._list = QListWidget()
        self._list.itemClicked.connect(self._on_item_activated)
        layout.addWidget(self._list)

    def show_posts(self, posts: tuple[Post, ...]) -> None:
        self._posts = posts
        self._list.clear()
        if not posts:
            self._label.setText(self._i18n.get("posts.empty"))
            return
        self._label.setText(self._i18n.get(self._title_key))
        for post in posts:
            item = QListWidgetItem(post_item_text(post))
            item.setData(Qt.ItemDataRole.UserRole, post.id)
            self._list.addItem(item)

    def show_status(self, state: FetchState) -> None:
        """Update the header for non-loaded states."""
        if state.is_loading:
            self._label.setText(self._i18n.get("status.loading"))
        elif state.is_failed:
            self._label.setText(self._i18n.describe_error(state.error))
            self._posts = ()
            self._list.clear()

    def _on_item_activated(self, item: QListWidgetItem):
        post_id = item.data(Qt.ItemDataRole.UserRole)
        if post_id:
            self.post_selected.emit(post_id)
