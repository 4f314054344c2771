"""Post detail screen with a collapsible comment thread."""

import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QListWidgetItem, QPushButton, QLabel, QTextEdit,
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.comment_tree import CollapseState, CommentTree
from src.core.fetch_state import FetchState
from src.core.i18n_manager import I18nManager
from src.core.types import CommentNode, PostDetail
from src.gui.state_bridge import StateBridge
from src.gui.widgets.post_list_widget import format_age
from src.services.screen_services import PostDetailOrchestrator

logger = logging.getLogger("moltview")

# Thread guide colours cycle with depth
DEPTH_COLORS = ["#4f8ef7", "#f79a4f", "#a44ff7", "#4fc36a", "#f74fa0", "#4fd6f7"]


class PostDetailWidget(QWidget):
    """Header, body and comment thread for one post.

    Collapse flags live on this widget: they survive re-renders of the same
    tree and start over whenever a freshly fetched tree arrives.
    """

    author_selected = pyqtSignal(str)   # agent name

    def __init__(self, adapter: MoltbookAdapter, post_id: str, parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()
        self._collapse = CollapseState()
        self._tree: Optional[CommentTree] = None
        self._author_name: Optional[str] = None

        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self._meta_label = QLabel(self._i18n.get("status.loading"))
        header.addWidget(self._meta_label)
        header.addStretch()
        self._author_btn = QPushButton(self._i18n.get("post.view_author"))
        self._author_btn.setEnabled(False)
        self._author_btn.clicked.connect(self._on_author_clicked)
        header.addWidget(self._author_btn)
        refresh_btn = QPushButton(self._i18n.get("nav.refresh"))
        refresh_btn.clicked.connect(self.load)
        header.addWidget(refresh_btn)
        layout.addLayout(header)

        self._title_label = QLabel("")
        self._title_label.setWordWrap(True)
        self._title_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(self._title_label)

        self._body = QTextEdit()
        self._body.setReadOnly(True)
        self._body.setMaximumHeight(180)
        layout.addWidget(self._body)

        self._comments_label = QLabel(self._i18n.get("post.comments"))
        self._comments_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self._comments_label)

        self._comment_list = QListWidget()
        self._comment_list.setWordWrap(True)
        self._comment_list.itemClicked.connect(self._on_comment_clicked)
        layout.addWidget(self._comment_list, stretch=1)

        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state)
        self._bridge.attach(PostDetailOrchestrator(adapter, post_id))

    def load(self):
        self._bridge.orchestrator.load()

    def shutdown(self):
        self._bridge.detach()

    def _on_state(self, state: FetchState):
        if state.is_loading:
            self._meta_label.setText(self._i18n.get("status.loading"))
            return
        if state.is_failed:
            self._meta_label.setText(self._i18n.describe_error(state.error))
            self._clear()
            return
        if not state.is_loaded:
            return

        detail: PostDetail = state.data
        post = detail.post
        self._author_name = post.author.name
        self._author_btn.setEnabled(True)
        self._meta_label.setText(
            f"{post.submolt.title} · u/{post.author.name} · {format_age(post.created_at)}"
            f"  [↑{post.score}]  [\U0001f4ac{post.comment_count}]"
        )
        self._title_label.setText(post.title)
        body = post.content or ""
        if post.url:
            body = f"{post.url}\n\n{body}" if body else post.url
        self._body.setPlainText(body)

        self._tree = detail.comments
        self._collapse.reset()
        self._render_comments()

    def _clear(self):
        self._tree = None
        self._author_name = None
        self._author_btn.setEnabled(False)
        self._title_label.setText("")
        self._body.clear()
        self._comment_list.clear()
        self._comments_label.setText(self._i18n.get("post.comments"))

    def _render_comments(self):
        self._comment_list.clear()
        if self._tree is None:
            return
        if not len(self._tree):
            self._comments_label.setText(self._i18n.get("post.no_comments"))
            return
        self._comments_label.setText(
            self._i18n.get("post.comment_count", count=self._tree.total_count())
        )
        for node, depth in self._collapse.visible(self._tree):
            item = QListWidgetItem(self._comment_text(node, depth))
            item.setData(Qt.ItemDataRole.UserRole, node.id)
            item.setForeground(_depth_brush(depth))
            self._comment_list.addItem(item)

    def _comment_text(self, node: CommentNode, depth: int) -> str:
        indent = "    " * depth
        head = f"{indent}u/{node.author.name} • {format_age(node.created_at)}"
        if self._collapse.is_collapsed(node.id):
            hidden = CommentTree(node.replies).total_count()
            return f"{head}  [+{hidden}]"
        body = "\n".join(f"{indent}{line}" for line in node.content.splitlines() or [""])
        return f"{head}\n{body}\n{indent}↑{node.score}"

    def _on_comment_clicked(self, item: QListWidgetItem):
        comment_id = item.data(Qt.ItemDataRole.UserRole)
        if comment_id:
            self._collapse.toggle(comment_id)
            self._render_comments()

    def _on_author_clicked(self):
        if self._author_name:
            self.author_selected.emit(self._author_name)


def _depth_brush(depth: int) -> QBrush:
    return QBrush(QColor(DEPTH_COLORS[depth % len(DEPTH_COLORS)]))
