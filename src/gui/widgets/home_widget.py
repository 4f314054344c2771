"""Home screen: community list beside the global feed."""

import logging

from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout,
    QListWidget, QListWidgetItem, QLabel,
)
from PyQt6.QtCore import Qt, pyqtSignal

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.fetch_state import FetchState
from src.core.i18n_manager import I18nManager
from src.core.types import FeedContent
from src.gui.state_bridge import StateBridge
from src.gui.widgets.post_list_widget import PostListWidget
from src.services.feed_service import FeedOrchestrator

logger = logging.getLogger("moltview")


class HomeWidget(QWidget):
    post_selected = pyqtSignal(str)
    submolt_selected = pyqtSignal(object)   # Community

    def __init__(self, adapter: MoltbookAdapter, sort: str = "hot", limit: int = 25, parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()
        self._communities = ()

        layout = QHBoxLayout(self)

        side = QVBoxLayout()
        self._communities_label = QLabel(self._i18n.get("home.communities"))
        self._communities_label.setStyleSheet("font-weight: bold;")
        side.addWidget(self._communities_label)
        self._community_list = QListWidget()
        self._community_list.setFixedWidth(220)
        self._community_list.itemClicked.connect(self._on_community_clicked)
        side.addWidget(self._community_list)
        layout.addLayout(side)

        self._posts = PostListWidget("home.posts")
        self._posts.post_selected.connect(self.post_selected.emit)
        self._posts.refresh_requested.connect(self.load)
        layout.addWidget(self._posts, stretch=1)

        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state)
        self._bridge.attach(FeedOrchestrator(adapter, sort=sort, limit=limit))

    def load(self):
        self._bridge.orchestrator.load()

    def shutdown(self):
        self._bridge.detach()

    def _on_state(self, state: FetchState):
        if state.is_failed:
            self._communities = ()
            self._community_list.clear()
        if not state.is_loaded:
            self._posts.show_status(state)
            return
        content: FeedContent = state.data
        self._communities = content.communities
        self._community_list.clear()
        if not content.communities:
            self._communities_label.setText(self._i18n.get("home.no_communities"))
        for community in content.communities:
            label = community.title
            if community.subscriber_count is not None:
                label = f"{label}  ({community.subscriber_count})"
            item = QListWidgetItem(f"# {label}")
            item.setData(Qt.ItemDataRole.UserRole, community)
            self._community_list.addItem(item)
        self._posts.show_posts(content.posts)

    def _on_community_clicked(self, item: QListWidgetItem):
        community = item.data(Qt.ItemDataRole.UserRole)
        if community is not None:
            self.submolt_selected.emit(community)
