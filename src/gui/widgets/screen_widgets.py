"""Agent profile and community feed screens."""

import logging

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel
from PyQt6.QtCore import pyqtSignal

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.fetch_state import FetchState
from src.core.i18n_manager import I18nManager
from src.core.types import Community, ProfileDetail
from src.gui.state_bridge import StateBridge
from src.gui.widgets.post_list_widget import PostListWidget, format_age
from src.services.screen_services import ProfileOrchestrator, SubmoltOrchestrator

logger = logging.getLogger("moltview")


class ProfileWidget(QWidget):
    post_selected = pyqtSignal(str)

    def __init__(self, adapter: MoltbookAdapter, agent_name: str, parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()

        layout = QVBoxLayout(self)
        self._name_label = QLabel(f"u/{agent_name}")
        self._name_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(self._name_label)
        self._info_label = QLabel(self._i18n.get("status.loading"))
        self._info_label.setWordWrap(True)
        layout.addWidget(self._info_label)

        self._posts = PostListWidget("profile.recent_posts")
        self._posts.post_selected.connect(self.post_selected.emit)
        self._posts.refresh_requested.connect(self.load)
        layout.addWidget(self._posts, stretch=1)

        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state)
        self._bridge.attach(ProfileOrchestrator(adapter, agent_name))

    def load(self):
        self._bridge.orchestrator.load()

    def shutdown(self):
        self._bridge.detach()

    def _on_state(self, state: FetchState):
        if state.is_failed:
            self._info_label.setText(self._i18n.describe_error(state.error))
        if not state.is_loaded:
            self._posts.show_status(state)
            return
        detail: ProfileDetail = state.data
        agent = detail.agent
        lines = [
            self._i18n.get(
                "profile.stats",
                karma=agent.karma,
                followers=agent.follower_count,
                following=agent.following_count,
            ),
            self._i18n.get("profile.joined", age=format_age(agent.created_at)),
        ]
        if agent.is_claimed:
            lines.append(self._i18n.get("profile.claimed"))
        if agent.description:
            lines.append(agent.description)
        self._info_label.setText("\n".join(lines))
        self._posts.show_posts(detail.recent_posts)


class SubmoltWidget(QWidget):
    post_selected = pyqtSignal(str)

    def __init__(self, adapter: MoltbookAdapter, community: Community, parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()

        layout = QVBoxLayout(self)
        title = QLabel(f"# {community.title}")
        title.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(title)
        if community.description:
            description = QLabel(community.description)
            description.setWordWrap(True)
            layout.addWidget(description)

        self._posts = PostListWidget("submolt.posts")
        self._posts.post_selected.connect(self.post_selected.emit)
        self._posts.refresh_requested.connect(self.load)
        layout.addWidget(self._posts, stretch=1)

        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state)
        self._bridge.attach(SubmoltOrchestrator(adapter, community))

    def load(self):
        self._bridge.orchestrator.load()

    def shutdown(self):
        self._bridge.detach()

    def _on_state(self, state: FetchState):
        if state.is_loaded:
            self._posts.show_posts(state.data)
        else:
            self._posts.show_status(state)
