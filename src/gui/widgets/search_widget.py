"""Search-as-you-type screen."""

import logging

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QLineEdit,
    QListWidget, QListWidgetItem, QLabel,
)
from PyQt6.QtCore import Qt, pyqtSignal

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.fetch_state import FetchState
from src.core.i18n_manager import I18nManager
from src.core.types import SearchResult
from src.gui.state_bridge import StateBridge
from src.services.search_service import SearchOrchestrator

logger = logging.getLogger("moltview")


def result_item_text(result: SearchResult) -> str:
    kind = result.type.lower()
    headline = result.title or (result.post.title if result.post else "") or result.content or ""
    parts = [f"[{kind}] {headline.splitlines()[0] if headline else ''}"]
    meta = []
    if result.author is not None:
        meta.append(f"u/{result.author.name}")
    if result.submolt is not None:
        meta.append(result.submolt.title)
    if result.similarity is not None:
        meta.append(f"{result.similarity:.0%}")
    meta.append(f"↑{result.score}")
    parts.append(" · ".join(meta))
    return "\n".join(parts)


class SearchWidget(QWidget):
    post_selected = pyqtSignal(str)
    submolt_selected = pyqtSignal(object)   # Community

    def __init__(self, adapter: MoltbookAdapter, debounce_sec: float = 0.3,
                 initial_query: str = "", parent=None):
        super().__init__(parent)
        self._i18n = I18nManager()
        self._results: tuple[SearchResult, ...] = ()

        layout = QVBoxLayout(self)

        self._query_edit = QLineEdit()
        self._query_edit.setPlaceholderText(self._i18n.get("search.placeholder"))
        layout.addWidget(self._query_edit)

        self._status_label = QLabel(self._i18n.get("search.prompt"))
        layout.addWidget(self._status_label)

        self._result_list = QListWidget()
        self._result_list.itemClicked.connect(self._on_result_clicked)
        layout.addWidget(self._result_list, stretch=1)

        self._orchestrator = SearchOrchestrator(adapter, debounce_sec=debounce_sec)
        self._bridge = StateBridge(self)
        self._bridge.state_changed.connect(self._on_state)
        self._bridge.attach(self._orchestrator)

        self._query_edit.textChanged.connect(self._orchestrator.set_query)
        if initial_query:
            self._query_edit.setText(initial_query)

    def load(self):
        self._orchestrator.load()

    def shutdown(self):
        self._bridge.detach()

    def _on_state(self, state: FetchState):
        self._result_list.clear()
        self._results = ()
        if state.is_loading:
            self._status_label.setText(self._i18n.get("status.loading"))
            return
        if state.is_failed:
            self._status_label.setText(
                self._i18n.get("search.failed") + " " + self._i18n.describe_error(state.error)
            )
            return
        if state.is_idle:
            self._status_label.setText(self._i18n.get("search.prompt"))
            return

        self._results = state.data
        if not self._results:
            self._status_label.setText(
                self._i18n.get("search.no_results", query=self._orchestrator.query.strip())
            )
            return
        self._status_label.setText(self._i18n.get("search.result_count", count=len(self._results)))
        for index, result in enumerate(self._results):
            item = QListWidgetItem(result_item_text(result))
            item.setData(Qt.ItemDataRole.UserRole, index)
            self._result_list.addItem(item)

    def _on_result_clicked(self, item: QListWidgetItem):
        index = item.data(Qt.ItemDataRole.UserRole)
        if index is None or index >= len(self._results):
            return
        result = self._results[index]
        post_id = result.target_post_id
        if post_id is not None:
            self.post_selected.emit(post_id)
        elif result.type.lower() == "submolt" and result.submolt is not None:
            self.submolt_selected.emit(result.submolt)
        else:
            self._status_label.setText(self._i18n.get("search.cannot_open"))
