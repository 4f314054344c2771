"""Main application window with sidebar navigation and a screen stack."""

import logging

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout,
    QPushButton, QStackedWidget, QStatusBar, QInputDialog, QLineEdit,
)

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.config_manager import ConfigManager
from src.core.credential_store import CredentialStore
from src.core.exceptions import ConfigError
from src.core.i18n_manager import I18nManager
from src.gui.widgets.home_widget import HomeWidget
from src.gui.widgets.post_detail_widget import PostDetailWidget
from src.gui.widgets.screen_widgets import ProfileWidget, SubmoltWidget
from src.gui.widgets.search_widget import SearchWidget

logger = logging.getLogger("moltview")


class MainWindow(QMainWindow):
    """Sidebar + stacked screens.

    Each navigation pushes a fresh screen widget that owns its own
    orchestrator; going back shuts that screen down, discarding its state.
    """

    def __init__(self, adapter: MoltbookAdapter, config: ConfigManager, credentials: CredentialStore):
        super().__init__()
        self._adapter = adapter
        self._config = config
        self._credentials = credentials
        self._i18n = I18nManager()

        self.setWindowTitle(self._i18n.get("app.title"))
        self.setMinimumSize(900, 600)

        self._init_ui()
        self._go_home()

    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # === Sidebar ===
        sidebar = QWidget()
        sidebar.setFixedWidth(120)
        sidebar.setStyleSheet("background-color: #2b2b2b;")
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(8, 16, 8, 16)

        self._home_btn = QPushButton(self._i18n.get("nav.home"))
        self._home_btn.clicked.connect(self._go_home)
        sidebar_layout.addWidget(self._home_btn)

        self._search_btn = QPushButton(self._i18n.get("nav.search"))
        self._search_btn.clicked.connect(self._open_search)
        sidebar_layout.addWidget(self._search_btn)

        self._back_btn = QPushButton(self._i18n.get("nav.back"))
        self._back_btn.clicked.connect(self._go_back)
        sidebar_layout.addWidget(self._back_btn)

        sidebar_layout.addStretch()

        self._token_btn = QPushButton(self._i18n.get("nav.token"))
        self._token_btn.clicked.connect(self._edit_token)
        sidebar_layout.addWidget(self._token_btn)

        for btn in (self._home_btn, self._search_btn, self._back_btn, self._token_btn):
            btn.setStyleSheet(self._nav_btn_style())

        main_layout.addWidget(sidebar)

        # === Screen stack ===
        self._stack = QStackedWidget()
        main_layout.addWidget(self._stack)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._update_auth_status()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _push(self, screen: QWidget):
        self._stack.addWidget(screen)
        self._stack.setCurrentWidget(screen)
        self._back_btn.setEnabled(self._stack.count() > 1)
        screen.load()

    def _pop(self):
        screen = self._stack.currentWidget()
        if screen is None:
            return
        screen.shutdown()
        self._stack.removeWidget(screen)
        screen.deleteLater()

    def _go_back(self):
        if self._stack.count() <= 1:
            return
        self._pop()
        self._back_btn.setEnabled(self._stack.count() > 1)

    def _go_home(self):
        while self._stack.count():
            self._pop()
        home = HomeWidget(
            self._adapter,
            sort=self._config.get("feed.sort", "hot"),
            limit=self._config.get("feed.limit", 25),
        )
        home.post_selected.connect(self._open_post)
        home.submolt_selected.connect(self._open_submolt)
        self._push(home)

    def _open_post(self, post_id: str):
        screen = PostDetailWidget(self._adapter, post_id)
        screen.author_selected.connect(self._open_profile)
        self._push(screen)

    def _open_submolt(self, community):
        screen = SubmoltWidget(self._adapter, community)
        screen.post_selected.connect(self._open_post)
        self._push(screen)

    def _open_profile(self, agent_name: str):
        screen = ProfileWidget(self._adapter, agent_name)
        screen.post_selected.connect(self._open_post)
        self._push(screen)

    def _open_search(self):
        screen = SearchWidget(self._adapter, debounce_sec=self._config.debounce_sec)
        screen.post_selected.connect(self._open_post)
        screen.submolt_selected.connect(self._open_submolt)
        self._push(screen)

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def _edit_token(self):
        token, ok = QInputDialog.getText(
            self,
            self._i18n.get("auth.title"),
            self._i18n.get("auth.prompt"),
            QLineEdit.EchoMode.Password,
        )
        if not ok:
            return
        try:
            self._credentials.set_token(token.strip() or None)
        except ConfigError as e:
            logger.error(f"Token not saved: {e.message}")
            self._status_bar.showMessage(self._i18n.get("auth.save_failed", error=e.message))
            return
        self._update_auth_status()

    def _update_auth_status(self):
        key = "auth.signed_in" if self._credentials.is_authenticated else "auth.signed_out"
        self._status_bar.showMessage(self._i18n.get(key))

    def closeEvent(self, event):
        while self._stack.count():
            self._pop()
        super().closeEvent(event)

    @staticmethod
    def _nav_btn_style() -> str:
        return (
            "QPushButton {"
            "  background-color: transparent;"
            "  color: #aaaaaa;"
            "  border: none;"
            "  padding: 10px;"
            "  text-align: left;"
            "}"
            "QPushButton:hover {"
            "  background-color: #333333;"
            "  color: white;"
            "}"
        )
