"""MoltView application entry point."""

import sys

from PyQt6.QtWidgets import QApplication

from src.adapters.api_adapter import MoltbookAPIAdapter
from src.adapters.transport import HttpTransport
from src.core.config_manager import ConfigManager
from src.core.credential_store import FileCredentialStore
from src.core.i18n_manager import I18nManager
from src.core.logger import setup_logger
from src.gui.main_window import MainWindow


def main():
    """Main entry point for MoltView.

    Startup sequence:
    1. ConfigManager init (loads or creates settings.yaml)
    2. Logger init (reads log_level from config)
    3. I18nManager init (reads locale from config)
    4. Credential store + transport + adapter creation
    5. QApplication + MainWindow, then the event loop
    """
    # 1. ConfigManager (loads or creates settings.yaml)
    config = ConfigManager()

    # 2. Logger
    log_level = config.get("app.log_level", "INFO")
    mask_logs = config.get("security.mask_logs", True)
    logger = setup_logger(log_level=log_level, mask_logs=mask_logs)
    logger.info("MoltView starting...")

    # 3. I18nManager
    i18n = I18nManager()
    locale = config.get("app.locale", "en_US")
    i18n.load_locale(locale)
    logger.info(f"Locale loaded: {locale}")

    # 4. Data access (credential provider injected into the transport)
    credentials = FileCredentialStore(config.get_token_path())
    mock_mode = config.get("api.mock_mode", False)
    transport = HttpTransport(
        credentials,
        base_url=config.get("api.base_url", "https://www.moltbook.com/api/v1"),
        timeout=config.get("api.timeout", 30),
    )
    adapter = MoltbookAPIAdapter(transport, mock_mode=mock_mode)
    if mock_mode:
        logger.info("Mock mode enabled: no network requests will be made")

    # 5. UI
    app = QApplication(sys.argv)
    window = MainWindow(adapter, config, credentials)
    window.show()
    logger.info("MoltView UI ready")

    exit_code = app.exec()
    logger.info("MoltView shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
