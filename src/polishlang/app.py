"""Application entry point: opens the settings window."""

import signal
import sys

from PySide6.QtWidgets import QApplication

from polishlang import __app_name__, __version__
from polishlang.core.settings import JsonSettingsStore
from polishlang.core.settings.config import COLLABORATOR_TIMEOUT_SECONDS
from polishlang.core.sync import SettingsSession
from polishlang.ui import SettingsWindow
from polishlang.utils.logger import get_logger, shutdown_logging

logger = get_logger(__name__)


def main() -> int:
    logger.info(f"Starting {__app_name__} {__version__}")

    app = QApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationVersion(__version__)

    # Allow Ctrl+C in the terminal to close the app
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    store = JsonSettingsStore()
    session = SettingsSession(store, timeout=COLLABORATOR_TIMEOUT_SECONDS)
    window = SettingsWindow(session)
    window.saved.connect(
        lambda settings: logger.info(f"Settings saved to {store.path}")
    )
    window.show()

    exit_code = app.exec()
    logger.info("Application exiting")
    shutdown_logging()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
