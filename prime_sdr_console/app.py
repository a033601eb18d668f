"""Application entrypoint wiring for the PrimeSDR console.

Creates the Qt application, config and main window, then starts the backend
client. This module must not contain UI or network logic beyond orchestration.
"""

import os
import sys

from pyqtgraph.Qt import QtWidgets

from prime_sdr_console.config import ConsoleConfig
from prime_sdr_console.log import setup_logging
from prime_sdr_console.persistence import apply_state, load_state
from prime_sdr_console.ui.main_window import ConsoleWindow


def main() -> int:
    setup_logging()
    cfg = apply_state(ConsoleConfig.from_env(), load_state())
    app = QtWidgets.QApplication(sys.argv)
    theme_path = os.path.join(os.path.dirname(__file__), "ui", "theme.qss")
    if os.path.exists(theme_path):
        with open(theme_path, "r", encoding="utf-8") as handle:
            app.setStyleSheet(handle.read())
    window = ConsoleWindow(cfg)
    window.show()
    window.start()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
