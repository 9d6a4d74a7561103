from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication

import sys
import os

import pyqtgraph as pg

from forcegraph.config import VISIBLE_APP_NAME

ORG_ID = "forcegraph"
APP_ID = "forcegraph"


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    os.environ.setdefault("QT_AUTO_SCREEN_SCALE_FACTOR", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)

    app = QApplication.instance() or QApplication(sys.argv)

    # Antialiased lines and circles
    pg.setConfigOptions(antialias=True)

    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app
