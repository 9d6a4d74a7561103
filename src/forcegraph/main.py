"""
Application Initialization
==========================
This module builds the window and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Creates the QApplication.
3. Instantiates the Main Window with the graph configuration.
"""
import logging
import sys
from typing import Optional

from forcegraph.app.application import create_app
from forcegraph.config import GraphConfig
from forcegraph.logging_config import setup_logging
from forcegraph.view.main_window import MainWindow


def main(config: Optional[GraphConfig] = None) -> None:
    # Use logging.DEBUG to follow drag transitions
    setup_logging(level=logging.INFO)

    app = create_app()

    window = MainWindow(config or GraphConfig())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
