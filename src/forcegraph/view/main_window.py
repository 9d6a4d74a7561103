"""
Main Application Window
=======================
The primary GUI container that holds the toolbar, the graph canvas and the
status bar.

Why is this file needed?
------------------------
1. Layout: It centres the fixed-size canvas inside a resizable window.
2. Routing: It connects toolbar actions (Reheat, Pause/Resume, New Graph) to
   the current ForceGraphSession, and replaces the session when a new graph
   is requested.
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QLabel, QMessageBox
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction

from forcegraph.config import GraphConfig, VISIBLE_APP_NAME
from forcegraph.controller.session import ForceGraphSession
from forcegraph.errors import ForceGraphError
from forcegraph.view.canvas import create_surface

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config: Optional[GraphConfig] = None) -> None:
        super().__init__()
        self.config: GraphConfig = config or GraphConfig()
        self.session: Optional[ForceGraphSession] = None

        self.setWindowTitle(VISIBLE_APP_NAME)

        # --- CANVAS CONTAINER ---
        self._container = QWidget()
        self._layout = QVBoxLayout(self._container)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setAlignment(Qt.AlignCenter)
        self.setCentralWidget(self._container)

        # --- ACTIONS & TOOLBAR ---
        toolbar = self.addToolBar("Simulation")
        toolbar.setMovable(False)

        self.act_reheat = QAction("Reheat", self)
        self.act_reheat.triggered.connect(self.on_reheat)
        toolbar.addAction(self.act_reheat)

        self.act_pause = QAction("Pause", self)
        self.act_pause.setCheckable(True)
        self.act_pause.toggled.connect(self.on_pause_toggled)
        toolbar.addAction(self.act_pause)

        self.act_new = QAction("New Graph", self)
        self.act_new.triggered.connect(self.new_graph)
        toolbar.addAction(self.act_new)

        # --- STATUS BAR ---
        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)

        self._status_timer = QTimer(self)
        self._status_timer.setInterval(250)
        self._status_timer.timeout.connect(self.update_status)
        self._status_timer.start()

        self.new_graph()

    def new_graph(self) -> None:
        """Tear down the current session and start a fresh random graph."""
        if self.session is not None:
            self._layout.removeWidget(self.session.surface)
            self.session.close()
            self.session = None

        try:
            session = ForceGraphSession.create(
                self.config,
                surface_factory=lambda w, h: create_surface(w, h, parent=self._container),
            )
        except ForceGraphError as e:
            logger.error(f"Could not create graph: {e}")
            QMessageBox.critical(self, "Error", f"Could not create graph:\n{e}")
            return

        self._layout.addWidget(session.surface)
        session.connect(session.simulation.failed, self.on_simulation_failed)
        session.connect(session.controller.state_changed, self.sync_pause_action)
        self.session = session

        session.start()
        self.sync_pause_action()
        self.update_status()

    def on_reheat(self) -> None:
        if self.session is None or self.session.simulation.error is not None:
            return
        self.session.simulation.reheat()
        self.sync_pause_action()

    def on_pause_toggled(self, paused: bool) -> None:
        if self.session is None or self.session.simulation.error is not None:
            return
        if paused:
            self.session.simulation.stop()
            self.act_pause.setText("Resume")
        else:
            self.session.simulation.start()
            self.act_pause.setText("Pause")

    def sync_pause_action(self, *_) -> None:
        """Show Pause again once something other than the action restarted the loop."""
        if self.session is None or not self.session.simulation.is_running:
            return
        self.act_pause.blockSignals(True)
        self.act_pause.setChecked(False)
        self.act_pause.setText("Pause")
        self.act_pause.blockSignals(False)

    def on_simulation_failed(self, message: str) -> None:
        self.statusBar().showMessage(f"Simulation halted: {message}")
        QMessageBox.warning(self, "Simulation halted", message)

    def update_status(self) -> None:
        if self.session is None:
            self.status_label.setText("No graph")
            return
        sim = self.session.simulation
        state = "running" if sim.is_running else "settled"
        self.status_label.setText(
            f"Nodes: {len(self.session.graph)}  Links: {len(self.session.graph.links)}  "
            f"Alpha: {sim.alpha:.3f} ({state})"
        )

    def closeEvent(self, event) -> None:
        self._status_timer.stop()
        if self.session is not None:
            self.session.close()
            self.session = None
        super().closeEvent(event)
