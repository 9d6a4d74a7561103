"""
Main Window Tests
=================

Toolbar state against the live session: the Pause/Resume action has to
follow the simulation when a drag restarts it.
"""

import pytest

from forcegraph.config import GraphConfig
from forcegraph.controller.interaction import DragState
from forcegraph.view.main_window import MainWindow


@pytest.fixture
def window(qapp):
    w = MainWindow(GraphConfig(node_count=8, link_count=10, seed=1))
    yield w
    w.close()
    w.deleteLater()


class TestPauseAction:

    def test_new_graph_starts_unpaused(self, window):
        assert window.session.simulation.is_running
        assert not window.act_pause.isChecked()
        assert window.act_pause.text() == "Pause"

    def test_pause_stops_the_simulation(self, window):
        window.act_pause.setChecked(True)
        assert not window.session.simulation.is_running
        assert window.act_pause.text() == "Resume"

        window.act_pause.setChecked(False)
        assert window.session.simulation.is_running
        assert window.act_pause.text() == "Pause"

    def test_drag_while_paused_resets_the_action(self, window):
        session = window.session
        window.act_pause.setChecked(True)

        x, y = session.graph.positions[0].tolist()
        session.surface.pointer_pressed.emit(0, x, y)

        assert session.controller.state is DragState.DRAGGING
        assert session.simulation.is_running
        assert not window.act_pause.isChecked()
        assert window.act_pause.text() == "Pause"

        session.surface.pointer_released.emit()
        assert session.controller.state is DragState.IDLE

    def test_reheat_while_paused_resets_the_action(self, window):
        window.act_pause.setChecked(True)
        window.act_reheat.trigger()
        assert window.session.simulation.is_running
        assert not window.act_pause.isChecked()
        assert window.act_pause.text() == "Pause"

    def test_new_graph_replaces_session(self, window):
        old = window.session
        window.act_pause.setChecked(True)
        window.act_new.trigger()

        assert old.closed
        assert window.session is not old
        assert window.session.simulation.is_running
        assert not window.act_pause.isChecked()
