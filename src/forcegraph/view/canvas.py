"""
Drawing Surface (pyqtgraph)
===========================
The host surface: a fixed-size pyqtgraph view that presents frames and
reports pointer input.

Why is this file needed?
------------------------
1. Presentation: It turns a frame of primitives into two pyqtgraph items (one
   PlotCurveItem holding all link segments, one ScatterPlotItem holding all
   node circles) instead of one Qt item per node.
2. Input: It owns hit-testing. A left-button press on a circle is reported
   at once as pointer_pressed(index, x, y), followed by pointer_moved(x, y)
   for every move and pointer_released() on release. The mouse is grabbed
   from press to release, so moves and the release are reported even
   outside the canvas.

Classes:
    Surface: Protocol the session programs against.
    GraphCanvas: pyqtgraph implementation.

Functions:
    create_surface: Validated factory raising SurfaceInitError.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QApplication, QWidget

from forcegraph.config import BACKGROUND_COLOR, LINK_COLOR, LINK_WIDTH, NODE_COLOR
from forcegraph.errors import SurfaceInitError
from forcegraph.view.render import CirclePrimitive, LinePrimitive

if TYPE_CHECKING:
    import numpy.typing as npt
    from PySide6.QtCore import SignalInstance
    from PySide6.QtGui import QMouseEvent
    from forcegraph.view.render import Primitive

logger = logging.getLogger(__name__)


class Surface(Protocol):
    pointer_pressed: SignalInstance
    pointer_moved: SignalInstance
    pointer_released: SignalInstance

    def present(self, primitives: Sequence[Primitive]) -> None: ...
    def destroy(self) -> None: ...


class GraphCanvas(pg.GraphicsView):
    """
    Fixed W×H canvas with a top-left origin and y pointing down, matching the
    simulation's coordinate system one to one.
    """
    pointer_pressed = Signal(int, float, float)
    pointer_moved = Signal(float, float)
    pointer_released = Signal()

    def __init__(self, width: int, height: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent=parent, background=BACKGROUND_COLOR)
        self.canvas_width = width
        self.canvas_height = height
        self._destroyed = False
        self._pointer_down = False

        self.setFixedSize(width, height)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        self.view_box = pg.ViewBox(enableMenu=False, invertY=True)
        self.view_box.setMouseEnabled(x=False, y=False)
        self.setCentralItem(self.view_box)
        self.view_box.disableAutoRange()
        self.view_box.setRange(xRange=(0, width), yRange=(0, height), padding=0)

        self._links = pg.PlotCurveItem(pen=pg.mkPen(color=LINK_COLOR, width=LINK_WIDTH))
        self._links.setZValue(0)
        self._nodes = pg.ScatterPlotItem(pxMode=False, pen=None, symbol="o")
        self._nodes.setZValue(1)
        self.view_box.addItem(self._links)
        self.view_box.addItem(self._nodes)

        # Last presented circles, used for hit-testing
        self._circle_xy: npt.NDArray[np.float64] = np.empty((0, 2))
        self._circle_r: npt.NDArray[np.float64] = np.empty(0)

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def present(self, primitives: Sequence[Primitive]) -> None:
        """
        Replace everything on the canvas with the given frame.

        Circles are remembered in frame order; `node_at` reports indices in
        that order.
        """
        if self._destroyed:
            return

        lines = [p for p in primitives if isinstance(p, LinePrimitive)]
        circles = [p for p in primitives if isinstance(p, CirclePrimitive)]

        if lines:
            xs = np.array([(l.x1, l.x2) for l in lines], dtype=np.float64).ravel()
            ys = np.array([(l.y1, l.y2) for l in lines], dtype=np.float64).ravel()
            self._links.setData(x=xs, y=ys, connect="pairs")
        else:
            self._links.clear()

        self._circle_xy = np.array([(c.x, c.y) for c in circles], dtype=np.float64).reshape(-1, 2)
        self._circle_r = np.array([c.radius for c in circles], dtype=np.float64)
        if circles:
            brushes = [pg.mkBrush(*NODE_COLOR, int(round(255 * c.opacity))) for c in circles]
            self._nodes.setData(
                x=self._circle_xy[:, 0],
                y=self._circle_xy[:, 1],
                size=2.0 * self._circle_r,
                brush=brushes,
            )
        else:
            self._nodes.clear()

    def node_at(self, x: float, y: float) -> Optional[int]:
        """Index of the circle under (x, y), the closest one if several overlap."""
        if len(self._circle_r) == 0:
            return None
        dist = np.hypot(self._circle_xy[:, 0] - x, self._circle_xy[:, 1] - y)
        hits = np.flatnonzero(dist <= self._circle_r)
        if len(hits) == 0:
            return None
        return int(hits[np.argmin(dist[hits])])

    def _to_canvas(self, ev: QMouseEvent) -> tuple[float, float]:
        point = self.view_box.mapSceneToView(self.mapToScene(ev.position().toPoint()))
        return float(point.x()), float(point.y())

    def mousePressEvent(self, ev: QMouseEvent) -> None:
        if self._destroyed or self._pointer_down or ev.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(ev)
            return

        x, y = self._to_canvas(ev)
        index = self.node_at(x, y)
        if index is None:
            super().mousePressEvent(ev)
            return

        # The viewport keeps the implicit mouse grab until release
        self._pointer_down = True
        ev.accept()
        self.pointer_pressed.emit(index, x, y)

    def mouseMoveEvent(self, ev: QMouseEvent) -> None:
        if not self._pointer_down:
            super().mouseMoveEvent(ev)
            return
        ev.accept()
        self.pointer_moved.emit(*self._to_canvas(ev))

    def mouseReleaseEvent(self, ev: QMouseEvent) -> None:
        if not self._pointer_down or ev.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(ev)
            return
        self._pointer_down = False
        ev.accept()
        self.pointer_released.emit()

    def destroy(self) -> None:
        """Clear the canvas and schedule the widget for deletion. Idempotent."""
        if self._destroyed:
            return
        self._destroyed = True
        self._links.clear()
        self._nodes.clear()
        self._circle_xy = np.empty((0, 2))
        self._circle_r = np.empty(0)
        self.close()
        self.deleteLater()
        logger.debug("Canvas destroyed.")


def create_surface(width: int, height: int, parent: Optional[QWidget] = None) -> GraphCanvas:
    """
    Create a drawable W×H surface.

    Raises:
        SurfaceInitError: If the size is invalid, no QApplication exists or
            the widget could not be constructed.
    """
    if width <= 0 or height <= 0:
        raise SurfaceInitError(f"Surface size must be positive, got {width}x{height}.")
    if QApplication.instance() is None:
        raise SurfaceInitError("A QApplication must exist before creating a surface.")

    try:
        canvas = GraphCanvas(int(width), int(height), parent=parent)
    except Exception as e:
        logger.exception(f"Failed to create surface: {e}")
        raise SurfaceInitError(f"Failed to create surface: {e}") from e

    logger.info(f"Surface created ({width}x{height}).")
    return canvas
