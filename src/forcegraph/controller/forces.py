"""
Layout Forces
=============
The three forces of the classic force-directed model.

Why is this file needed?
------------------------
1. Separation: the engine only knows the Force interface (initialize once,
   apply every tick). Each force decides for itself how it reads and writes
   the node arena.
2. Vectorization: all pairwise work is done with numpy on the (N, 2)
   position and velocity arrays of the Graph.

Classes:
    Force: Abstract base class.
    ManyBodyForce: Pairwise repulsion (or attraction for positive strength).
    LinkForce: Springs along links.
    CenterForce: Moves the centroid toward a target point.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from forcegraph.model.graph import Graph

# Jitter amplitude used when two nodes coincide
JIGGLE_SCALE = 1e-6


class Force(ABC):
    """
    Abstract base class for simulation forces.
    """

    def __init__(self) -> None:
        self.graph: Optional[Graph] = None
        self.rng: Optional[np.random.Generator] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def initialize(self, graph: Graph, rng: np.random.Generator) -> None:
        """Bind the force to the graph it acts on. Called once by the engine."""
        self.graph = graph
        self.rng = rng

    @abstractmethod
    def apply(self, alpha: float) -> None:
        """Update velocities (or positions) of the bound graph for one tick."""
        pass

    def _jiggle(self, count: int) -> npt.NDArray[np.float64]:
        """Tiny random (x, y) offsets replacing zero-length distance vectors."""
        rng = self.rng if self.rng is not None else np.random.default_rng()
        values = (rng.random((count, 2)) - 0.5) * JIGGLE_SCALE
        # random() may return exactly 0.5
        values[values == 0.0] = JIGGLE_SCALE / 4
        return values


class ManyBodyForce(Force):
    """
    Every node pushes every other node with strength / distance².

    Distances below `distance_min` are softened so the force stays bounded;
    pairs farther than `distance_max` do not interact.
    """

    def __init__(
        self,
        strength: float = -30.0,
        distance_min: float = 1.0,
        distance_max: float = np.inf,
    ) -> None:
        super().__init__()
        self.strength = strength
        self.distance_min = distance_min
        self.distance_max = distance_max

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(strength={self.strength})"

    def apply(self, alpha: float) -> None:
        graph = self.graph
        n = len(graph)
        if n < 2 or self.strength == 0.0:
            return

        pos = graph.positions
        # delta[i, j] points from node i to node j
        delta = pos[np.newaxis, :, :] - pos[:, np.newaxis, :]
        off_diagonal = ~np.eye(n, dtype=bool)

        # Only pairs at exactly the same position, not merely aligned ones
        coincident = np.all(delta == 0.0, axis=2) & off_diagonal
        if coincident.any():
            delta[coincident] = self._jiggle(int(coincident.sum()))

        dist2 = np.einsum("ijk,ijk->ij", delta, delta)
        min2 = self.distance_min ** 2
        dist2 = np.where(dist2 < min2, np.sqrt(min2 * dist2), dist2)
        dist2[~off_diagonal] = np.inf
        dist2[dist2 >= self.distance_max ** 2] = np.inf

        weights = self.strength * alpha / dist2
        graph.velocities += np.einsum("ij,ijk->ik", weights, delta)


class LinkForce(Force):
    """
    Springs pulling linked nodes toward `distance` apart.

    Unless given explicitly, the strength of a link is 1 / min(degree) of its
    endpoints, so hubs are not torn apart by their many springs. The
    correction is split between both endpoints by their relative degree.
    """

    def __init__(
        self,
        distance: float = 30.0,
        strength: Optional[float] = None,
        iterations: int = 1,
    ) -> None:
        super().__init__()
        self.distance = distance
        self.strength = strength
        self.iterations = iterations
        self._strengths: npt.NDArray[np.float64] = np.empty(0)
        self._bias: npt.NDArray[np.float64] = np.empty(0)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(distance={self.distance}, iterations={self.iterations})"

    def initialize(self, graph: Graph, rng: np.random.Generator) -> None:
        super().initialize(graph, rng)
        links = graph.link_array
        count = graph.degrees.astype(np.float64)
        source_count = count[links[:, 0]]
        target_count = count[links[:, 1]]

        self._bias = source_count / (source_count + target_count) if len(links) else np.empty(0)
        if self.strength is None:
            self._strengths = 1.0 / np.minimum(source_count, target_count) if len(links) else np.empty(0)
        else:
            self._strengths = np.full(len(links), float(self.strength))

    def apply(self, alpha: float) -> None:
        graph = self.graph
        links = graph.link_array
        if len(links) == 0:
            return

        source, target = links[:, 0], links[:, 1]
        pos, vel = graph.positions, graph.velocities

        for _ in range(self.iterations):
            # Predicted separation after this tick's velocities
            delta = pos[target] + vel[target] - pos[source] - vel[source]
            zero = np.all(delta == 0.0, axis=1)
            if zero.any():
                delta[zero] = self._jiggle(int(zero.sum()))

            length = np.hypot(delta[:, 0], delta[:, 1])
            scale = (length - self.distance) / length * alpha * self._strengths
            delta *= scale[:, np.newaxis]

            np.add.at(vel, target, -delta * self._bias[:, np.newaxis])
            np.add.at(vel, source, delta * (1.0 - self._bias)[:, np.newaxis])


class CenterForce(Force):
    """
    Translates all nodes so their centroid moves toward (x, y).

    Unlike the other forces this acts on positions directly and does not
    depend on alpha. `strength` is the fraction of the offset removed per tick.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0) -> None:
        super().__init__()
        self.x = x
        self.y = y
        self.strength = strength

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(x={self.x}, y={self.y}, strength={self.strength})"

    def apply(self, alpha: float) -> None:
        pos = self.graph.positions
        if len(pos) == 0 or self.strength == 0.0:
            return
        shift = (pos.mean(axis=0) - np.array([self.x, self.y])) * self.strength
        pos -= shift
