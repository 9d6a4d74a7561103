"""
Graph Data Model
================
Nodes and links of the simulated graph, stored in a single node arena.

Why is this file needed?
------------------------
1. Single owner: positions, velocities and pins of all nodes live in numpy
   arrays held by one Graph. Links refer to nodes by their row index in those
   arrays, so every update made by the engine is visible through the node
   list and through every link at the same time.
2. Validation: self-links and links to unknown ids are rejected here, before
   the engine ever sees them.

Classes:
    Link: Index pair (source, target).
    Node: Live view onto one row of the arena.
    Graph: The arena itself.

Functions:
    random_graph: Random nodes scattered over a canvas with random links.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union, TYPE_CHECKING

import numpy as np

from forcegraph.errors import ConstructionError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

NodeId = Union[int, str]


@dataclass(frozen=True)
class Link:
    """A directed pair of node indices into the owning Graph."""
    source: int
    target: int


class Node:
    """
    Represents a node of the graph.

    A Node does not hold data itself, it reads and writes the row of the
    owning Graph's arrays at `index`. Two Node objects with the same graph and
    index are therefore always in sync.
    """
    __slots__ = ("_graph", "index")

    def __init__(self, graph: Graph, index: int) -> None:
        self._graph = graph
        self.index = index

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r}, x={self.x:.3f}, y={self.y:.3f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._graph is other._graph and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self._graph), self.index))

    @property
    def id(self) -> NodeId:
        return self._graph.ids[self.index]

    @property
    def x(self) -> float:
        """X-coordinate of the node."""
        return float(self._graph.positions[self.index, 0])

    @x.setter
    def x(self, value: float) -> None:
        self._graph.positions[self.index, 0] = value

    @property
    def y(self) -> float:
        """Y-coordinate of the node."""
        return float(self._graph.positions[self.index, 1])

    @y.setter
    def y(self, value: float) -> None:
        self._graph.positions[self.index, 1] = value

    @property
    def vx(self) -> float:
        return float(self._graph.velocities[self.index, 0])

    @vx.setter
    def vx(self, value: float) -> None:
        self._graph.velocities[self.index, 0] = value

    @property
    def vy(self) -> float:
        return float(self._graph.velocities[self.index, 1])

    @vy.setter
    def vy(self, value: float) -> None:
        self._graph.velocities[self.index, 1] = value

    @property
    def fx(self) -> Optional[float]:
        """Pinned x-coordinate, or None when the node moves freely."""
        value = self._graph.pins[self.index, 0]
        return None if np.isnan(value) else float(value)

    @property
    def fy(self) -> Optional[float]:
        """Pinned y-coordinate, or None when the node moves freely."""
        value = self._graph.pins[self.index, 1]
        return None if np.isnan(value) else float(value)

    @property
    def pinned(self) -> bool:
        return self.fx is not None

    @property
    def degree(self) -> int:
        """Number of links touching this node."""
        return int(self._graph.degrees[self.index])


class Graph:
    """
    Node arena plus the immutable link list.

    Attributes:
        ids: Node identifiers, position in the list is the node index.
        positions: (N, 2) array of x, y.
        velocities: (N, 2) array of vx, vy.
        pins: (N, 2) array of fx, fy. NaN rows are unpinned.
        links: Tuple of Link objects holding node indices.
        degrees: (N,) array with the number of links per node.
    """

    def __init__(
        self,
        ids: Sequence[NodeId],
        positions: Union[Sequence[Sequence[float]], npt.NDArray[np.float64]],
        links: Iterable[tuple[NodeId, NodeId]] = (),
        drop_self_links: bool = False,
    ) -> None:
        """
        Build the arena and resolve links from node ids to indices.

        Args:
            ids: Unique node identifiers.
            positions: Initial (x, y) of every node, in the order of `ids`.
            links: (source_id, target_id) pairs.
            drop_self_links: Silently discard self-links instead of raising.

        Raises:
            ConstructionError: On duplicate ids, a shape mismatch, non-finite
                positions, unknown link endpoints or (unless dropped)
                self-links.
        """
        self.ids: list[NodeId] = list(ids)
        self._index: dict[NodeId, int] = {}
        for i, node_id in enumerate(self.ids):
            if node_id in self._index:
                raise ConstructionError(f"Duplicate node id {node_id!r}.")
            self._index[node_id] = i

        n = len(self.ids)
        arr = np.asarray(positions, dtype=np.float64)
        if arr.size == 0:
            arr = arr.reshape(0, 2)
        if arr.shape != (n, 2):
            raise ConstructionError(f"Expected {n} positions of shape (N, 2), got {arr.shape}.")
        if not np.all(np.isfinite(arr)):
            raise ConstructionError("Initial node positions must be finite.")

        self.positions: npt.NDArray[np.float64] = arr.copy()
        self.velocities: npt.NDArray[np.float64] = np.zeros((n, 2), dtype=np.float64)
        self.pins: npt.NDArray[np.float64] = np.full((n, 2), np.nan, dtype=np.float64)

        resolved: list[Link] = []
        dropped = 0
        for source_id, target_id in links:
            source = self._resolve(source_id)
            target = self._resolve(target_id)
            if source == target:
                if drop_self_links:
                    dropped += 1
                    continue
                raise ConstructionError(f"Self-link on node {source_id!r} is not allowed.")
            resolved.append(Link(source, target))
        if dropped:
            logger.debug(f"Dropped {dropped} self-links.")

        self.links: tuple[Link, ...] = tuple(resolved)
        self.link_array: npt.NDArray[np.int64] = (
            np.array([(l.source, l.target) for l in self.links], dtype=np.int64).reshape(-1, 2)
        )
        self.degrees: npt.NDArray[np.int64] = np.bincount(self.link_array.ravel(), minlength=n).astype(np.int64)
        self._nodes: tuple[Node, ...] = tuple(Node(self, i) for i in range(n))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nodes={len(self)}, links={len(self.links)})"

    def __len__(self) -> int:
        return len(self.ids)

    def _resolve(self, node_id: NodeId) -> int:
        try:
            return self._index[node_id]
        except KeyError:
            raise ConstructionError(f"Link references unknown node id {node_id!r}.") from None

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def index_of(self, node_id: NodeId) -> int:
        """Arena index of a node id. Raises KeyError for unknown ids."""
        try:
            return self._index[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id {node_id!r}.") from None

    def node(self, node_id: NodeId) -> Node:
        return self._nodes[self.index_of(node_id)]

    def link_nodes(self, link: Link) -> tuple[Node, Node]:
        """Resolve a link to its (source, target) nodes."""
        return self._nodes[link.source], self._nodes[link.target]

    @property
    def pinned_mask(self) -> npt.NDArray[np.bool_]:
        """Boolean (N,) array, True where the node is pinned."""
        return ~np.isnan(self.pins[:, 0])


def random_graph(
    node_count: int,
    link_count: int,
    width: float,
    height: float,
    rng: Optional[np.random.Generator] = None,
) -> Graph:
    """
    Scatter `node_count` nodes uniformly over the canvas and draw `link_count`
    random endpoint pairs. Pairs that land on the same node are dropped, so
    the result may hold fewer links than requested.
    """
    rng = rng if rng is not None else np.random.default_rng()

    positions = rng.random((node_count, 2)) * np.array([width, height], dtype=np.float64)
    if node_count:
        pairs = rng.integers(0, node_count, size=(link_count, 2))
    else:
        pairs = np.empty((0, 2), dtype=np.int64)

    graph = Graph(
        ids=list(range(node_count)),
        positions=positions,
        links=[(int(s), int(t)) for s, t in pairs],
        drop_self_links=True,
    )
    logger.info(f"Random graph created: {len(graph)} nodes, {len(graph.links)} links.")
    return graph
