"""
Graph Model Tests
=================

Construction rules of the node arena and the index-based link relation.
"""

import numpy as np
import pytest

from forcegraph.errors import ConstructionError
from forcegraph.model.graph import Graph, Link, random_graph


class TestGraphConstruction:

    def test_links_resolve_to_indices(self, triangle):
        assert triangle.links == (Link(0, 1), Link(1, 2))
        assert triangle.link_array.tolist() == [[0, 1], [1, 2]]

    def test_degree_counts_incident_links(self, triangle):
        assert [node.degree for node in triangle.nodes] == [1, 2, 1]

    def test_self_link_is_rejected(self):
        with pytest.raises(ConstructionError):
            Graph(ids=[1, 2], positions=[(0, 0), (1, 1)], links=[(1, 1)])

    def test_self_link_can_be_dropped(self):
        graph = Graph(ids=[1, 2], positions=[(0, 0), (1, 1)], links=[(1, 1), (1, 2)], drop_self_links=True)
        assert graph.links == (Link(0, 1),)
        assert graph.nodes[0].degree == 1

    def test_unknown_node_id_is_rejected(self):
        with pytest.raises(ConstructionError, match="unknown node id"):
            Graph(ids=["a"], positions=[(0, 0)], links=[("a", "z")])

    def test_duplicate_ids_are_rejected(self):
        with pytest.raises(ConstructionError):
            Graph(ids=["a", "a"], positions=[(0, 0), (1, 1)])

    def test_position_shape_mismatch(self):
        with pytest.raises(ConstructionError):
            Graph(ids=["a", "b"], positions=[(0, 0)])

    def test_non_finite_position(self):
        with pytest.raises(ConstructionError):
            Graph(ids=["a"], positions=[(np.nan, 0.0)])

    def test_empty_graph(self):
        graph = Graph(ids=[], positions=[])
        assert len(graph) == 0
        assert graph.links == ()
        assert graph.positions.shape == (0, 2)


class TestNodeView:

    def test_node_and_link_share_state(self, triangle):
        """Writes through the arena are visible from every node view and link."""
        triangle.positions[1] = (500.0, 600.0)
        source, target = triangle.link_nodes(triangle.links[0])
        assert (target.x, target.y) == (500.0, 600.0)
        assert triangle.node("b") == target

    def test_setters_write_to_arena(self, triangle):
        node = triangle.node("c")
        node.x = 1.0
        node.vy = -2.0
        assert triangle.positions[2, 0] == 1.0
        assert triangle.velocities[2, 1] == -2.0

    def test_pin_fields_default_to_none(self, triangle):
        node = triangle.node("a")
        assert node.fx is None and node.fy is None
        assert not node.pinned

        triangle.pins[0] = (3.0, 4.0)
        assert (node.fx, node.fy) == (3.0, 4.0)
        assert node.pinned
        assert triangle.pinned_mask.tolist() == [True, False, False]

    def test_index_of_unknown_id(self, triangle):
        with pytest.raises(KeyError):
            triangle.index_of("nope")


class TestRandomGraph:

    def test_no_self_links(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            graph = random_graph(5, 30, 800, 600, rng)
            assert all(link.source != link.target for link in graph.links)
            assert len(graph.links) <= 30

    def test_positions_inside_canvas(self):
        graph = random_graph(50, 0, 800, 600, np.random.default_rng(0))
        assert np.all(graph.positions >= 0.0)
        assert np.all(graph.positions[:, 0] <= 800.0)
        assert np.all(graph.positions[:, 1] <= 600.0)

    def test_seed_is_reproducible(self):
        a = random_graph(10, 15, 800, 600, np.random.default_rng(42))
        b = random_graph(10, 15, 800, 600, np.random.default_rng(42))
        np.testing.assert_array_equal(a.positions, b.positions)
        assert a.links == b.links

    def test_zero_nodes(self):
        graph = random_graph(0, 0, 800, 600)
        assert len(graph) == 0
