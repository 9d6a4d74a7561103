"""
Force Tests
===========

Each force in isolation, bound to a small graph.
"""

import numpy as np
import pytest

from forcegraph.controller.forces import CenterForce, LinkForce, ManyBodyForce
from forcegraph.model.graph import Graph


def bind(force, graph, seed=0):
    force.initialize(graph, np.random.default_rng(seed))
    return force


class TestManyBodyForce:

    def test_negative_strength_repels(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (10.0, 0.0)])
        bind(ManyBodyForce(strength=-40.0), graph).apply(alpha=1.0)
        assert graph.velocities[0, 0] < 0.0
        assert graph.velocities[1, 0] > 0.0
        assert graph.velocities[:, 1].tolist() == [0.0, 0.0]

    def test_aligned_pair_stays_on_its_axis(self):
        graph = Graph(ids=[0, 1, 2], positions=[(0.0, 0.0), (10.0, 0.0), (0.0, 30.0)])
        bind(ManyBodyForce(strength=-40.0), graph).apply(alpha=1.0)
        # Each axis only sees the pairs that are actually offset along it
        assert graph.velocities[0].tolist() == pytest.approx([-40.0 * 10.0 / 100.0, -40.0 * 30.0 / 900.0])
        assert graph.velocities[1, 1] == pytest.approx(-40.0 * 30.0 / 1000.0)
        assert graph.velocities[2, 0] == pytest.approx(-40.0 * 10.0 / 1000.0)

    def test_inverse_square_magnitude(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (10.0, 0.0)])
        bind(ManyBodyForce(strength=-40.0), graph).apply(alpha=0.5)
        # |dv| = |strength| * alpha / distance
        assert graph.velocities[1, 0] == pytest.approx(40.0 * 0.5 / 10.0)

    def test_coincident_nodes_stay_finite(self):
        graph = Graph(ids=[0, 1, 2], positions=[(5.0, 5.0), (5.0, 5.0), (5.0, 5.0)])
        bind(ManyBodyForce(strength=-40.0), graph).apply(alpha=1.0)
        assert np.all(np.isfinite(graph.velocities))
        assert np.any(graph.velocities != 0.0)

    def test_distance_max_cuts_off(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (100.0, 0.0)])
        bind(ManyBodyForce(strength=-40.0, distance_max=50.0), graph).apply(alpha=1.0)
        assert np.all(graph.velocities == 0.0)

    def test_single_node_is_untouched(self):
        graph = Graph(ids=[0], positions=[(1.0, 2.0)])
        bind(ManyBodyForce(), graph).apply(alpha=1.0)
        assert graph.velocities.tolist() == [[0.0, 0.0]]


class TestLinkForce:

    def test_stretched_link_pulls_together(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (200.0, 0.0)], links=[(0, 1)])
        bind(LinkForce(distance=100.0), graph).apply(alpha=1.0)
        assert graph.velocities[0, 0] > 0.0
        assert graph.velocities[1, 0] < 0.0

    def test_compressed_link_pushes_apart(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (20.0, 0.0)], links=[(0, 1)])
        bind(LinkForce(distance=100.0), graph).apply(alpha=1.0)
        assert graph.velocities[0, 0] < 0.0
        assert graph.velocities[1, 0] > 0.0

    def test_aligned_link_has_no_cross_axis_velocity(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (200.0, 0.0)], links=[(0, 1)])
        bind(LinkForce(distance=100.0), graph).apply(alpha=1.0)
        assert graph.velocities[:, 1].tolist() == [0.0, 0.0]

    def test_default_strength_uses_min_degree(self, triangle):
        force = bind(LinkForce(distance=10.0), triangle)
        # Every link touches a leaf of degree 1
        assert force._strengths.tolist() == [1.0, 1.0]
        # Bias shifts the correction toward the less connected endpoint
        assert force._bias.tolist() == pytest.approx([1 / 3, 2 / 3])

    def test_no_links_is_a_no_op(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (1.0, 0.0)])
        bind(LinkForce(), graph).apply(alpha=1.0)
        assert np.all(graph.velocities == 0.0)


class TestCenterForce:

    def test_moves_centroid_to_target(self):
        graph = Graph(ids=[0, 1], positions=[(0.0, 0.0), (10.0, 10.0)])
        bind(CenterForce(100.0, 50.0), graph).apply(alpha=0.0)
        np.testing.assert_allclose(graph.positions.mean(axis=0), [100.0, 50.0])
        # Relative layout is preserved
        np.testing.assert_allclose(graph.positions[1] - graph.positions[0], [10.0, 10.0])

    def test_zero_strength(self):
        graph = Graph(ids=[0], positions=[(3.0, 4.0)])
        bind(CenterForce(100.0, 50.0, strength=0.0), graph).apply(alpha=1.0)
        assert graph.positions.tolist() == [[3.0, 4.0]]
