import os

# Qt must not try to open a display while testing
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from forcegraph.controller.forces import CenterForce, LinkForce, ManyBodyForce
from forcegraph.controller.simulation import ForceSimulation
from forcegraph.model.graph import Graph


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def triangle() -> Graph:
    return Graph(
        ids=["a", "b", "c"],
        positions=[(100.0, 100.0), (200.0, 120.0), (150.0, 220.0)],
        links=[("a", "b"), ("b", "c")],
    )


@pytest.fixture
def simulation(qapp, triangle) -> ForceSimulation:
    sim = ForceSimulation(
        triangle,
        width=400,
        height=300,
        forces={
            "charge": ManyBodyForce(strength=-40.0),
            "link": LinkForce(distance=100.0),
            "center": CenterForce(200.0, 150.0),
        },
        seed=7,
    )
    yield sim
    sim.stop()


@pytest.fixture
def spring_pair(qapp) -> ForceSimulation:
    """Two nodes, one link of rest length 50, nothing but the spring acting on them."""
    graph = Graph(ids=[0, 1], positions=[(10.0, 10.0), (20.0, 30.0)], links=[(0, 1)])
    return ForceSimulation(graph, width=100, height=100, forces={"link": LinkForce(distance=50.0)}, seed=1)