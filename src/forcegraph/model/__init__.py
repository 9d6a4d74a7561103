"""
The MODEL layer contains pure graph data.
It has NO knowledge of the GUI (Qt) or the drawing surface (pyqtgraph).
"""
from forcegraph.model.graph import Graph, Link, Node, NodeId, random_graph

__all__ = ["Graph", "Link", "Node", "NodeId", "random_graph"]
