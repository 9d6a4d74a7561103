"""
The CONTROLLER layer: the force simulation, the drag state machine and the
session that wires them to a surface.
"""
