"""
Exception Hierarchy
===================
All errors raised by the force graph package derive from ForceGraphError so
that callers (the main window, tests) can catch the whole family at once.

Classes:
    ConstructionError: Invalid graph data or configuration at build time.
    SurfaceInitError: The drawing surface could not be created.
    SimulationError: A tick failed; the simulation instance is halted.
"""


class ForceGraphError(Exception):
    """Base class for all force graph errors."""


class ConstructionError(ForceGraphError):
    """Raised for self-links, unknown or duplicate node ids, and bad options."""


class SurfaceInitError(ForceGraphError):
    """Raised when the host surface fails to initialize."""


class SimulationError(ForceGraphError):
    """Raised when a simulation tick produces corrupted state."""
