"""Interactive force-directed graph layout on a pyqtgraph canvas."""
__version__ = "0.1.0"
