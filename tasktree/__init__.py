"""Hierarchical task tracker with parent/child status propagation."""

__version__ = "0.1.0"
