"""Storylens - entity detection and diagnostics for manuscript authoring tools."""

__version__ = "0.1.0"
