"""Storylens CLI."""
