"""Providers - hover, definition, and completion built on the detection core."""

from storylens.providers.completion import FIELD_KINDS, CompletionProvider
from storylens.providers.definition import DefinitionProvider
from storylens.providers.hover import HoverProvider, render_card

__all__ = [
    "FIELD_KINDS",
    "CompletionProvider",
    "DefinitionProvider",
    "HoverProvider",
    "render_card",
]
