"""Frontmatter block location and reference extraction.

A frontmatter block starts on the first line with ``---`` and ends at the next
``---`` (or ``...``) line. Reference lists inside it are located by line and
column so that ids listed there can be addressed exactly like body text::

    ---
    storyteller:
      chapter_id: chapter01
      characters: [cinderella, prince]
      settings:
        - castle
    ---
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import structlog
import yaml

from storylens.entities.models import EntityKind

logger = structlog.get_logger()

_DELIMITERS = ("---",)
_CLOSERS = ("---", "...")

REFERENCE_KEYS: dict[str, EntityKind] = {
    "characters": EntityKind.CHARACTER,
    "settings": EntityKind.SETTING,
    "foreshadowings": EntityKind.FORESHADOWING,
    "timelines": EntityKind.TIMELINE,
}
"""Frontmatter list keys that hold entity ids, and the kind each refers to."""

_KEY_LINE = re.compile(r"^(?P<indent>\s*)(?P<key>[A-Za-z_][\w-]*)\s*:\s*(?P<rest>.*?)\s*$")
_LIST_ITEM = re.compile(r"^(?P<indent>\s*)-\s+(?P<value>.*?)\s*$")


@dataclass(frozen=True)
class FrontmatterReference:
    """An id listed under a reference key, with its exact position."""

    key: str
    kind: EntityKind
    value: str
    line: int
    start_char: int
    end_char: int


@dataclass(frozen=True)
class FrontmatterBlock:
    """Location and parsed content of a frontmatter block.

    ``start_line`` is the opening delimiter, ``end_line`` the closing one.
    ``data`` is empty when the YAML inside does not parse.
    """

    start_line: int
    end_line: int
    text: str
    data: dict[str, Any] = field(default_factory=dict)
    parsed: bool = True

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    @property
    def fields(self) -> dict[str, Any]:
        """Frontmatter fields, unwrapping an optional ``storyteller:`` namespace."""
        nested = self.data.get("storyteller")
        return nested if isinstance(nested, dict) else self.data


def find_frontmatter(content: str) -> FrontmatterBlock | None:
    """Locate the frontmatter block at the top of ``content``, if any."""
    lines = content.split("\n")
    if not lines or lines[0].rstrip() not in _DELIMITERS:
        return None

    for i in range(1, len(lines)):
        if lines[i].rstrip() in _CLOSERS:
            text = "\n".join(lines[1:i])
            try:
                data = yaml.safe_load(text) if text.strip() else {}
            except yaml.YAMLError as e:
                logger.debug("frontmatter_unparsable", error=str(e))
                return FrontmatterBlock(0, i, text, parsed=False)
            return FrontmatterBlock(0, i, text, data if isinstance(data, dict) else {})

    return None


def _strip_quotes(raw: str, offset: int) -> tuple[str, int]:
    """Drop matching surrounding quotes; returns (value, start offset of value)."""
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return raw[1:-1], offset + 1
    return raw, offset


def _flow_items(rest: str, offset: int) -> list[tuple[str, int]]:
    """Split ``[a, "b", c]`` into (value, column) pairs."""
    inner_start = rest.index("[") + 1
    inner_end = rest.rfind("]")
    if inner_end == -1:
        inner_end = len(rest)
    items: list[tuple[str, int]] = []
    pos = inner_start
    for part in rest[inner_start:inner_end].split(","):
        stripped = part.strip()
        if stripped:
            lead = len(part) - len(part.lstrip())
            items.append(_strip_quotes(stripped, offset + pos + lead))
        pos += len(part) + 1
    return items


def find_references(content: str, block: FrontmatterBlock | None = None) -> list[FrontmatterReference]:
    """Locate every id listed under a reference key inside the frontmatter.

    Both flow lists (``characters: [a, b]``) and block lists
    (``- a`` lines under the key) are recognized.
    """
    block = block if block is not None else find_frontmatter(content)
    if block is None:
        return []

    lines = content.split("\n")
    refs: list[FrontmatterReference] = []
    current: tuple[str, int] | None = None  # (key, indent)

    for line_no in range(block.start_line + 1, block.end_line):
        line = lines[line_no]
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        item = _LIST_ITEM.match(line)
        if current is not None and item and len(item.group("indent")) >= current[1]:
            key = current[0]
            value, col = _strip_quotes(item.group("value"), item.start("value"))
            if value:
                refs.append(
                    FrontmatterReference(
                        key, REFERENCE_KEYS[key], value, line_no, col, col + len(value)
                    )
                )
            continue

        current = None
        key_match = _KEY_LINE.match(line)
        if not key_match or key_match.group("key") not in REFERENCE_KEYS:
            continue

        key = key_match.group("key")
        rest = key_match.group("rest")
        indent = len(key_match.group("indent"))
        if not rest:
            current = (key, indent)
        elif rest.startswith("["):
            for value, col in _flow_items(rest, key_match.start("rest")):
                refs.append(
                    FrontmatterReference(
                        key, REFERENCE_KEYS[key], value, line_no, col, col + len(value)
                    )
                )

    return refs
