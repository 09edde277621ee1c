"""Lexical context at a cursor position.

Classifies where the cursor sits: inside or outside a string literal, under
which field, and in which host syntax. Completion and hover consumers use the
result as a semantic anchor. Analysis never raises; a position that cannot be
classified yields ``in_string_literal=False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath

from storylens.detection.frontmatter import find_frontmatter


class FileSyntax(StrEnum):
    """Host syntax of the document being analyzed."""

    CODE = "code"
    YAML = "yaml"
    JSON = "json"
    MARKDOWN = "markdown"

    @classmethod
    def from_path(cls, path: str) -> FileSyntax:
        suffix = PurePosixPath(path).suffix.lower()
        if suffix in (".yaml", ".yml"):
            return cls.YAML
        if suffix == ".json":
            return cls.JSON
        if suffix in (".md", ".markdown"):
            return cls.MARKDOWN
        return cls.CODE


@dataclass(frozen=True)
class LexicalContext:
    """Cursor classification.

    ``string_start`` is the column of the opening quote. ``string_end`` is the
    column of the closing quote, or -1 while the string is still unterminated.
    """

    in_string_literal: bool
    file_syntax: FileSyntax
    field_name: str | None = None
    string_start: int = -1
    string_end: int = -1
    prefix: str = ""
    object_path: tuple[str, ...] = ()


_QUOTES: dict[FileSyntax, tuple[str, ...]] = {
    FileSyntax.CODE: ('"', "'", "`"),
    FileSyntax.JSON: ('"',),
    FileSyntax.YAML: ('"', "'"),
    FileSyntax.MARKDOWN: ('"', "'"),
}

_INLINE_KEY = re.compile(r"""["']?([A-Za-z_]\w*)["']?\s*:""")
_YAML_KEY = re.compile(r"^\s*(?:-\s+)?([A-Za-z_][\w-]*)\s*:")
_YAML_LIST_ITEM = re.compile(r"^\s*-\s")
_TRAILING_KEY = re.compile(r"""["']?([A-Za-z_]\w*)["']?\s*:\s*$""")
_OBJECT_KEY = re.compile(r"""^\s*["']?(\w+)["']?\s*:\s*\{?\s*$""")
_WORD_TAIL = re.compile(r"[\w\-]*$")


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


class ContextAnalyzer:
    """Computes LexicalContext per query. Holds no state."""

    def analyze(
        self,
        content: str,
        line: int,
        character: int,
        file_syntax: FileSyntax = FileSyntax.CODE,
    ) -> LexicalContext:
        lines = content.split("\n")
        if line < 0 or character < 0 or line >= len(lines) or character > len(lines[line]):
            return LexicalContext(in_string_literal=False, file_syntax=file_syntax)

        current = lines[line]
        syntax = file_syntax
        if file_syntax == FileSyntax.MARKDOWN:
            block = find_frontmatter(content)
            if block is None or not (block.start_line < line < block.end_line):
                # Prose: quotes carry no structure
                return LexicalContext(in_string_literal=False, file_syntax=file_syntax)
            syntax = FileSyntax.YAML

        in_string, start, end = self._find_string(current, character, _QUOTES[syntax])
        anchor = start if in_string else character

        if syntax == FileSyntax.YAML:
            field_name = self._yaml_field(lines, line, current[:anchor])
        else:
            field_name = self._code_field(lines, line, current[:anchor])

        if in_string:
            prefix = current[start + 1 : character]
        elif syntax == FileSyntax.YAML:
            tail = _WORD_TAIL.search(current[:character])
            prefix = tail.group(0) if tail else ""
        else:
            prefix = ""

        return LexicalContext(
            in_string_literal=in_string,
            file_syntax=file_syntax,
            field_name=field_name,
            string_start=start,
            string_end=end,
            prefix=prefix,
            object_path=self._object_path(lines, line),
        )

    @staticmethod
    def _find_string(line: str, character: int, quotes: tuple[str, ...]) -> tuple[bool, int, int]:
        """(inside, opening column, closing column or -1) for the cursor column."""
        quote: str | None = None
        start = -1
        i = 0
        limit = min(character, len(line))
        while i < limit:
            ch = line[i]
            if quote is not None and ch == "\\":
                i += 2
                continue
            if quote is None and ch in quotes:
                quote, start = ch, i
            elif ch == quote:
                quote, start = None, -1
            i += 1

        if quote is None:
            return False, -1, -1

        j = max(i, character)
        while j < len(line):
            ch = line[j]
            if ch == "\\":
                j += 2
                continue
            if ch == quote:
                return True, start, j
            j += 1
        return True, start, -1

    @staticmethod
    def _code_field(lines: list[str], line: int, before: str) -> str | None:
        """Nearest ``key:`` on the line, else the key owning the enclosing bracket."""
        keys = _INLINE_KEY.findall(before)
        if keys:
            return keys[-1]

        depth = 0
        text = before
        row = line
        while True:
            for col in range(len(text) - 1, -1, -1):
                ch = text[col]
                if ch in "]}":
                    depth += 1
                elif ch in "[{":
                    if depth == 0:
                        owner = _TRAILING_KEY.search(text[:col])
                        return owner.group(1) if owner else None
                    depth -= 1
            row -= 1
            if row < 0:
                return None
            text = lines[row]

    @staticmethod
    def _yaml_field(lines: list[str], line: int, before: str) -> str | None:
        """Key on this line, or the parent key of a block list item."""
        own = _YAML_KEY.match(before)
        if own:
            return own.group(1)
        if not _YAML_LIST_ITEM.match(before):
            return None

        item_indent = _indent(lines[line])
        for row in range(line - 1, -1, -1):
            prev = lines[row]
            if not prev.strip():
                continue
            if _YAML_LIST_ITEM.match(prev) and _indent(prev) >= item_indent:
                continue
            key = _YAML_KEY.match(prev)
            if key and _indent(prev) <= item_indent:
                return key.group(1)
            return None
        return None

    @staticmethod
    def _object_path(lines: list[str], line: int) -> tuple[str, ...]:
        """Keys of the enclosing objects, outermost first, by indentation."""
        path: list[str] = []
        level = _indent(lines[line])
        for row in range(line - 1, -1, -1):
            prev = lines[row]
            if not prev.strip():
                continue
            indent = _indent(prev)
            if indent >= level:
                continue
            key = _OBJECT_KEY.match(prev)
            if key:
                path.append(key.group(1))
            level = indent
            if level == 0:
                break
        path.reverse()
        return tuple(path)
