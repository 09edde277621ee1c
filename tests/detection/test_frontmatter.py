"""Tests for frontmatter location and reference extraction."""

from storylens.detection.frontmatter import find_frontmatter, find_references
from storylens.entities.models import EntityKind


class TestFindFrontmatter:
    def test_block_bounds_and_data(self) -> None:
        content = "---\ntitle: 舞踏会\n---\n本文"
        block = find_frontmatter(content)

        assert block is not None
        assert (block.start_line, block.end_line) == (0, 2)
        assert block.data == {"title": "舞踏会"}
        assert block.contains_line(1)
        assert not block.contains_line(3)

    def test_dots_close_block(self) -> None:
        block = find_frontmatter("---\na: 1\n...\n")
        assert block is not None
        assert block.end_line == 2

    def test_no_opening_delimiter(self) -> None:
        assert find_frontmatter("本文\n---\n") is None

    def test_unclosed_block(self) -> None:
        assert find_frontmatter("---\na: 1\n") is None

    def test_unparsable_yaml_still_located(self) -> None:
        block = find_frontmatter("---\na: [unclosed\n---\n")
        assert block is not None
        assert block.parsed is False
        assert block.data == {}

    def test_fields_unwrap_namespace(self) -> None:
        block = find_frontmatter("---\nstoryteller:\n  chapter_id: c1\n---\n")
        assert block is not None
        assert block.fields == {"chapter_id": "c1"}


class TestFindReferences:
    def test_flow_list_positions(self) -> None:
        content = "---\ncharacters: [cinderella, \"prince\"]\n---\n"
        refs = find_references(content)

        assert [(r.kind, r.value, r.line, r.start_char, r.end_char) for r in refs] == [
            (EntityKind.CHARACTER, "cinderella", 1, 13, 23),
            (EntityKind.CHARACTER, "prince", 1, 26, 32),
        ]

    def test_block_list_under_namespace(self) -> None:
        content = (
            "---\n"
            "storyteller:\n"
            "  settings:\n"
            "    - castle\n"
            "    - 'forest'\n"
            "  title: x\n"
            "---\n"
        )
        refs = find_references(content)

        assert [(r.key, r.value, r.line, r.start_char) for r in refs] == [
            ("settings", "castle", 3, 6),
            ("settings", "forest", 4, 7),
        ]

    def test_non_reference_keys_ignored(self) -> None:
        assert find_references("---\ntags: [a, b]\n---\n") == []

    def test_no_frontmatter(self) -> None:
        assert find_references("characters: [a]") == []
