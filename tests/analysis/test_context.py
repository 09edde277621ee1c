"""Tests for lexical context analysis."""

import pytest

from storylens.analysis.context import ContextAnalyzer, FileSyntax


@pytest.fixture
def analyzer() -> ContextAnalyzer:
    return ContextAnalyzer()


class TestFileSyntax:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("a/b.yaml", FileSyntax.YAML),
            ("a/b.YML", FileSyntax.YAML),
            ("a/b.json", FileSyntax.JSON),
            ("chapter01.md", FileSyntax.MARKDOWN),
            ("src/characters/hero.ts", FileSyntax.CODE),
        ],
    )
    def test_from_path(self, path: str, expected: FileSyntax) -> None:
        assert FileSyntax.from_path(path) == expected


class TestCodeStrings:
    def test_unterminated_string_under_field(self, analyzer: ContextAnalyzer) -> None:
        line = 'const c = { name: "シンデ'
        ctx = analyzer.analyze(line, 0, len(line))

        assert ctx.in_string_literal is True
        assert ctx.field_name == "name"
        assert ctx.string_start == line.index('"')
        assert ctx.string_end == -1
        assert ctx.prefix == "シンデ"

    def test_terminated_string_reports_closing_quote(self, analyzer: ContextAnalyzer) -> None:
        ctx = analyzer.analyze('"abc"', 0, 2)
        assert (ctx.in_string_literal, ctx.string_start, ctx.string_end) == (True, 0, 4)
        assert ctx.prefix == "a"

    def test_after_closed_string(self, analyzer: ContextAnalyzer) -> None:
        line = 'x = "abc" + '
        ctx = analyzer.analyze(line, 0, len(line))
        assert ctx.in_string_literal is False

    def test_escaped_quote_stays_inside(self, analyzer: ContextAnalyzer) -> None:
        line = 'say: "a\\"b'
        ctx = analyzer.analyze(line, 0, len(line))
        assert ctx.in_string_literal is True
        assert ctx.string_start == 5

    def test_other_quote_kind_inside_string(self, analyzer: ContextAnalyzer) -> None:
        line = "note: \"it's"
        ctx = analyzer.analyze(line, 0, len(line))
        assert ctx.in_string_literal is True


class TestJsonFields:
    def test_inline_array_owner(self, analyzer: ContextAnalyzer) -> None:
        line = '{"characters": ["cin'
        ctx = analyzer.analyze(line, 0, len(line), FileSyntax.JSON)
        assert ctx.in_string_literal is True
        assert ctx.field_name == "characters"

    def test_multiline_array_owner(self, analyzer: ContextAnalyzer) -> None:
        content = '{\n  "name": "x",\n  "characters": [\n    "cin'
        ctx = analyzer.analyze(content, 3, 8, FileSyntax.JSON)
        assert ctx.in_string_literal is True
        assert ctx.field_name == "characters"

    def test_single_quotes_are_not_strings_in_json(self, analyzer: ContextAnalyzer) -> None:
        line = "{'a"
        ctx = analyzer.analyze(line, 0, len(line), FileSyntax.JSON)
        assert ctx.in_string_literal is False


class TestYaml:
    def test_block_list_item_takes_parent_key(self, analyzer: ContextAnalyzer) -> None:
        content = "characters:\n  - cin"
        ctx = analyzer.analyze(content, 1, 7, FileSyntax.YAML)
        assert ctx.in_string_literal is False
        assert ctx.field_name == "characters"
        assert ctx.prefix == "cin"

    def test_own_key_wins(self, analyzer: ContextAnalyzer) -> None:
        content = "items:\n  - name: x"
        ctx = analyzer.analyze(content, 1, 11, FileSyntax.YAML)
        assert ctx.field_name == "name"

    def test_object_path(self, analyzer: ContextAnalyzer) -> None:
        content = "storyteller:\n  relations:\n    characters: [a"
        ctx = analyzer.analyze(content, 2, 18, FileSyntax.YAML)
        assert ctx.field_name == "characters"
        assert ctx.object_path == ("storyteller", "relations")


class TestMarkdown:
    CONTENT = "---\ncharacters: [cin\n---\n「本文」"

    def test_frontmatter_analyzed_as_yaml(self, analyzer: ContextAnalyzer) -> None:
        ctx = analyzer.analyze(self.CONTENT, 1, 16, FileSyntax.MARKDOWN)
        assert ctx.file_syntax == FileSyntax.MARKDOWN
        assert ctx.field_name == "characters"
        assert ctx.prefix == "cin"

    def test_prose_is_never_a_string(self, analyzer: ContextAnalyzer) -> None:
        ctx = analyzer.analyze(self.CONTENT, 3, 2, FileSyntax.MARKDOWN)
        assert ctx.in_string_literal is False
        assert ctx.field_name is None


class TestOutOfRange:
    @pytest.mark.parametrize(("line", "character"), [(5, 0), (0, 99), (-1, 0), (0, -1)])
    def test_never_raises(self, analyzer: ContextAnalyzer, line: int, character: int) -> None:
        ctx = analyzer.analyze("abc", line, character)
        assert ctx.in_string_literal is False

    def test_empty_content(self, analyzer: ContextAnalyzer) -> None:
        assert analyzer.analyze("", 0, 0).in_string_literal is False
