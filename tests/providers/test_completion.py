"""Tests for entity id completion."""

from pathlib import Path

import pytest

from storylens.analysis.context import FileSyntax
from storylens.project.context import ProjectContextManager
from storylens.providers.completion import FIELD_KINDS, CompletionProvider


@pytest.fixture
def provider() -> CompletionProvider:
    return CompletionProvider(ProjectContextManager())


def _labels(items: list[dict]) -> list[str]:
    return [item["label"] for item in items]


class TestFieldKinds:
    def test_reference_keys_and_id_fields(self) -> None:
        assert FIELD_KINDS["characters"] == FIELD_KINDS["characterId"] == FIELD_KINDS["character"]
        assert FIELD_KINDS["settingId"].value == "setting"


class TestCompletionProvider:
    @pytest.mark.asyncio
    async def test_yaml_list_item_with_prefix(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        items = await provider.get_completions(
            "characters:\n  - ci", 1, 6, FileSyntax.YAML, sample_project
        )

        assert _labels(items) == ["cinderella"]
        item = items[0]
        assert item["kind"] == 18
        assert item["detail"] == "character: シンデレラ"
        assert item["insertText"] == "cinderella"
        assert item["documentation"] == "継母にいじめられる娘"

    @pytest.mark.asyncio
    async def test_yaml_empty_prefix_lists_kind(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        items = await provider.get_completions(
            "characters:\n  - ", 1, 4, FileSyntax.YAML, sample_project
        )
        assert set(_labels(items)) == {"cinderella", "prince"}

    @pytest.mark.asyncio
    async def test_prefix_matches_canonical_name(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        items = await provider.get_completions(
            "characters: シン", 0, 14, FileSyntax.YAML, sample_project
        )
        assert _labels(items) == ["cinderella"]

    @pytest.mark.asyncio
    async def test_frontmatter_field(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        content = "---\nstoryteller:\n  settings: [ca\n---\n本文\n"

        items = await provider.get_completions(content, 2, 15, FileSyntax.MARKDOWN, sample_project)

        assert _labels(items) == ["castle"]

    @pytest.mark.asyncio
    async def test_markdown_prose_offers_nothing(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        content = "---\ntitle: x\n---\ncharacters: ci\n"
        assert await provider.get_completions(content, 3, 14, FileSyntax.MARKDOWN, sample_project) == []

    @pytest.mark.asyncio
    async def test_json_string(self, provider: CompletionProvider, sample_project: Path) -> None:
        content = '{"characters": ["pr'
        items = await provider.get_completions(
            content, 0, len(content), FileSyntax.JSON, sample_project
        )
        assert _labels(items) == ["prince"]

    @pytest.mark.asyncio
    async def test_code_id_field_in_string(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        content = 'const scene = { settingId: "'
        items = await provider.get_completions(
            content, 0, len(content), FileSyntax.CODE, sample_project
        )
        assert _labels(items) == ["castle"]

    @pytest.mark.asyncio
    async def test_code_outside_string_offers_nothing(
        self, provider: CompletionProvider, sample_project: Path
    ) -> None:
        content = "const scene = { settingId: "
        assert (
            await provider.get_completions(content, 0, len(content), FileSyntax.CODE, sample_project)
            == []
        )

    @pytest.mark.asyncio
    async def test_unrelated_field(self, provider: CompletionProvider, sample_project: Path) -> None:
        assert await provider.get_completions("title: ", 0, 7, FileSyntax.YAML, sample_project) == []

    @pytest.mark.asyncio
    async def test_no_match(self, provider: CompletionProvider, sample_project: Path) -> None:
        assert (
            await provider.get_completions("characters: zz", 0, 14, FileSyntax.YAML, sample_project)
            == []
        )
