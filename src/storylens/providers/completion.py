"""Entity completion inside reference fields."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from storylens.analysis.context import ContextAnalyzer, FileSyntax, LexicalContext
from storylens.detection.frontmatter import REFERENCE_KEYS
from storylens.entities.models import EntityKind
from storylens.project.context import ProjectContextManager

# LSP CompletionItemKind.Reference
_ITEM_KIND_REFERENCE = 18

FIELD_KINDS: dict[str, EntityKind] = {
    **REFERENCE_KEYS,
    **{kind.value: kind for kind in EntityKind},
    "characterId": EntityKind.CHARACTER,
    "settingId": EntityKind.SETTING,
    "foreshadowingId": EntityKind.FORESHADOWING,
    "timelineId": EntityKind.TIMELINE,
}
"""Field names whose values are entity ids, and the kind they refer to."""


class CompletionProvider:
    """Offers entity ids where the cursor sits in a reference field.

    In code and JSON the cursor must be inside a string literal. In YAML and
    frontmatter a bare value position under the field is enough.
    """

    def __init__(
        self,
        context_manager: ProjectContextManager,
        analyzer: ContextAnalyzer | None = None,
    ) -> None:
        self._contexts = context_manager
        self._analyzer = analyzer or ContextAnalyzer()

    async def get_completions(
        self,
        content: str,
        line: int,
        character: int,
        file_syntax: FileSyntax,
        project_root: Path,
    ) -> list[dict[str, Any]]:
        lexical = self._analyzer.analyze(content, line, character, file_syntax)
        kind = self._target_kind(lexical)
        if kind is None:
            return []

        context = await self._contexts.get_context(project_root)
        prefix = lexical.prefix.lower()
        items: list[dict[str, Any]] = []
        for entity in context.index.by_kind(kind):
            if prefix and not (
                entity.id.lower().startswith(prefix) or prefix in entity.canonical_name.lower()
            ):
                continue
            info = context.entity_info_map.get(entity.id)
            item: dict[str, Any] = {
                "label": entity.id,
                "kind": _ITEM_KIND_REFERENCE,
                "detail": f"{kind.value}: {entity.canonical_name}",
                "insertText": entity.id,
                "filterText": f"{entity.id} {entity.canonical_name}",
            }
            if info is not None and info.summary:
                item["documentation"] = info.summary
            items.append(item)
        return items

    @staticmethod
    def _target_kind(lexical: LexicalContext) -> EntityKind | None:
        if lexical.field_name is None:
            return None
        kind = FIELD_KINDS.get(lexical.field_name)
        if kind is None:
            return None
        if lexical.in_string_literal:
            return kind
        if lexical.file_syntax in (FileSyntax.YAML, FileSyntax.MARKDOWN):
            return kind
        return None
