"""Tests for the entity index and its vocabulary."""

from storylens.detection.index import EntityIndex
from storylens.detection.models import MatchOrigin
from storylens.entities.models import DetectableEntity, EntityKind


def _entity(kind: EntityKind, entity_id: str, name: str, **kwargs) -> DetectableEntity:
    return DetectableEntity(kind, entity_id, name, f"src/{kind.value}s/{entity_id}.yaml", **kwargs)


class TestVocabulary:
    def test_terms_ordered_longest_first(self, cinderella_entities: list[DetectableEntity]) -> None:
        index = EntityIndex(cinderella_entities)
        lengths = [len(t.text) for t in index.terms]
        assert lengths == sorted(lengths, reverse=True)

    def test_term_origins_and_confidence(self, cinderella_entities: list[DetectableEntity]) -> None:
        index = EntityIndex(cinderella_entities)

        explicit = index.term("@cinderella")
        name = index.term("シンデレラ")
        display = index.term("灰かぶり姫")
        alias = index.term("灰かぶり")

        assert explicit is not None and explicit.origin == MatchOrigin.EXPLICIT
        assert name is not None and name.confidence == 1.0
        assert display is not None and display.origin == MatchOrigin.DISPLAY_NAME
        assert display.confidence == 0.9
        assert alias is not None and alias.confidence == 0.8

    def test_empty_index_has_no_pattern(self) -> None:
        index = EntityIndex([])
        assert len(index) == 0
        assert index.pattern is None


class TestDuplicates:
    def test_duplicate_key_keeps_first(self) -> None:
        first = _entity(EntityKind.CHARACTER, "hero", "Hero")
        second = _entity(EntityKind.CHARACTER, "hero", "Other")
        index = EntityIndex([first, second])
        assert len(index) == 1
        assert index.entities == (first,)
        assert index.term("Other") is None

    def test_shared_term_belongs_to_first_entity(self) -> None:
        king = _entity(EntityKind.CHARACTER, "king", "王", aliases=("陛下",))
        emperor = _entity(EntityKind.CHARACTER, "emperor", "皇帝", aliases=("陛下",))
        index = EntityIndex([king, emperor])
        term = index.term("陛下")
        assert term is not None
        assert term.entity is king

    def test_same_id_across_kinds_is_allowed(self) -> None:
        person = _entity(EntityKind.CHARACTER, "rose", "ローズ")
        place = _entity(EntityKind.SETTING, "rose", "薔薇園")
        index = EntityIndex([person, place])
        assert len(index) == 2
        assert index.get("rose") is person
        assert index.get("rose", EntityKind.SETTING) is place


class TestLookups:
    def test_by_kind_and_ids(self, cinderella_entities: list[DetectableEntity]) -> None:
        index = EntityIndex(cinderella_entities)
        assert [e.id for e in index.by_kind(EntityKind.CHARACTER)] == ["cinderella", "prince"]
        assert index.ids(EntityKind.FORESHADOWING) == {"glass_slipper", "midnight"}

    def test_find_foreshadowing_by_id_or_name(
        self, cinderella_entities: list[DetectableEntity]
    ) -> None:
        index = EntityIndex(cinderella_entities)
        assert index.find_foreshadowing("glass_slipper") is not None
        by_name = index.find_foreshadowing("真夜中の鐘")
        assert by_name is not None and by_name.id == "midnight"
        assert index.find_foreshadowing("cinderella") is None
