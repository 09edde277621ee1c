"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import json
import sys
from pathlib import Path

# Insert local src directory at the beginning of sys.path
# This ensures that the local storylens package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of storylens modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("storylens"):
        del sys.modules[module_name]

import pytest  # noqa: E402

from storylens.entities.models import (  # noqa: E402
    DetectableEntity,
    EntityKind,
    ForeshadowingStatus,
)


@pytest.fixture
def cinderella_entities() -> list[DetectableEntity]:
    """Small cast covering every kind and every vocabulary origin."""
    return [
        DetectableEntity(
            kind=EntityKind.CHARACTER,
            id="cinderella",
            canonical_name="シンデレラ",
            source_path="src/characters/cinderella.yaml",
            display_names=("灰かぶり姫",),
            aliases=("灰かぶり",),
        ),
        DetectableEntity(
            kind=EntityKind.CHARACTER,
            id="prince",
            canonical_name="王子",
            source_path="src/characters/prince.yaml",
            aliases=("殿下",),
        ),
        DetectableEntity(
            kind=EntityKind.SETTING,
            id="castle",
            canonical_name="城",
            source_path="src/settings/castle.yaml",
        ),
        DetectableEntity(
            kind=EntityKind.FORESHADOWING,
            id="glass_slipper",
            canonical_name="ガラスの靴",
            source_path="src/foreshadowings/glass_slipper.yaml",
            status=ForeshadowingStatus.PLANTED,
        ),
        DetectableEntity(
            kind=EntityKind.FORESHADOWING,
            id="midnight",
            canonical_name="真夜中の鐘",
            source_path="src/foreshadowings/midnight.yaml",
            status=ForeshadowingStatus.RESOLVED,
        ),
    ]


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """On-disk project with a marker file, definitions, and one manuscript."""
    root = tmp_path / "cinderella"
    (root / "src" / "characters").mkdir(parents=True)
    (root / "src" / "settings").mkdir(parents=True)
    (root / "src" / "foreshadowings").mkdir(parents=True)
    (root / "manuscripts").mkdir()
    (root / ".storyteller.json").write_text("{}")

    (root / "src" / "characters" / "cinderella.yaml").write_text(
        "id: cinderella\n"
        "name: シンデレラ\n"
        "role: protagonist\n"
        "summary: 継母にいじめられる娘\n"
        "displayNames: [灰かぶり姫]\n"
        "aliases: [灰かぶり]\n"
        "traits: [優しい, 働き者]\n"
        "relationships:\n"
        "  prince: romantic\n"
        "phases:\n"
        "  - id: awakening\n"
        "    name: 目覚め\n"
        "    changes:\n"
        "      summary: 舞踏会へ行く決意をした娘\n",
        encoding="utf-8",
    )
    (root / "src" / "characters" / "prince.json").write_text(
        json.dumps({"id": "prince", "name": "王子", "role": "love_interest"}, ensure_ascii=False),
        encoding="utf-8",
    )
    (root / "src" / "settings" / "castle.yaml").write_text(
        "id: castle\nname: 城\nsummary: 舞踏会の会場\n", encoding="utf-8"
    )
    (root / "src" / "foreshadowings" / "glass_slipper.yaml").write_text(
        "id: glass_slipper\n"
        "name: ガラスの靴\n"
        "type: chekhov\n"
        "status: planted\n"
        "planting:\n"
        "  chapter: chapter01\n"
        "  description: 魔法使いが靴を授ける\n"
        "relations:\n"
        "  characters: [cinderella, prince]\n",
        encoding="utf-8",
    )
    (root / "manuscripts" / "chapter01.md").write_text(
        "---\n"
        "storyteller:\n"
        "  chapter_id: chapter01\n"
        "  title: 舞踏会\n"
        "  characters: [cinderella, prince]\n"
        "  settings: [castle]\n"
        "---\n"
        "シンデレラは城へ向かった。\n"
        "<!-- @foreshadowing:glass_slipper --> ガラスの靴が光った。\n",
        encoding="utf-8",
    )
    return root
