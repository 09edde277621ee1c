"""Tests for linter configuration discovery."""

import json
from pathlib import Path

from storylens.lint.config import detect_linter_config


class TestDetectLinterConfig:
    def test_no_config(self, tmp_path: Path) -> None:
        assert detect_linter_config(tmp_path) is None

    def test_rc_file(self, tmp_path: Path) -> None:
        (tmp_path / ".textlintrc.json").write_text("{}")
        assert detect_linter_config(tmp_path) == tmp_path / ".textlintrc.json"

    def test_lookup_order(self, tmp_path: Path) -> None:
        (tmp_path / ".textlintrc.yml").write_text("")
        (tmp_path / ".textlintrc").write_text("{}")
        assert detect_linter_config(tmp_path) == tmp_path / ".textlintrc"

    def test_rc_directory_ignored(self, tmp_path: Path) -> None:
        (tmp_path / ".textlintrc").mkdir()
        assert detect_linter_config(tmp_path) is None

    def test_package_json_with_textlint_key(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"textlint": {"rules": {}}}))
        assert detect_linter_config(tmp_path) == tmp_path / "package.json"

    def test_package_json_without_key(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"name": "book"}))
        assert detect_linter_config(tmp_path) is None

    def test_rc_file_wins_over_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"textlint": {}}))
        (tmp_path / ".textlintrc.yaml").write_text("")
        assert detect_linter_config(tmp_path) == tmp_path / ".textlintrc.yaml"

    def test_malformed_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        assert detect_linter_config(tmp_path) is None
