"""Linter configuration discovery."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from storylens.config.constants import LINTER_RC_FILES

logger = structlog.get_logger()


def detect_linter_config(project_root: Path) -> Path | None:
    """First linter rc file in ``project_root``.

    A ``package.json`` carrying a ``textlint`` key also counts; the returned
    path is then the package.json itself.
    """
    for name in LINTER_RC_FILES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate

    package_json = project_root / "package.json"
    if package_json.is_file():
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("package_json_unreadable", path=str(package_json), error=str(e))
            return None
        if isinstance(data, dict) and "textlint" in data:
            return package_json

    return None
