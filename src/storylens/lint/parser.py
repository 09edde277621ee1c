"""Parser for ``textlint --format json`` output."""

from __future__ import annotations

import json
import math
from typing import Any

import structlog

from storylens.lint.models import LinterMessage, LinterResult

logger = structlog.get_logger()


def _int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _message(raw: dict[str, Any]) -> LinterMessage:
    fix = raw.get("fix")
    return LinterMessage(
        rule_id=str(raw.get("ruleId") or "unknown"),
        severity=_int(raw.get("severity"), 1),
        line=_int(raw.get("line"), 1),
        column=_int(raw.get("column"), 1),
        message=str(raw.get("message", "")),
        index=_int(raw.get("index"), 0),
        fix=fix if isinstance(fix, dict) else None,
    )


def parse_linter_output(output: str, file_path: str) -> LinterResult:
    """Parse linter JSON output for ``file_path``.

    The output is an array of per-file results; only the first is read.
    Empty or malformed output yields an empty result.
    """
    if not output.strip():
        return LinterResult.empty(file_path)

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        logger.warning("linter_output_unparsable", path=file_path, error=str(e))
        return LinterResult.empty(file_path)

    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return LinterResult.empty(file_path)

    raw_messages = data[0].get("messages")
    if not isinstance(raw_messages, list):
        return LinterResult.empty(file_path)

    return LinterResult(
        file_path=file_path,
        messages=tuple(_message(m) for m in raw_messages if isinstance(m, dict)),
    )
