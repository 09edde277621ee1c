"""Diagnostic source backed by the external text linter."""

from __future__ import annotations

import asyncio
import contextlib
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path

import structlog

from storylens.config.constants import LINTER_SOURCE_NAME
from storylens.config.models import LinterConfig
from storylens.detection.models import Position, Range
from storylens.diagnostics.models import Diagnostic, DiagnosticSeverity
from storylens.diagnostics.source import DiagnosticSource
from storylens.lint.config import detect_linter_config
from storylens.lint.models import LinterMessage
from storylens.lint.worker import CommandRunner, LinterWorker
from storylens.project.detector import uri_to_path

logger = structlog.get_logger()

VersionProbe = Callable[[list[str], Path], Awaitable[bool]]

_PROBE_TIMEOUT_SEC = 10.0

_SEVERITY: dict[int, DiagnosticSeverity] = {
    2: DiagnosticSeverity.ERROR,
    1: DiagnosticSeverity.WARNING,
    0: DiagnosticSeverity.INFO,
}


async def probe_linter_version(cmd: list[str], cwd: Path) -> bool:
    """True when ``cmd`` (a ``--version`` invocation) exits successfully."""
    if not shutil.which(cmd[0]):
        return False
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            cwd=cwd,
        )
    except OSError as e:
        logger.debug("linter_probe_failed", error=str(e))
        return False
    try:
        returncode = await asyncio.wait_for(proc.wait(), timeout=_PROBE_TIMEOUT_SEC)
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        logger.debug("linter_probe_timeout")
        return False
    return returncode == 0


def message_to_diagnostic(message: LinterMessage) -> Diagnostic:
    """Map a 1-based linter message onto a one-character range."""
    line = max(message.line - 1, 0)
    column = max(message.column - 1, 0)
    return Diagnostic(
        range=Range(Position(line, column), Position(line, column + 1)),
        message=message.message,
        severity=_SEVERITY.get(message.severity, DiagnosticSeverity.INFO),
        source=LINTER_SOURCE_NAME,
        code=message.rule_id,
    )


class LinterDiagnosticSource(DiagnosticSource):
    """Lints documents of one project through a LinterWorker."""

    def __init__(
        self,
        project_root: Path,
        config: LinterConfig | None = None,
        *,
        runner: CommandRunner | None = None,
        version_probe: VersionProbe | None = None,
        name: str = LINTER_SOURCE_NAME,
    ) -> None:
        self.name = name
        self._project_root = project_root
        self._config = config or LinterConfig()
        self._config_path = (
            Path(self._config.config_path)
            if self._config.config_path
            else detect_linter_config(project_root)
        )
        self._probe: VersionProbe = version_probe or probe_linter_version
        self._available: bool | None = None
        self._worker = LinterWorker(
            project_root, self._config, config_path=self._config_path, runner=runner
        )

    @property
    def worker(self) -> LinterWorker:
        return self._worker

    @property
    def config_path(self) -> Path | None:
        return self._config_path

    async def is_available(self) -> bool:
        if self._available is None:
            self._available = await self._check_available()
        return self._available

    async def _check_available(self) -> bool:
        if not self._config.enabled:
            return False
        if self._config_path is None:
            logger.debug("linter_config_missing", project_root=str(self._project_root))
            return False
        cmd = [self._config.executable, *self._config.command, "--version"]
        available = await self._probe(cmd, self._project_root)
        if not available:
            logger.info("linter_unavailable", command=" ".join(cmd))
        return available

    async def generate(self, uri: str, content: str, project_root: Path) -> list[Diagnostic]:
        result = await self._worker.lint(content, str(uri_to_path(uri)))
        if result.is_canceled:
            return []
        return [message_to_diagnostic(m) for m in result.messages]

    def cancel(self) -> None:
        self._worker.cancel()

    def dispose(self) -> None:
        self._worker.dispose()
