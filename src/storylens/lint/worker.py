"""Debounced, cancellable, timeout-bounded external linter invocation.

The worker runs at most one linter process at a time. A new ``lint`` call
supersedes the previous one: the earlier call resolves to the canceled marker
(``LinterResult(file_path="")``) and the debounce window restarts. A run that
outlives the timeout resolves to an empty result for the requested path.

States follow ``storylens.lint.models.TRANSITIONS``:
idle -> debouncing -> running -> (completed | timed_out | canceled) -> idle.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from storylens.config.models import LinterConfig
from storylens.core.errors import InternalError
from storylens.lint.models import TRANSITIONS, LinterResult, WorkerState
from storylens.lint.parser import parse_linter_output

logger = structlog.get_logger()

CommandRunner = Callable[[list[str], str, Path], Awaitable[str]]
"""(command, stdin text, cwd) -> stdout text."""


async def run_linter_process(cmd: list[str], stdin: str, cwd: Path) -> str:
    """Run the linter with ``stdin`` piped in; kill it if the caller gives up."""
    payload = stdin.encode()
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout_bytes, stderr_bytes = await proc.communicate(payload)
    except asyncio.CancelledError:
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
        raise

    # textlint exits 1 when it reports findings
    if proc.returncode not in (0, 1):
        logger.warning(
            "linter_exit_status",
            returncode=proc.returncode,
            stderr=stderr_bytes.decode(errors="replace")[:500],
        )
    return stdout_bytes.decode(errors="replace")


@dataclass
class _Request:
    file_path: str
    future: asyncio.Future[LinterResult]
    task: asyncio.Task[None] | None = field(default=None)

    def resolve(self, result: LinterResult) -> None:
        if not self.future.done():
            self.future.set_result(result)


class LinterWorker:
    """Single-slot linter runner for one project.

    Args:
        project_root: Working directory for the linter process.
        config: Launcher, debounce and timeout settings.
        config_path: Linter rc file passed as ``--config`` when set.
        runner: Process runner; defaults to a real subprocess.
    """

    def __init__(
        self,
        project_root: Path,
        config: LinterConfig | None = None,
        *,
        config_path: Path | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self._project_root = project_root
        self._config = config or LinterConfig()
        self._config_path = config_path
        self._runner: CommandRunner = runner or run_linter_process
        self._state = WorkerState.IDLE
        self._current: _Request | None = None

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._current is not None

    def _transition(self, new: WorkerState) -> None:
        if new not in TRANSITIONS[self._state]:
            raise InternalError.unexpected(
                "Illegal linter worker transition",
                from_state=self._state.value,
                to_state=new.value,
            )
        self._state = new

    def build_command(self, file_path: str) -> list[str]:
        cmd = [
            self._config.executable,
            *self._config.command,
            "--stdin",
            "--stdin-filename",
            file_path,
            "--format",
            "json",
        ]
        if self._config_path is not None:
            cmd.extend(["--config", str(self._config_path)])
        return cmd

    async def lint(self, content: str, file_path: str) -> LinterResult:
        """Lint ``content`` as ``file_path`` after the debounce window.

        Returns the canceled marker if a later call supersedes this one.
        """
        if self._state == WorkerState.DISPOSED:
            return LinterResult.empty(file_path)

        self.cancel()

        loop = asyncio.get_running_loop()
        request = _Request(file_path=file_path, future=loop.create_future())
        self._current = request
        self._transition(WorkerState.DEBOUNCING)
        request.task = loop.create_task(self._execute(request, content))

        try:
            return await request.future
        except asyncio.CancelledError:
            if self._current is request:
                self.cancel()
            raise

    async def _execute(self, request: _Request, content: str) -> None:
        try:
            await asyncio.sleep(self._config.debounce_sec)
            if self._current is not request:
                request.resolve(LinterResult.empty())
                return
            self._transition(WorkerState.RUNNING)
            cmd = self.build_command(request.file_path)
            logger.debug("linter_started", path=request.file_path)

            outcome = WorkerState.COMPLETED
            try:
                stdout = await asyncio.wait_for(
                    self._runner(cmd, content, self._project_root),
                    timeout=self._config.timeout_sec,
                )
                result = parse_linter_output(stdout, request.file_path)
            except TimeoutError:
                logger.warning(
                    "linter_timeout", path=request.file_path, timeout=self._config.timeout_sec
                )
                outcome = WorkerState.TIMED_OUT
                result = LinterResult.empty(request.file_path)
            except Exception as e:
                logger.warning(
                    "linter_failed",
                    path=request.file_path,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                result = LinterResult.empty(request.file_path)
            else:
                logger.debug(
                    "linter_completed", path=request.file_path, messages=len(result.messages)
                )

            self._finish(request, outcome, result)
        except asyncio.CancelledError:
            request.resolve(LinterResult.empty())
            raise

    def _finish(self, request: _Request, outcome: WorkerState, result: LinterResult) -> None:
        # A superseded run may still reach here when its cancel was absorbed
        if self._current is not request:
            request.resolve(LinterResult.empty())
            return
        self._transition(outcome)
        self._current = None
        self._transition(WorkerState.IDLE)
        request.resolve(result)

    def cancel(self) -> None:
        """Abandon the pending request, if any. Safe to call at any time."""
        request = self._current
        if request is None:
            return
        self._current = None
        if request.task is not None and not request.task.done():
            request.task.cancel()
        request.resolve(LinterResult.empty())
        self._transition(WorkerState.CANCELED)
        self._transition(WorkerState.IDLE)
        logger.debug("linter_canceled", path=request.file_path)

    def dispose(self) -> None:
        """Cancel pending work and refuse further runs. Idempotent."""
        if self._state == WorkerState.DISPOSED:
            return
        self.cancel()
        self._transition(WorkerState.DISPOSED)
