"""Diagnostics publishing with per-document debounce."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from storylens.config.models import DiagnosticsConfig
from storylens.diagnostics.models import Diagnostic

logger = structlog.get_logger()

PUBLISH_METHOD = "textDocument/publishDiagnostics"

SendNotification = Callable[[str, dict[str, Any]], Awaitable[None]]


class DiagnosticsPublisher:
    """Sends ``textDocument/publishDiagnostics`` notifications.

    ``publish_debounced`` coalesces rapid updates per URI: a new call for the
    same URI inside the window replaces the pending one.
    """

    def __init__(self, send: SendNotification, debounce_sec: float = 0.0) -> None:
        self._send = send
        self._debounce_sec = debounce_sec
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._disposed = False

    @classmethod
    def from_config(cls, send: SendNotification, config: DiagnosticsConfig) -> DiagnosticsPublisher:
        return cls(send, debounce_sec=config.publish_debounce_sec)

    async def publish(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        if self._disposed:
            return
        params = {"uri": uri, "diagnostics": [d.to_lsp_dict() for d in diagnostics]}
        await self._send(PUBLISH_METHOD, params)
        logger.debug("diagnostics_published", uri=uri, count=len(diagnostics))

    def publish_debounced(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        if self._disposed:
            return
        self.cancel(uri)
        self._pending[uri] = asyncio.get_running_loop().create_task(
            self._debounced_publish(uri, list(diagnostics))
        )

    async def _debounced_publish(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        try:
            await asyncio.sleep(self._debounce_sec)
            await self.publish(uri, diagnostics)
        finally:
            if self._pending.get(uri) is asyncio.current_task():
                del self._pending[uri]

    def has_pending(self, uri: str) -> bool:
        return uri in self._pending

    def cancel(self, uri: str) -> None:
        task = self._pending.pop(uri, None)
        if task is not None and not task.done():
            task.cancel()

    def dispose(self) -> None:
        self._disposed = True
        for uri in list(self._pending):
            self.cancel(uri)
