"""Fire-and-forget page refresh driven by registry change signals."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from ..auction.models import ItemSnapshot
from .render import render_html, render_json

logger = logging.getLogger(__name__)

SnapshotSource = Callable[[], Awaitable[list[ItemSnapshot]]]


class _PublisherProtocol:
    async def publish(self, items: list[ItemSnapshot]) -> None:  # pragma: no cover - protocol
        raise NotImplementedError


class _LogPublisher(_PublisherProtocol):
    async def publish(self, items: list[ItemSnapshot]) -> None:
        logger.info("[presentation] %d open item(s)", len(items))


class _FilePublisher(_PublisherProtocol):
    def __init__(self, output_path: str | Path, render: Callable[[list[ItemSnapshot]], str | bytes]) -> None:
        self._path = Path(output_path)
        self._render = render

    async def publish(self, items: list[ItemSnapshot]) -> None:
        payload = self._render(items)
        await asyncio.to_thread(self._write, payload)
        logger.debug("[presentation] wrote %d open item(s) to %s", len(items), self._path)

    def _write(self, payload: str | bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            self._path.write_bytes(payload)
        else:
            self._path.write_text(payload, encoding="utf-8")


class PageRefresher:
    """Re-reads open items and republishes them whenever ``refresh`` is called."""

    def __init__(
        self,
        source: SnapshotSource,
        backend: str = "log",
        options: dict[str, Any] | None = None,
    ) -> None:
        options = options or {}
        self._source = source
        self._tasks: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock()
        if backend == "html":
            self._publisher: _PublisherProtocol = _FilePublisher(
                options.get("output_path", "items.html"), render_html
            )
        elif backend == "json":
            self._publisher = _FilePublisher(options.get("output_path", "items.json"), render_json)
        elif backend == "log":
            self._publisher = _LogPublisher()
        else:
            raise ValueError(f"unknown presentation backend {backend}")

    def refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self._publish())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _publish(self) -> None:
        try:
            # Renders run one at a time so an older snapshot never lands last.
            async with self._lock:
                items = await self._source()
                await self._publisher.publish(items)
        except Exception as exc:
            logger.error(f"Presentation refresh failed: {exc}", exc_info=True)
