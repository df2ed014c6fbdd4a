"""Polling change notifier for storages that cannot push notifications."""
from __future__ import annotations

import asyncio
from typing import Any, Sequence

from cellex_inbox.kernel.ports import ChangeHandler, KeyValueStorage
from cellex_inbox.observability.logging import get_logger

__all__ = ["PollingChangeNotifier"]

logger = get_logger(__name__)


class _Subscription:
    def __init__(self, owner: "PollingChangeNotifier", handler: ChangeHandler) -> None:
        self._owner = owner
        self._handler = handler

    def unsubscribe(self) -> None:
        self._owner._discard(self._handler)  # noqa: SLF001


class PollingChangeNotifier:
    """Reads a fixed set of keys every *interval* seconds and reports the ones that changed.

    Usage::

        async with PollingChangeNotifier(storage, ["cart", "app.currentUserId"]) as notifier:
            listener = CaptureListener(scanner, notifier, storage)
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        keys: Sequence[str],
        *,
        interval: float = 1.0,
    ) -> None:
        self._storage = storage
        self._keys = list(keys)
        self._interval = interval
        self._handlers: list[ChangeHandler] = []
        self._last: dict[str, str | None] = {}
        self._task: asyncio.Task[None] | None = None
        self._running = False

    def subscribe(self, handler: ChangeHandler) -> _Subscription:
        self._handlers.append(handler)
        return _Subscription(self, handler)

    def _discard(self, handler: ChangeHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def start(self) -> None:
        """Take a baseline reading and start the polling loop."""
        for key in self._keys:
            self._last[key] = await self._storage.get(key)
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def __aenter__(self) -> "PollingChangeNotifier":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def poll_once(self) -> list[str]:
        """Compare every watched key with the last reading; notify and return the changed ones."""
        changed: list[str] = []
        for key in self._keys:
            value = await self._storage.get(key)
            if value != self._last.get(key):
                self._last[key] = value
                changed.append(key)
        for key in changed:
            for handler in list(self._handlers):
                await handler(key)
        return changed

    async def _poll_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            try:
                await self.poll_once()
            except Exception as exc:  # noqa: BLE001
                logger.warning("storage.polling.failed", error=repr(exc))
