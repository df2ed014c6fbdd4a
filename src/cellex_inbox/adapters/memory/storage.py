"""In-memory adapter – dict-backed storage that also broadcasts changes."""
from __future__ import annotations

from collections.abc import Mapping

from cellex_inbox.kernel.ports import ChangeHandler, KeyValueStorage
from cellex_inbox.observability.logging import get_logger

__all__ = ["InMemoryKeyValueStorage"]

logger = get_logger(__name__)


class _HandlerSubscription:
    def __init__(self, handlers: list[ChangeHandler], handler: ChangeHandler) -> None:
        self._handlers = handlers
        self._handler = handler

    def unsubscribe(self) -> None:
        if self._handler in self._handlers:
            self._handlers.remove(self._handler)


class InMemoryKeyValueStorage(KeyValueStorage):
    """Process-local storage shared by every component holding a reference.

    Acts as its own :class:`ChangeNotifier`: each write or delete notifies
    all subscribers with the affected key, the way a browser storage event
    reaches every other open tab.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._handlers: list[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> _HandlerSubscription:
        self._handlers.append(handler)
        return _HandlerSubscription(self._handlers, handler)

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
        await self._notify([key])

    async def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            await self._notify([key])

    async def set_many(self, values: Mapping[str, str]) -> None:
        self._data.update(values)
        await self._notify(list(values))

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)

    async def _notify(self, keys: list[str]) -> None:
        for key in keys:
            for handler in list(self._handlers):
                try:
                    await handler(key)
                except Exception:  # noqa: BLE001
                    logger.exception("storage.memory.handler_failed", key=key)
