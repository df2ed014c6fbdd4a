"""Redis adapter – RedisKeyValueStorage and RedisChangeNotifier.

Every write publishes the changed key on a pub/sub channel, which
:class:`RedisChangeNotifier` turns back into change notifications for
listeners in other processes.
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from cellex_inbox.kernel.errors import StorageError
from cellex_inbox.kernel.ports import ChangeHandler, KeyValueStorage
from cellex_inbox.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHANNEL = "cellex:storage"


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'cellex-inbox[redis]' to use the Redis adapter") from exc


def _redis_error() -> type[Exception]:
    from redis.exceptions import RedisError

    return RedisError


class RedisKeyValueStorage(KeyValueStorage):
    """Async Redis storage; writes go through a MULTI pipeline with a PUBLISH."""

    def __init__(
        self,
        url: str,
        *,
        channel: str = DEFAULT_CHANNEL,
        namespace: str = "",
        **kwargs: Any,
    ) -> None:
        aioredis = _require_redis()
        self._client = aioredis.from_url(url, decode_responses=True, **kwargs)
        self._channel = channel
        self._namespace = namespace

    @property
    def client(self) -> Any:
        return self._client

    @property
    def channel(self) -> str:
        return self._channel

    def _k(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(self._k(key))
        except _redis_error() as exc:
            raise StorageError("redis", f"Could not read '{key}'", key=key, cause=exc) from exc

    async def set(self, key: str, value: str) -> None:
        await self.set_many({key: value})

    async def set_many(self, values: Mapping[str, str]) -> None:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for key, value in values.items():
                    await pipe.set(self._k(key), value)
                for key in values:
                    await pipe.publish(self._channel, key)
                await pipe.execute()
        except _redis_error() as exc:
            raise StorageError("redis", f"Could not write {sorted(values)}", cause=exc) from exc

    async def delete(self, key: str) -> None:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                await pipe.delete(self._k(key))
                await pipe.publish(self._channel, key)
                await pipe.execute()
        except _redis_error() as exc:
            raise StorageError("redis", f"Could not delete '{key}'", key=key, cause=exc) from exc

    async def close(self) -> None:
        await self._client.aclose()


class _Subscription:
    def __init__(self, handlers: list[ChangeHandler], handler: ChangeHandler) -> None:
        self._handlers = handlers
        self._handler = handler

    def unsubscribe(self) -> None:
        if self._handler in self._handlers:
            self._handlers.remove(self._handler)


class RedisChangeNotifier:
    """Background task relaying keys published by :class:`RedisKeyValueStorage`.

    Usage::

        async with RedisChangeNotifier(storage.client) as notifier:
            listener = CaptureListener(scanner, notifier, storage)
    """

    def __init__(self, client: Any, *, channel: str = DEFAULT_CHANNEL) -> None:
        self._client = client
        self._channel = channel
        self._handlers: list[ChangeHandler] = []
        self._pubsub: Any | None = None
        self._task: asyncio.Task[None] | None = None

    def subscribe(self, handler: ChangeHandler) -> _Subscription:
        self._handlers.append(handler)
        return _Subscription(self._handlers, handler)

    async def start(self) -> None:
        self._pubsub = self._client.pubsub()
        await self._pubsub.subscribe(self._channel)
        self._task = asyncio.create_task(self._listen_loop())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self._channel)
            await self._pubsub.aclose()
            self._pubsub = None

    async def __aenter__(self) -> "RedisChangeNotifier":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def dispatch(self, message: Mapping[str, Any]) -> None:
        """Deliver one pub/sub message to every handler."""
        if message.get("type") != "message":
            return
        key = message.get("data")
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        for handler in list(self._handlers):
            try:
                await handler(key)
            except Exception:  # noqa: BLE001
                logger.exception("storage.redis.handler_failed", key=key)

    async def _listen_loop(self) -> None:
        assert self._pubsub is not None
        async for message in self._pubsub.listen():
            await self.dispatch(message)


__all__ = ["DEFAULT_CHANNEL", "RedisChangeNotifier", "RedisKeyValueStorage"]
