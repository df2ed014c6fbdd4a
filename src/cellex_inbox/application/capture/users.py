"""User registry backed by the storefront's ``app.users`` list."""
from __future__ import annotations

import json
from typing import Any

from cellex_inbox.config.settings import CaptureSettings
from cellex_inbox.kernel.errors import SerializationError
from cellex_inbox.kernel.inbox import UserSnapshot
from cellex_inbox.kernel.ports import KeyValueStorage
from cellex_inbox.observability.events import EventEmitter, LoggingEventEmitter, StructuredEvent

__all__ = ["StorageUserRegistry"]


class StorageUserRegistry:
    def __init__(
        self,
        storage: KeyValueStorage,
        settings: CaptureSettings | None = None,
        *,
        diagnostics: EventEmitter | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings or CaptureSettings()
        self._diagnostics = diagnostics or LoggingEventEmitter()

    async def _records(self) -> list[dict[str, Any]]:
        key = self._settings.users_key
        raw = await self._storage.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            self._diagnostics.emit(
                StructuredEvent(name="inbox.storage.corrupt", fields={"key": key, "error": str(exc)})
            )
            return []
        if not isinstance(data, list):
            return []
        return [u for u in data if isinstance(u, dict) and u.get("id") is not None]

    async def find(self, owner_id: str) -> UserSnapshot | None:
        for record in await self._records():
            if str(record["id"]) == str(owner_id):
                try:
                    return UserSnapshot.from_record(record)
                except SerializationError:
                    return None
        return None

    async def list_owner_ids(self) -> list[str]:
        return [str(u["id"]) for u in await self._records()]
