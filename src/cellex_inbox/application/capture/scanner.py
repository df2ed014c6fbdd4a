"""Cart scanning – decides which carts to materialise into the inbox."""
from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from cellex_inbox.application.capture.fingerprint import FingerprintDeduplicator
from cellex_inbox.application.capture.materializer import EntryMaterializer
from cellex_inbox.config.settings import CaptureSettings
from cellex_inbox.kernel.inbox import InboxEntry
from cellex_inbox.kernel.ports import KeyValueStorage, UserRegistry
from cellex_inbox.observability.events import EventEmitter, LoggingEventEmitter, StructuredEvent
from cellex_inbox.observability.logging import get_logger

__all__ = ["CartScanner"]

logger = get_logger(__name__)


class CartScanner:
    """Reads carts from storage and hands changed ones to the materializer.

    Carts are only ever read. A cart without an owner, an empty cart and an
    unchanged cart are all skipped quietly.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        users: UserRegistry,
        deduplicator: FingerprintDeduplicator,
        materializer: EntryMaterializer,
        settings: CaptureSettings | None = None,
        *,
        diagnostics: EventEmitter | None = None,
    ) -> None:
        self._storage = storage
        self._users = users
        self._deduplicator = deduplicator
        self._materializer = materializer
        self._settings = settings or CaptureSettings()
        self._diagnostics = diagnostics or LoggingEventEmitter()

    async def read_cart(self, key: str) -> list[Mapping[str, Any]]:
        """Cart lines under *key*; unreadable values and id-less lines are dropped."""
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
            self._diagnostics.emit(
                StructuredEvent(name="inbox.storage.corrupt", fields={"key": key, "error": "not a list"})
            )
            return []
        return [item for item in data if isinstance(item, Mapping) and item.get("id") is not None]

    async def current_owner(self) -> str | None:
        raw = await self._storage.get(self._settings.current_user_key)
        if not raw:
            return None
        # some pages JSON-encode the id, others store it bare
        if raw.startswith('"'):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                pass
        return str(raw) or None

    async def capture(
        self,
        owner_id: str | None,
        source: str,
        items: Sequence[Mapping[str, Any]],
    ) -> list[InboxEntry]:
        if not owner_id or not items:
            return []
        if not await self._deduplicator.check(owner_id, source, items):
            return []
        user = await self._users.find(owner_id)
        entries = await self._materializer.materialize_collection(owner_id, user, items, source)
        logger.info("inbox.capture.cart_captured", owner_id=owner_id, source=source, entries=len(entries))
        return entries

    async def capture_current_cart(self) -> list[InboxEntry]:
        """Capture the shared cart on behalf of the signed-in user."""
        items = await self.read_cart(self._settings.cart_key)
        if not items:
            return []
        owner_id = await self.current_owner()
        return await self.capture(owner_id, self._settings.cart_key, items)

    async def scan_all(self) -> list[InboxEntry]:
        """Capture the shared cart, then every per-user cart key of every known user."""
        created = await self.capture_current_cart()
        for owner_id in await self._users.list_owner_ids():
            for key in self._settings.owner_cart_keys(owner_id):
                items = await self.read_cart(key)
                created.extend(await self.capture(owner_id, key, items))
        logger.debug("inbox.capture.scan_finished", created=len(created))
        return created
