"""Turns cart lines into pending inbox entries."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from cellex_inbox.application.capture.fingerprint import item_quantity
from cellex_inbox.application.inbox import InboxRenderer, JsonCollectionStore
from cellex_inbox.kernel.inbox import EntryStatus, InboxEntry, ProductSnapshot, UserSnapshot
from cellex_inbox.kernel.time import Clock, SystemClock
from cellex_inbox.kernel.types import new_entry_id
from cellex_inbox.observability.logging import get_logger

__all__ = ["EntryMaterializer"]

logger = get_logger(__name__)


class EntryMaterializer:
    """Creates one entry per cart line and inserts it at the head of the inbox.

    Product and user data are copied into the entry; later edits to either
    record do not reach entries that already exist.
    """

    def __init__(
        self,
        inbox: JsonCollectionStore,
        renderer: InboxRenderer,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._inbox = inbox
        self._renderer = renderer
        self._clock = clock or SystemClock()

    async def materialize(
        self,
        owner_id: str | None,
        user: UserSnapshot | None,
        product: Mapping[str, Any],
        quantity: int = 1,
        source: str = "cart",
    ) -> InboxEntry:
        entry = InboxEntry(
            id=new_entry_id(),
            created_at=self._clock.now(),
            source=source,
            product=ProductSnapshot.from_record(product),
            quantity=quantity or 1,
            user=user,
            status=EntryStatus.PENDING,
        )
        entries = await self._inbox.load()
        entries.insert(0, entry)
        await self._inbox.save(entries)
        logger.info(
            "inbox.capture.materialized",
            entry_id=entry.id,
            owner_id=owner_id,
            product_id=entry.product.id,
            quantity=entry.quantity,
            source=source,
        )
        await self._renderer.refresh()
        return entry

    async def materialize_collection(
        self,
        owner_id: str,
        user: UserSnapshot | None,
        items: Sequence[Mapping[str, Any]],
        source: str,
    ) -> list[InboxEntry]:
        """Materialise every line of *items*; N lines give N entries."""
        return [
            await self.materialize(owner_id, user, item, item_quantity(item), source)
            for item in items
        ]
