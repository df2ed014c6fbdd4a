"""Cart fingerprints – cheap "has anything changed?" detection per owner and source."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from cellex_inbox.config.settings import CaptureSettings
from cellex_inbox.kernel.ports import KeyValueStorage
from cellex_inbox.observability.logging import get_logger

__all__ = ["FingerprintDeduplicator", "fingerprint", "item_quantity"]

logger = get_logger(__name__)


def item_quantity(item: Mapping[str, Any]) -> int:
    """Quantity of a cart line; anything missing or unusable counts as 1."""
    raw = item.get("qty") or item.get("quantity") or 1
    try:
        qty = int(raw)
    except (TypeError, ValueError):
        return 1
    return qty if qty > 0 else 1


def fingerprint(owner_id: str, items: Sequence[Mapping[str, Any]]) -> str:
    """Signature of a cart: ``id:qty`` pairs joined by ``|``, then ``::owner``.

    The signature follows line order, so reordering an otherwise identical
    cart produces a different fingerprint.
    """
    body = "|".join(f"{item.get('id')}:{item_quantity(item)}" for item in items)
    return f"{body}::{owner_id}"


class FingerprintDeduplicator:
    """Remembers the last fingerprint seen for each (owner, source) pair."""

    def __init__(self, storage: KeyValueStorage, settings: CaptureSettings | None = None) -> None:
        self._storage = storage
        self._settings = settings or CaptureSettings()

    async def last_seen(self, owner_id: str, source: str) -> str | None:
        return await self._storage.get(self._settings.seen_key(owner_id, source))

    async def check(self, owner_id: str, source: str, items: Sequence[Mapping[str, Any]]) -> bool:
        """Return ``True`` (and remember the new signature) when the cart changed."""
        signature = fingerprint(owner_id, items)
        seen_key = self._settings.seen_key(owner_id, source)
        if await self._storage.get(seen_key) == signature:
            return False
        await self._storage.set(seen_key, signature)
        logger.debug("inbox.capture.fingerprint_changed", owner_id=owner_id, source=source)
        return True
