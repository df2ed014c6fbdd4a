"""Whole-collection JSON stores for the inbox and its archives.

Every mutation reads the full collection, changes it in memory and writes the
full collection back. There is no merge and no locking: when two contexts
write the same key concurrently, the last writer wins and the other update is
lost.

Records that do not parse as an entry are left out of what callers see but
are remembered from the last read and written back next to the entry that
followed them, so a save never destroys data this package does not own.
"""
from __future__ import annotations

import json
from typing import Any, Sequence

from cellex_inbox.kernel.errors import SerializationError
from cellex_inbox.kernel.inbox import InboxEntry
from cellex_inbox.kernel.ports import KeyValueStorage
from cellex_inbox.kernel.types import Err, Ok, Result
from cellex_inbox.observability.events import EventEmitter, LoggingEventEmitter, StructuredEvent

__all__ = ["JsonCollectionStore"]


class JsonCollectionStore:
    """Ordered collection of :class:`InboxEntry` persisted under one storage key.

    The head of the list is the newest entry.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        *,
        diagnostics: EventEmitter | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._diagnostics = diagnostics or LoggingEventEmitter()
        # (raw record, ids of the entries that followed it) from the last read
        self._unparsed: list[tuple[Any, tuple[str, ...]]] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    async def read(self) -> Result[list[InboxEntry], SerializationError]:
        """Load the collection, distinguishing a corrupt value from an empty one.

        Storage failures are not caught here.
        """
        raw = await self._storage.get(self._key)
        self._unparsed = []
        if raw is None or raw == "":
            return Ok([])
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            return Err(SerializationError(f"'{self._key}' is not valid JSON", key=self._key, cause=exc))
        if data is None:
            return Ok([])
        if not isinstance(data, list):
            return Err(SerializationError(f"'{self._key}' does not hold a list", key=self._key))

        entries: list[InboxEntry] = []
        unparsed: list[tuple[Any, int]] = []
        for position, item in enumerate(data):
            try:
                entries.append(InboxEntry.from_dict(item))
            except SerializationError as exc:
                unparsed.append((item, len(entries)))
                self._diagnostics.emit(
                    StructuredEvent(
                        name="inbox.entry.malformed",
                        fields={"key": self._key, "position": position, "error": exc.message},
                    )
                )
        self._unparsed = [(item, tuple(e.id for e in entries[after:])) for item, after in unparsed]
        return Ok(entries)

    async def load(self) -> list[InboxEntry]:
        """Return the collection; a corrupt value reads as empty."""
        result = await self.read()
        if result.is_err():
            self._diagnostics.emit(
                StructuredEvent(
                    name="inbox.storage.corrupt",
                    fields={"key": self._key, "error": result.error.message},
                )
            )
            return []
        return result.unwrap()

    def encode(self, entries: Sequence[InboxEntry]) -> str:
        """Serialise *entries* together with the unparsed records of the last read."""
        return json.dumps(self._with_unparsed(entries), ensure_ascii=False)

    def _with_unparsed(self, entries: Sequence[InboxEntry]) -> list[Any]:
        ids = {e.id for e in entries}
        before: dict[str, list[Any]] = {}
        tail: list[Any] = []
        for item, following in self._unparsed:
            anchor = next((i for i in following if i in ids), None)
            if anchor is None:
                tail.append(item)
            else:
                before.setdefault(anchor, []).append(item)
        out: list[Any] = []
        for entry in entries:
            out.extend(before.pop(entry.id, []))
            out.append(entry.to_dict())
        return out + tail

    async def save(self, entries: Sequence[InboxEntry]) -> None:
        """Overwrite the persisted collection with *entries*."""
        await self._storage.set(self._key, self.encode(entries))

    async def clear(self) -> None:
        """Empty the collection, unparsed records included."""
        self._unparsed = []
        await self.save([])
