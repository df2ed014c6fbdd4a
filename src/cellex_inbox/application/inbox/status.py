"""Status transition API for captured inbox entries.

All operations are fail-open: an unknown id, an unknown status or a
transition the state machine does not allow leaves storage untouched and
returns ``False``. Callers are expected to act on ids taken from the last render.
"""
from __future__ import annotations

from cellex_inbox.application.inbox.render import InboxRenderer
from cellex_inbox.application.inbox.store import JsonCollectionStore
from cellex_inbox.kernel.errors import EntryNotFoundError
from cellex_inbox.kernel.inbox import EntryStatus, InboxEntry, Trigger, apply_transition, trigger_for
from cellex_inbox.kernel.time import Clock, SystemClock
from cellex_inbox.kernel.types import Err, Ok, Result
from cellex_inbox.observability.logging import get_logger

__all__ = ["StatusTransitionService"]

logger = get_logger(__name__)


def _parse_status(status: EntryStatus | str) -> EntryStatus | None:
    try:
        return EntryStatus(status)
    except ValueError:
        logger.info("inbox.status.unknown_status", status=status)
        return None


def _locate(entries: list[InboxEntry], entry_id: str, collection: str) -> Result[int, EntryNotFoundError]:
    for idx, entry in enumerate(entries):
        if entry.id == entry_id:
            return Ok(idx)
    return Err(EntryNotFoundError(entry_id, collection))


class StatusTransitionService:
    """Moves entries between pending, confirmed and rejected.

    Two ways of recording a decision are supported. :meth:`set_status`
    changes the status in place inside the primary inbox. :meth:`archive`
    moves the entry out of the inbox into the confirmed or rejected
    collection. :meth:`undo` reverses either one.
    """

    def __init__(
        self,
        inbox: JsonCollectionStore,
        confirmed: JsonCollectionStore,
        rejected: JsonCollectionStore,
        renderer: InboxRenderer,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._inbox = inbox
        self._confirmed = confirmed
        self._rejected = rejected
        self._renderer = renderer
        self._clock = clock or SystemClock()

    def _archive_for(self, status: EntryStatus) -> JsonCollectionStore | None:
        if status is EntryStatus.CONFIRMED:
            return self._confirmed
        if status is EntryStatus.REJECTED:
            return self._rejected
        return None

    async def _write_pair(
        self,
        first: JsonCollectionStore,
        first_entries: list[InboxEntry],
        second: JsonCollectionStore,
        second_entries: list[InboxEntry],
    ) -> None:
        # one set_many so both collections land together
        await first.storage.set_many(
            {
                first.key: first.encode(first_entries),
                second.key: second.encode(second_entries),
            }
        )

    # ------------------------------------------------------------------
    # In-place status changes
    # ------------------------------------------------------------------

    async def set_status(self, entry_id: str, status: EntryStatus | str) -> bool:
        target = _parse_status(status)
        if target is None:
            return False
        entries = await self._inbox.load()
        located = _locate(entries, entry_id, self._inbox.key)
        if located.is_err():
            logger.debug("inbox.status.unknown_entry", entry_id=entry_id)
            return False

        idx = located.unwrap()
        current = entries[idx].status
        trigger = trigger_for(current, target)
        if trigger is None:
            logger.info(
                "inbox.status.transition_refused",
                entry_id=entry_id,
                from_status=current.value,
                to_status=target.value,
            )
            return False

        entries[idx] = entries[idx].with_status(target)
        await self._inbox.save(entries)
        logger.info("inbox.status.changed", entry_id=entry_id, trigger=trigger.value, status=target.value)
        await self._renderer.refresh()
        return True

    async def confirm(self, entry_id: str) -> bool:
        return await self.set_status(entry_id, EntryStatus.CONFIRMED)

    async def reject(self, entry_id: str) -> bool:
        return await self.set_status(entry_id, EntryStatus.REJECTED)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def remove(self, entry_id: str) -> bool:
        """Delete the entry from the inbox for good. Confirmation is the caller's job."""
        entries = await self._inbox.load()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        await self._inbox.save(kept)
        logger.info("inbox.entry.removed", entry_id=entry_id)
        await self._renderer.refresh()
        return True

    async def clear(self) -> None:
        await self._inbox.clear()
        logger.info("inbox.cleared", key=self._inbox.key)
        await self._renderer.refresh()

    async def remove_archived(self, entry_id: str, status: EntryStatus | str) -> bool:
        target = _parse_status(status)
        archive = self._archive_for(target) if target is not None else None
        if archive is None:
            return False
        entries = await archive.load()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        await archive.save(kept)
        logger.info("inbox.archive.removed", entry_id=entry_id, key=archive.key)
        await self._renderer.refresh()
        return True

    # ------------------------------------------------------------------
    # Archive moves
    # ------------------------------------------------------------------

    async def archive(self, entry_id: str, status: EntryStatus | str) -> bool:
        """Take a pending entry out of the inbox and file it under *status*."""
        target = _parse_status(status)
        archive = self._archive_for(target) if target is not None else None
        if archive is None:
            return False

        inbox = await self._inbox.load()
        located = _locate(inbox, entry_id, self._inbox.key)
        if located.is_err():
            return False
        idx = located.unwrap()
        trigger = Trigger.CONFIRM if target is EntryStatus.CONFIRMED else Trigger.REJECT
        moved = apply_transition(inbox[idx].status, trigger)
        if moved.is_err():
            logger.info("inbox.status.transition_refused", entry_id=entry_id, error=moved.error.message)
            return False

        entry = inbox.pop(idx).with_status(moved.unwrap(), handled_at=self._clock.now())
        archived = await archive.load()
        archived.insert(0, entry)
        await self._write_pair(self._inbox, inbox, archive, archived)
        logger.info("inbox.entry.archived", entry_id=entry_id, key=archive.key)
        await self._renderer.refresh()
        return True

    async def undo(self, entry_id: str) -> bool:
        """Return a decided entry to the head of the inbox as pending.

        Archived entries are looked up in the rejected collection first, then
        the confirmed one. An entry decided in place is moved to the head of
        the inbox with its status reset.
        """
        inbox = await self._inbox.load()

        for archive in (self._rejected, self._confirmed):
            archived = await archive.load()
            located = _locate(archived, entry_id, archive.key)
            if located.is_err():
                continue
            entry = archived.pop(located.unwrap()).with_status(EntryStatus.PENDING)
            inbox = [e for e in inbox if e.id != entry_id]
            inbox.insert(0, entry)
            await self._write_pair(self._inbox, inbox, archive, archived)
            logger.info("inbox.entry.restored", entry_id=entry_id, key=archive.key)
            await self._renderer.refresh()
            return True

        located = _locate(inbox, entry_id, self._inbox.key)
        if located.is_err():
            return False
        idx = located.unwrap()
        restored = apply_transition(inbox[idx].status, Trigger.UNDO)
        if restored.is_err():
            return False
        entry = inbox.pop(idx).with_status(restored.unwrap())
        inbox.insert(0, entry)
        await self._inbox.save(inbox)
        logger.info("inbox.entry.restored", entry_id=entry_id, key=self._inbox.key)
        await self._renderer.refresh()
        return True

    async def list_archived(self, status: EntryStatus | str) -> list[InboxEntry]:
        target = _parse_status(status)
        archive = self._archive_for(target) if target is not None else None
        return await archive.load() if archive is not None else []
