"""Entry status state machine.

::

    pending   --confirm--> confirmed
    pending   --reject-->  rejected
    confirmed --undo-->    pending
    rejected  --undo-->    pending

Deletion is not a transition; it removes the entry from its collection.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cellex_inbox.kernel.errors import InvalidStatusTransitionError
from cellex_inbox.kernel.inbox.models import EntryStatus
from cellex_inbox.kernel.types import Err, Ok, Result


class Trigger(str, Enum):
    CONFIRM = "confirm"
    REJECT = "reject"
    UNDO = "undo"


@dataclass(frozen=True)
class StatusTransition:
    from_status: EntryStatus
    to_status: EntryStatus
    trigger: Trigger


TRANSITIONS: tuple[StatusTransition, ...] = (
    StatusTransition(EntryStatus.PENDING, EntryStatus.CONFIRMED, Trigger.CONFIRM),
    StatusTransition(EntryStatus.PENDING, EntryStatus.REJECTED, Trigger.REJECT),
    StatusTransition(EntryStatus.CONFIRMED, EntryStatus.PENDING, Trigger.UNDO),
    StatusTransition(EntryStatus.REJECTED, EntryStatus.PENDING, Trigger.UNDO),
)


def apply_transition(
    current: EntryStatus, trigger: Trigger
) -> Result[EntryStatus, InvalidStatusTransitionError]:
    """Return the status reached from *current* on *trigger*."""
    for t in TRANSITIONS:
        if t.from_status is current and t.trigger is trigger:
            return Ok(t.to_status)
    return Err(InvalidStatusTransitionError(current.value, trigger.value))


def trigger_for(current: EntryStatus, target: EntryStatus) -> Trigger | None:
    """Find the trigger that moves *current* to *target*, if one is allowed."""
    for t in TRANSITIONS:
        if t.from_status is current and t.to_status is target:
            return t.trigger
    return None


__all__ = ["StatusTransition", "TRANSITIONS", "Trigger", "apply_transition", "trigger_for"]
