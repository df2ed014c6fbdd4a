"""Kernel inbox – entry model and status state machine."""
from cellex_inbox.kernel.inbox.models import (
    EntryStatus,
    InboxEntry,
    InboxSummary,
    ProductSnapshot,
    UserSnapshot,
)
from cellex_inbox.kernel.inbox.transitions import (
    TRANSITIONS,
    StatusTransition,
    Trigger,
    apply_transition,
    trigger_for,
)

__all__ = [
    "EntryStatus",
    "InboxEntry",
    "InboxSummary",
    "ProductSnapshot",
    "StatusTransition",
    "TRANSITIONS",
    "Trigger",
    "UserSnapshot",
    "apply_transition",
    "trigger_for",
]
