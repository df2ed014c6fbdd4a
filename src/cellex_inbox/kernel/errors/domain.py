"""Domain errors – inbox rules and lookups."""

from __future__ import annotations

from typing import Any

from cellex_inbox.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when an inbox rule is violated."""

    default_code = "domain_error"


class InvalidStatusTransitionError(DomainError):
    """No transition leaves *from_status* on *trigger*."""

    default_code = "invalid_status_transition"

    def __init__(self, from_status: str, trigger: str, **kwargs: Any) -> None:
        super().__init__(
            f"No transition from '{from_status}' on trigger '{trigger}'",
            detail={"from_status": from_status, "trigger": trigger},
            **kwargs,
        )
        self.from_status = from_status
        self.trigger = trigger


class EntryNotFoundError(DomainError):
    """The requested inbox entry is not in the collection."""

    default_code = "entry_not_found"

    def __init__(self, entry_id: str, collection: str | None = None, **kwargs: Any) -> None:
        msg = f"Entry '{entry_id}' not found"
        if collection is not None:
            msg = f"Entry '{entry_id}' not found in '{collection}'"
        super().__init__(msg, **kwargs)
        self.entry_id = entry_id
        self.collection = collection


__all__ = [
    "DomainError",
    "EntryNotFoundError",
    "InvalidStatusTransitionError",
]
