"""Inbox domain model – entries, point-in-time snapshots and summary counts."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence

from cellex_inbox.kernel.errors import SerializationError

JsonScalar = str | int | float | None

_PRODUCT_FIELDS = frozenset({"id", "name", "price", "image"})
_ENTRY_FIELDS = frozenset({"id", "at", "source", "qty", "product", "user", "status", "handledAt"})


class EntryStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not EntryStatus.PENDING


@dataclasses.dataclass(frozen=True)
class ProductSnapshot:
    """Copy of the product as it looked when the entry was materialised."""

    id: str | int
    name: str | None = None
    price: JsonScalar = None
    image: str | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any], *, keep_extra: bool = False) -> "ProductSnapshot":
        """Snapshot *record*; with *keep_extra* its other fields survive a round trip."""
        if record.get("id") is None:
            raise SerializationError("product record has no 'id'", payload_type="product")
        return cls(
            id=record["id"],
            name=record.get("name"),
            price=record.get("price"),
            image=record.get("image") or None,
            extra={k: v for k, v in record.items() if k not in _PRODUCT_FIELDS} if keep_extra else {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "id": self.id, "name": self.name, "price": self.price, "image": self.image}


@dataclasses.dataclass(frozen=True)
class UserSnapshot:
    """Copy of the owner's profile taken from the user registry."""

    id: str | int
    name: str = "Guest"
    email: str = ""
    number: str = ""
    photo: str | None = None
    created_at: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserSnapshot":
        """Build a snapshot from a registry record, filling storefront defaults."""
        if record.get("id") is None:
            raise SerializationError("user record has no 'id'", payload_type="user")
        return cls(
            id=record["id"],
            name=record.get("name") or "Guest",
            email=record.get("email") or "",
            number=record.get("number") or "",
            photo=record.get("photo") or None,
            created_at=record.get("createdAt") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "number": self.number,
            "photo": self.photo,
            "createdAt": self.created_at,
        }


@dataclasses.dataclass(frozen=True)
class InboxEntry:
    """A single captured cart line awaiting admin review.

    Entries are immutable; status changes go through :meth:`with_status`,
    which leaves both snapshots untouched.
    """

    id: str
    created_at: datetime
    source: str
    product: ProductSnapshot
    quantity: int = 1
    user: UserSnapshot | None = None
    status: EntryStatus = EntryStatus.PENDING
    handled_at: datetime | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be positive, got {self.quantity}")

    def with_status(self, status: EntryStatus, *, handled_at: datetime | None = None) -> "InboxEntry":
        return dataclasses.replace(self, status=status, handled_at=handled_at)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted JSON shape.

        Fields this model does not know about are written back unchanged.
        """
        payload: dict[str, Any] = {
            **self.extra,
            "id": self.id,
            "at": self.created_at.isoformat(),
            "source": self.source,
            "qty": self.quantity,
            "product": self.product.to_dict(),
            "user": self.user.to_dict() if self.user is not None else None,
            "status": self.status.value,
        }
        if self.handled_at is not None:
            payload["handledAt"] = self.handled_at.isoformat()
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InboxEntry":
        """Parse one persisted entry; raises :class:`SerializationError` when malformed.

        Checkout orders filed by the storefront carry ``createdAt`` instead of
        ``at`` and no ``qty``; both shapes are accepted.
        """
        if not isinstance(data, Mapping):
            raise SerializationError(f"entry must be an object, got {type(data).__name__}")
        try:
            product = data["product"]
            user = data.get("user")
            handled_at = data.get("handledAt")
            return cls(
                id=str(data["id"]),
                created_at=datetime.fromisoformat(data.get("at") or data["createdAt"]),
                source=str(data.get("source") or "cart"),
                product=ProductSnapshot.from_record(product, keep_extra=True),
                quantity=int(data.get("qty") or 1),
                user=UserSnapshot.from_record(user) if user else None,
                # a missing status is what older archives wrote on undo
                status=EntryStatus(data.get("status") or EntryStatus.PENDING.value),
                handled_at=datetime.fromisoformat(handled_at) if handled_at else None,
                extra={k: v for k, v in data.items() if k not in _ENTRY_FIELDS},
            )
        except SerializationError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SerializationError(f"malformed inbox entry: {exc}", payload_type="entry", cause=exc) from exc


@dataclasses.dataclass(frozen=True)
class InboxSummary:
    """Counts shown next to the inbox."""

    total: int = 0
    pending: int = 0
    confirmed: int = 0
    rejected: int = 0
    archived_confirmed: int = 0
    archived_rejected: int = 0

    @classmethod
    def of(
        cls,
        entries: Sequence[InboxEntry],
        *,
        archived_confirmed: int = 0,
        archived_rejected: int = 0,
    ) -> "InboxSummary":
        return cls(
            total=len(entries),
            pending=sum(1 for e in entries if e.status is EntryStatus.PENDING),
            confirmed=sum(1 for e in entries if e.status is EntryStatus.CONFIRMED),
            rejected=sum(1 for e in entries if e.status is EntryStatus.REJECTED),
            archived_confirmed=archived_confirmed,
            archived_rejected=archived_rejected,
        )


__all__ = [
    "EntryStatus",
    "InboxEntry",
    "InboxSummary",
    "ProductSnapshot",
    "UserSnapshot",
]
