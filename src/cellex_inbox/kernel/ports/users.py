"""Kernel ports – read-only user registry."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from cellex_inbox.kernel.inbox.models import UserSnapshot


@runtime_checkable
class UserRegistry(Protocol):
    async def find(self, owner_id: str) -> UserSnapshot | None: ...
    async def list_owner_ids(self) -> list[str]: ...


__all__ = ["UserRegistry"]
