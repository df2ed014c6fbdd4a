"""Kernel ports – durable key-value storage."""
from __future__ import annotations

import abc
from collections.abc import Mapping


class KeyValueStorage(abc.ABC):
    """Port: string-keyed, string-valued durable storage shared by every context.

    Values are JSON documents or plain strings (fingerprints, flags). The
    library never relies on anything beyond whole-value reads and writes.
    """

    @abc.abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the raw value stored under *key*, or ``None``."""

    @abc.abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under *key*."""

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; absent keys are ignored."""

    @abc.abstractmethod
    async def set_many(self, values: Mapping[str, str]) -> None:
        """Write every pair of *values* as one atomic unit."""


__all__ = ["KeyValueStorage"]
