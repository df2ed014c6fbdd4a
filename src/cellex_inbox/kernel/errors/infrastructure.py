"""Infrastructure errors – storage I/O and payload decoding."""

from __future__ import annotations

from typing import Any

from cellex_inbox.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure that is not an inbox rule violation."""

    default_code = "infrastructure_error"


class StorageError(InfrastructureError):
    """A key-value storage backend failed to read or write."""

    default_code = "storage_error"

    def __init__(
        self,
        backend: str,
        message: str | None = None,
        *,
        key: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Storage backend '{backend}' failed", **kwargs)
        self.backend = backend
        self.key = key


class SerializationError(InfrastructureError):
    """A persisted value could not be decoded."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.key = key
        self.payload_type = payload_type


__all__ = [
    "InfrastructureError",
    "SerializationError",
    "StorageError",
]
