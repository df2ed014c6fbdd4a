"""Kernel – framework-agnostic building blocks."""

from cellex_inbox.kernel.errors import (
    BaseError,
    DomainError,
    EntryNotFoundError,
    InfrastructureError,
    InvalidStatusTransitionError,
    SerializationError,
    StorageError,
)

__all__ = [
    "BaseError",
    "DomainError",
    "EntryNotFoundError",
    "InfrastructureError",
    "InvalidStatusTransitionError",
    "SerializationError",
    "StorageError",
]
