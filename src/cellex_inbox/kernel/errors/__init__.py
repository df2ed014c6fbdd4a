"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── InvalidStatusTransitionError
    │   └── EntryNotFoundError
    └── InfrastructureError      (infrastructure.py)
        ├── StorageError
        └── SerializationError
"""

from cellex_inbox.kernel.errors.base import BaseError
from cellex_inbox.kernel.errors.domain import (
    DomainError,
    EntryNotFoundError,
    InvalidStatusTransitionError,
)
from cellex_inbox.kernel.errors.infrastructure import (
    InfrastructureError,
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
