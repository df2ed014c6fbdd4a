"""In-memory adapter – storage + change notification in one object."""
from cellex_inbox.adapters.memory.storage import InMemoryKeyValueStorage

__all__ = ["InMemoryKeyValueStorage"]
