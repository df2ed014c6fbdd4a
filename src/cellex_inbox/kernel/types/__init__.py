"""Kernel types – Result monad and identifier helpers."""
from cellex_inbox.kernel.types.ids import ENTRY_ID_PREFIX, new_entry_id
from cellex_inbox.kernel.types.result import Err, Ok, Result

__all__ = ["ENTRY_ID_PREFIX", "Err", "Ok", "Result", "new_entry_id"]
