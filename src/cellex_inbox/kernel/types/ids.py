"""Inbox entry identifiers."""

from __future__ import annotations

import uuid

ENTRY_ID_PREFIX = "ac_"


def new_entry_id() -> str:
    """Return a fresh, collection-unique inbox entry id (``ac_<hex>``)."""
    return f"{ENTRY_ID_PREFIX}{uuid.uuid4().hex}"


__all__ = ["ENTRY_ID_PREFIX", "new_entry_id"]
