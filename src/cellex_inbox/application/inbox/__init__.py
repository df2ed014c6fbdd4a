"""Application inbox – collection stores, rendering and status transitions."""
from cellex_inbox.application.inbox.render import InboxRenderer
from cellex_inbox.application.inbox.status import StatusTransitionService
from cellex_inbox.application.inbox.store import JsonCollectionStore

__all__ = ["InboxRenderer", "JsonCollectionStore", "StatusTransitionService"]
