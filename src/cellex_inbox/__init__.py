"""
cellex_inbox – cart-to-admin inbox capture for the CellEX storefront.

Import path convention::

    from cellex_inbox.kernel.inbox import InboxEntry, EntryStatus
    from cellex_inbox.application.capture import CartScanner, CaptureListener
    from cellex_inbox.application.inbox import StatusTransitionService
    from cellex_inbox.adapters.memory import InMemoryKeyValueStorage
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
