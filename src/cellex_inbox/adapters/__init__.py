"""Adapters – concrete storage and change-notification backends.

Backends with third-party requirements live in their own subpackages
(``cellex_inbox.adapters.redis``, ``cellex_inbox.adapters.sqlalchemy``) and are
not imported here.
"""
from cellex_inbox.adapters.memory import InMemoryKeyValueStorage
from cellex_inbox.adapters.polling import PollingChangeNotifier

__all__ = ["InMemoryKeyValueStorage", "PollingChangeNotifier"]
