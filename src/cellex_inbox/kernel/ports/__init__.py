"""Kernel ports – storage, notification, user lookup and rendering seams."""
from cellex_inbox.kernel.ports.notifications import ChangeHandler, ChangeNotifier, Subscription
from cellex_inbox.kernel.ports.render import NullRenderSink, RenderSink
from cellex_inbox.kernel.ports.storage import KeyValueStorage
from cellex_inbox.kernel.ports.users import UserRegistry

__all__ = [
    "ChangeHandler",
    "ChangeNotifier",
    "KeyValueStorage",
    "NullRenderSink",
    "RenderSink",
    "Subscription",
    "UserRegistry",
]
