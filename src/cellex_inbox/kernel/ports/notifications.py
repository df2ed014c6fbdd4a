"""Kernel ports – cross-context change notification."""
from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

ChangeHandler = Callable[[str], Awaitable[None]]


@runtime_checkable
class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


@runtime_checkable
class ChangeNotifier(Protocol):
    """Port: delivers the name of every key changed by any context.

    Notifications are advisory: subscribers re-read storage rather than
    trusting anything about the payload beyond the key name.
    """

    def subscribe(self, handler: ChangeHandler) -> Subscription: ...


__all__ = ["ChangeHandler", "ChangeNotifier", "Subscription"]
