"""Testing fakes – in-memory doubles for kernel ports."""
from cellex_inbox.adapters.memory import InMemoryKeyValueStorage
from cellex_inbox.kernel.time import FrozenClock
from cellex_inbox.testing.fakes.clock import STOREFRONT_EPOCH, FakeClock
from cellex_inbox.testing.fakes.render import RecordingRenderSink
from cellex_inbox.testing.fakes.users import InMemoryUserRegistry

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemoryKeyValueStorage",
    "InMemoryUserRegistry",
    "RecordingRenderSink",
    "STOREFRONT_EPOCH",
]
