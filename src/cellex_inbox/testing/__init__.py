"""Testing – fakes for code built on cellex_inbox."""
from cellex_inbox.testing.fakes import (
    FakeClock,
    FrozenClock,
    InMemoryKeyValueStorage,
    InMemoryUserRegistry,
    RecordingRenderSink,
)

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemoryKeyValueStorage",
    "InMemoryUserRegistry",
    "RecordingRenderSink",
]
