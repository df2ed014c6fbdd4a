"""Diagnostic event channel.

Recoverable problems (a corrupt persisted collection, a malformed entry that
had to be skipped) never surface as exceptions. They are emitted here instead
so operators can see that a fallback happened.
"""
from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from cellex_inbox.observability.logging import get_logger

__all__ = [
    "EventEmitter",
    "LoggingEventEmitter",
    "StructuredEvent",
]


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class StructuredEvent:
    name: str
    service: str = "cellex-inbox"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "service": self.service,
            "timestamp": self.timestamp.isoformat(),
            **self.fields,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=_default_serializer)


class EventEmitter:
    """Buffers StructuredEvents until flushed.

    With *max_buffered* set, only the newest events are kept.
    """

    def __init__(self, max_buffered: int | None = None) -> None:
        self._buffer: deque[StructuredEvent] = deque(maxlen=max_buffered)

    def emit(self, event: StructuredEvent) -> None:
        self._buffer.append(event)

    def flush(self) -> list[StructuredEvent]:
        events = list(self._buffer)
        self._buffer.clear()
        return events

    @property
    def buffered(self) -> list[StructuredEvent]:
        return list(self._buffer)

    def of_name(self, name: str) -> list[StructuredEvent]:
        return [e for e in self._buffer if e.name == name]


class LoggingEventEmitter(EventEmitter):
    """Writes each event as a structlog warning and keeps the most recent ones.

    This is the default channel of long-running listeners, so the buffer is
    bounded even when nobody flushes it.
    """

    DEFAULT_MAX_BUFFERED = 100

    def __init__(self, max_buffered: int = DEFAULT_MAX_BUFFERED) -> None:
        super().__init__(max_buffered)
        self._log = get_logger(__name__)

    def emit(self, event: StructuredEvent) -> None:
        super().emit(event)
        self._log.warning(event.name, **event.fields)
