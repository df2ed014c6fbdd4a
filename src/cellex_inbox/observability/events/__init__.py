from cellex_inbox.observability.events.emitter import (
    EventEmitter,
    LoggingEventEmitter,
    StructuredEvent,
)

__all__ = ["EventEmitter", "LoggingEventEmitter", "StructuredEvent"]
