"""Observability – logging and the diagnostic event channel."""
from cellex_inbox.observability.events import EventEmitter, LoggingEventEmitter, StructuredEvent
from cellex_inbox.observability.logging import JsonLoggerFactory, get_logger

__all__ = [
    "EventEmitter",
    "JsonLoggerFactory",
    "LoggingEventEmitter",
    "StructuredEvent",
    "get_logger",
]
