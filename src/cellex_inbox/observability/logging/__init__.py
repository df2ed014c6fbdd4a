"""Observability – structured logging helpers."""
from cellex_inbox.observability.logging.factory import JsonLoggerFactory
from cellex_inbox.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
