"""Kernel ports – one-way presentation sink."""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from cellex_inbox.kernel.inbox.models import InboxEntry, InboxSummary


@runtime_checkable
class RenderSink(Protocol):
    """Port: redraws the inbox after every mutation. Never calls back."""

    def render(self, entries: Sequence[InboxEntry], summary: InboxSummary) -> None: ...


class NullRenderSink:
    """Render sink that discards everything (headless capture workers)."""

    def render(self, entries: Sequence[InboxEntry], summary: InboxSummary) -> None:  # noqa: ARG002
        return None


__all__ = ["NullRenderSink", "RenderSink"]
