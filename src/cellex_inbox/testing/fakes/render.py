"""Testing fakes – RecordingRenderSink."""
from __future__ import annotations

from typing import Sequence

from cellex_inbox.kernel.inbox import InboxEntry, InboxSummary


class RecordingRenderSink:
    """Keeps every render call so tests can assert on what was drawn."""

    def __init__(self) -> None:
        self.renders: list[tuple[list[InboxEntry], InboxSummary]] = []

    def render(self, entries: Sequence[InboxEntry], summary: InboxSummary) -> None:
        self.renders.append((list(entries), summary))

    @property
    def last_entries(self) -> list[InboxEntry]:
        return self.renders[-1][0] if self.renders else []

    @property
    def last_summary(self) -> InboxSummary | None:
        return self.renders[-1][1] if self.renders else None

    def clear(self) -> None:
        self.renders.clear()


__all__ = ["RecordingRenderSink"]
