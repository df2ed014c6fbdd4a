"""Pushes the current inbox and its counts to the render sink."""
from __future__ import annotations

from cellex_inbox.application.inbox.store import JsonCollectionStore
from cellex_inbox.kernel.inbox import InboxEntry, InboxSummary
from cellex_inbox.kernel.ports import NullRenderSink, RenderSink

__all__ = ["InboxRenderer"]


class InboxRenderer:
    def __init__(
        self,
        inbox: JsonCollectionStore,
        sink: RenderSink | None = None,
        *,
        confirmed: JsonCollectionStore | None = None,
        rejected: JsonCollectionStore | None = None,
    ) -> None:
        self._inbox = inbox
        self._sink = sink or NullRenderSink()
        self._confirmed = confirmed
        self._rejected = rejected

    async def summary(self, entries: list[InboxEntry] | None = None) -> InboxSummary:
        if entries is None:
            entries = await self._inbox.load()
        archived_confirmed = len(await self._confirmed.load()) if self._confirmed else 0
        archived_rejected = len(await self._rejected.load()) if self._rejected else 0
        return InboxSummary.of(
            entries,
            archived_confirmed=archived_confirmed,
            archived_rejected=archived_rejected,
        )

    async def refresh(self) -> InboxSummary:
        """Reload the inbox from storage and redraw it."""
        entries = await self._inbox.load()
        summary = await self.summary(entries)
        self._sink.render(entries, summary)
        return summary
