"""CapturePipeline – wires stores, scanner, listener and status API over one storage."""
from __future__ import annotations

import dataclasses

from cellex_inbox.application.capture import (
    CaptureListener,
    CartScanner,
    EntryMaterializer,
    FingerprintDeduplicator,
    StorageUserRegistry,
)
from cellex_inbox.application.inbox import InboxRenderer, JsonCollectionStore, StatusTransitionService
from cellex_inbox.config.settings import CaptureSettings
from cellex_inbox.kernel.ports import ChangeNotifier, KeyValueStorage, RenderSink, UserRegistry
from cellex_inbox.kernel.time import Clock, SystemClock
from cellex_inbox.observability.events import EventEmitter, LoggingEventEmitter

__all__ = ["CapturePipeline"]


@dataclasses.dataclass
class CapturePipeline:
    """Every collaborator of the capture mechanism, built against one storage."""

    settings: CaptureSettings
    inbox: JsonCollectionStore
    confirmed: JsonCollectionStore
    rejected: JsonCollectionStore
    renderer: InboxRenderer
    deduplicator: FingerprintDeduplicator
    materializer: EntryMaterializer
    scanner: CartScanner
    status: StatusTransitionService
    listener: CaptureListener | None = None

    @classmethod
    def build(
        cls,
        storage: KeyValueStorage,
        *,
        notifier: ChangeNotifier | None = None,
        settings: CaptureSettings | None = None,
        sink: RenderSink | None = None,
        users: UserRegistry | None = None,
        clock: Clock | None = None,
        diagnostics: EventEmitter | None = None,
    ) -> "CapturePipeline":
        """Assemble the pipeline.

        Parameters
        ----------
        storage:
            Shared key-value storage holding carts, users and the inbox.
        notifier:
            Change notification source; without one no listener is built
            and captures only happen through explicit scans.
        users:
            Defaults to the ``app.users`` list kept in *storage*.
        """
        settings = settings or CaptureSettings()
        clock = clock or SystemClock()
        diagnostics = diagnostics or LoggingEventEmitter()

        inbox = JsonCollectionStore(storage, settings.inbox_key, diagnostics=diagnostics)
        confirmed = JsonCollectionStore(storage, settings.confirmed_key, diagnostics=diagnostics)
        rejected = JsonCollectionStore(storage, settings.rejected_key, diagnostics=diagnostics)
        renderer = InboxRenderer(inbox, sink, confirmed=confirmed, rejected=rejected)
        deduplicator = FingerprintDeduplicator(storage, settings)
        materializer = EntryMaterializer(inbox, renderer, clock=clock)
        scanner = CartScanner(
            storage,
            users or StorageUserRegistry(storage, settings, diagnostics=diagnostics),
            deduplicator,
            materializer,
            settings,
            diagnostics=diagnostics,
        )
        status = StatusTransitionService(inbox, confirmed, rejected, renderer, clock=clock)
        listener = CaptureListener(scanner, notifier, storage, settings) if notifier is not None else None
        return cls(
            settings=settings,
            inbox=inbox,
            confirmed=confirmed,
            rejected=rejected,
            renderer=renderer,
            deduplicator=deduplicator,
            materializer=materializer,
            scanner=scanner,
            status=status,
            listener=listener,
        )
