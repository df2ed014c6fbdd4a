"""Capture listener – reacts to storage changes and runs periodic rescans."""
from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable

from cellex_inbox.application.capture.scanner import CartScanner
from cellex_inbox.config.settings import CaptureSettings
from cellex_inbox.kernel.inbox import InboxEntry
from cellex_inbox.kernel.ports import ChangeNotifier, KeyValueStorage, Subscription
from cellex_inbox.observability.logging import get_logger

__all__ = ["CaptureListener"]

logger = get_logger(__name__)


class CaptureListener:
    """Drives :class:`CartScanner` from change notifications and a timer.

    A change to the cart key or the current-user key schedules a capture
    after ``capture_delay_ms``, giving the writing page time to store the
    rest of its keys. Notifications only say *which* key changed; the
    fingerprint check decides whether anything is captured.

    Usage::

        async with CaptureListener(scanner, storage, storage, settings) as listener:
            ...  # carts are captured until the block exits
    """

    def __init__(
        self,
        scanner: CartScanner,
        notifier: ChangeNotifier,
        storage: KeyValueStorage,
        settings: CaptureSettings | None = None,
    ) -> None:
        self._scanner = scanner
        self._notifier = notifier
        self._storage = storage
        self._settings = settings or CaptureSettings()
        self._auto_capture = self._settings.default_auto_capture
        self._subscription: Subscription | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._rescan_task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def auto_capture(self) -> bool:
        return self._auto_capture

    @property
    def is_running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._auto_capture = await self._load_auto_capture()
        self._subscription = self._notifier.subscribe(self._on_change)
        self._schedule("initial_scan", self._scanner.scan_all)
        if self._settings.scan_interval_seconds > 0:
            self._rescan_task = asyncio.create_task(self._rescan_loop())
        logger.info("inbox.listener.started", auto_capture=self._auto_capture)

    async def stop(self) -> None:
        """Cancel the rescan timer and any capture still waiting on its delay."""
        self._running = False
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        tasks = list(self._pending)
        if self._rescan_task is not None:
            tasks.append(self._rescan_task)
            self._rescan_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._pending.clear()
        logger.info("inbox.listener.stopped")

    async def __aenter__(self) -> "CaptureListener":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def flush(self) -> None:
        """Wait for every scheduled capture to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Manual controls
    # ------------------------------------------------------------------

    async def scan_now(self) -> list[InboxEntry]:
        """Run a full scan immediately. Failures propagate to the caller."""
        return await self._scanner.scan_all()

    async def set_auto_capture(self, enabled: bool) -> None:
        self._auto_capture = bool(enabled)
        await self._storage.set(self._settings.auto_capture_key, json.dumps(self._auto_capture))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load_auto_capture(self) -> bool:
        raw = await self._storage.get(self._settings.auto_capture_key)
        if raw is None:
            return self._settings.default_auto_capture
        try:
            return bool(json.loads(raw))
        except json.JSONDecodeError:
            return self._settings.default_auto_capture

    async def _on_change(self, key: str) -> None:
        if not self._running:
            return
        if key == self._settings.auto_capture_key:
            self._auto_capture = await self._load_auto_capture()
            return
        if not self._auto_capture:
            return
        if key in (self._settings.cart_key, self._settings.current_user_key):
            self._schedule("cart_changed", self._scanner.capture_current_cart)

    def _schedule(self, cycle: str, fn: Callable[[], Awaitable[object]]) -> None:
        task = asyncio.create_task(self._delayed(cycle, fn))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _delayed(self, cycle: str, fn: Callable[[], Awaitable[object]]) -> None:
        await asyncio.sleep(self._settings.capture_delay)
        await self._run_cycle(cycle, fn)

    async def _run_cycle(self, cycle: str, fn: Callable[[], Awaitable[object]]) -> None:
        # unattended cycles never take the listener down; the next one self-heals
        try:
            await fn()
        except Exception:  # noqa: BLE001
            logger.exception("inbox.listener.cycle_failed", cycle=cycle)

    async def _rescan_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._settings.scan_interval_seconds)
            if self._auto_capture:
                await self._run_cycle("rescan", self._scanner.scan_all)
