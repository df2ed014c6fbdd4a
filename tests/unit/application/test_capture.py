"""Unit tests for materialisation and cart scanning."""
from __future__ import annotations

import asyncio
import json
from typing import Any

from cellex_inbox.adapters.memory import InMemoryKeyValueStorage
from cellex_inbox.application import CapturePipeline
from cellex_inbox.kernel.inbox import EntryStatus, UserSnapshot
from cellex_inbox.observability.events import EventEmitter
from cellex_inbox.testing import FakeClock, InMemoryUserRegistry, RecordingRenderSink

USERS = [
    {"id": "u_1", "name": "Ana", "email": "ana@example.com", "number": "0123", "createdAt": "2025-11-02"},
    {"id": "u_2", "name": "Ben", "email": "ben@example.com"},
]


def _build(initial: dict[str, Any] | None = None) -> tuple[CapturePipeline, InMemoryKeyValueStorage, RecordingRenderSink]:
    raw = {k: v if isinstance(v, str) else json.dumps(v) for k, v in (initial or {}).items()}
    raw.setdefault("app.users", json.dumps(USERS))
    storage = InMemoryKeyValueStorage(raw)
    sink = RecordingRenderSink()
    pipeline = CapturePipeline.build(storage, sink=sink, clock=FakeClock(), diagnostics=EventEmitter())
    return pipeline, storage, sink


# ---------------------------------------------------------------------------
# EntryMaterializer
# ---------------------------------------------------------------------------


class TestEntryMaterializer:
    def test_builds_pending_entry_with_snapshots(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build()
            user = UserSnapshot(id="u_1", name="Ana")
            entry = await pipeline.materializer.materialize(
                "u_1", user, {"id": "p_1", "name": "Phone", "price": 100, "stock": 3}, 2, "cart"
            )
            assert entry.status is EntryStatus.PENDING
            assert entry.quantity == 2
            assert entry.source == "cart"
            assert entry.user == user
            assert entry.product.image is None
            assert entry.created_at == FakeClock().now()
            assert entry.id.startswith("ac_")
        asyncio.run(run())

    def test_inserts_at_head_and_persists(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build()
            first = await pipeline.materializer.materialize("u_1", None, {"id": "p_1"})
            second = await pipeline.materializer.materialize("u_1", None, {"id": "p_2"})
            assert [e.id for e in await pipeline.inbox.load()] == [second.id, first.id]
        asyncio.run(run())

    def test_renders_after_each_entry(self) -> None:
        async def run() -> None:
            pipeline, _, sink = _build()
            await pipeline.materializer.materialize_collection(
                "u_1", None, [{"id": "p_1"}, {"id": "p_2", "qty": 3}], "cart"
            )
            assert len(sink.renders) == 2
            assert sink.last_summary.total == 2
            assert sink.last_summary.pending == 2
        asyncio.run(run())

    def test_collection_yields_one_entry_per_item(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build()
            entries = await pipeline.materializer.materialize_collection(
                "u_1", None, [{"id": "p_1", "qty": 2}, {"id": "p_2"}], "cart"
            )
            assert [(e.product.id, e.quantity) for e in entries] == [("p_1", 2), ("p_2", 1)]
        asyncio.run(run())

    def test_entry_ids_unique(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build()
            items = [{"id": "p_1"}] * 20
            entries = await pipeline.materializer.materialize_collection("u_1", None, items, "cart")
            assert len({e.id for e in entries}) == 20
        asyncio.run(run())


# ---------------------------------------------------------------------------
# CartScanner
# ---------------------------------------------------------------------------


class TestCaptureCurrentCart:
    def test_scenario_capture_dedupe_then_quantity_change(self) -> None:
        async def run() -> None:
            pipeline, storage, _ = _build({"cart": [{"id": "p_1", "qty": 2}], "app.currentUserId": "u_1"})

            first = await pipeline.scanner.capture_current_cart()
            assert len(first) == 1
            assert first[0].quantity == 2
            assert first[0].status is EntryStatus.PENDING

            assert await pipeline.scanner.capture_current_cart() == []

            await storage.set("cart", json.dumps([{"id": "p_1", "qty": 3}]))
            third = await pipeline.scanner.capture_current_cart()
            assert [(e.product.id, e.quantity) for e in third] == [("p_1", 3)]

            inbox = await pipeline.inbox.load()
            assert [e.quantity for e in inbox] == [3, 2]
        asyncio.run(run())

    def test_attaches_user_snapshot(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": [{"id": "p_1"}], "app.currentUserId": "u_1"})
            [entry] = await pipeline.scanner.capture_current_cart()
            assert entry.user == UserSnapshot(
                id="u_1", name="Ana", email="ana@example.com", number="0123", created_at="2025-11-02"
            )
        asyncio.run(run())

    def test_unknown_owner_gets_null_snapshot(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": [{"id": "p_1"}], "app.currentUserId": "u_404"})
            [entry] = await pipeline.scanner.capture_current_cart()
            assert entry.user is None
        asyncio.run(run())

    def test_json_encoded_owner_id(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": [{"id": "p_1"}], "app.currentUserId": '"u_2"'})
            [entry] = await pipeline.scanner.capture_current_cart()
            assert entry.user is not None and entry.user.name == "Ben"
        asyncio.run(run())

    def test_no_owner_is_skipped(self) -> None:
        async def run() -> None:
            pipeline, storage, _ = _build({"cart": [{"id": "p_1"}]})
            assert await pipeline.scanner.capture_current_cart() == []
            assert not any(k.startswith("admin.cartSeen") for k in storage.snapshot())
        asyncio.run(run())

    def test_empty_cart_is_skipped(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": [], "app.currentUserId": "u_1"})
            assert await pipeline.scanner.capture_current_cart() == []
        asyncio.run(run())

    def test_corrupt_cart_is_skipped(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": "[{oops", "app.currentUserId": "u_1"})
            assert await pipeline.scanner.capture_current_cart() == []
        asyncio.run(run())

    def test_non_list_cart_is_skipped_and_reported(self) -> None:
        async def run() -> None:
            diagnostics = EventEmitter()
            storage = InMemoryKeyValueStorage(
                {"cart": json.dumps({"id": "p_1"}), "app.currentUserId": "u_1", "app.users": json.dumps(USERS)}
            )
            pipeline = CapturePipeline.build(storage, clock=FakeClock(), diagnostics=diagnostics)
            assert await pipeline.scanner.capture_current_cart() == []
            [event] = diagnostics.of_name("inbox.storage.corrupt")
            assert event.fields["key"] == "cart"
        asyncio.run(run())

    def test_lines_without_id_are_ignored(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"cart": [{"name": "ghost"}, {"id": "p_1"}], "app.currentUserId": "u_1"})
            entries = await pipeline.scanner.capture_current_cart()
            assert [e.product.id for e in entries] == ["p_1"]
        asyncio.run(run())

    def test_scanner_never_writes_carts(self) -> None:
        async def run() -> None:
            cart = json.dumps([{"id": "p_1", "qty": 2}])
            pipeline, storage, _ = _build({"cart": cart, "app.currentUserId": "u_1"})
            await pipeline.scanner.scan_all()
            assert await storage.get("cart") == cart
        asyncio.run(run())


class TestSnapshotImmutability:
    def test_renaming_product_does_not_touch_entry(self) -> None:
        async def run() -> None:
            pipeline, storage, _ = _build({"cart": [{"id": "p_1", "name": "Phone"}], "app.currentUserId": "u_1"})
            await pipeline.scanner.capture_current_cart()
            await storage.set("cart", json.dumps([{"id": "p_1", "name": "Phone X", "qty": 2}]))
            await pipeline.scanner.capture_current_cart()
            inbox = await pipeline.inbox.load()
            assert [e.product.name for e in inbox] == ["Phone X", "Phone"]
        asyncio.run(run())

    def test_editing_user_does_not_touch_entry(self) -> None:
        async def run() -> None:
            storage = InMemoryKeyValueStorage({"cart": json.dumps([{"id": "p_1"}]), "app.currentUserId": "u_1"})
            users = InMemoryUserRegistry([{"id": "u_1", "name": "Ana"}])
            pipeline = CapturePipeline.build(storage, users=users, clock=FakeClock())
            await pipeline.scanner.capture_current_cart()
            users.update("u_1", name="Anabel")
            [entry] = await pipeline.inbox.load()
            assert entry.user is not None and entry.user.name == "Ana"
        asyncio.run(run())


class TestScanAll:
    def test_scans_per_user_cart_keys(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build(
                {
                    "cart.u_1": [{"id": "p_1"}],
                    "cart.u_u_2": [{"id": "p_2", "qty": 2}],
                    "user.cart.u_2": [{"id": "p_3"}],
                }
            )
            created = await pipeline.scanner.scan_all()
            assert sorted((e.source, e.product.id) for e in created) == [
                ("cart.u_1", "p_1"),
                ("cart.u_u_2", "p_2"),
                ("user.cart.u_2", "p_3"),
            ]
            assert {e.user.id for e in created if e.user} == {"u_1", "u_2"}
        asyncio.run(run())

    def test_second_scan_is_idempotent(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build(
                {"cart": [{"id": "p_9"}], "app.currentUserId": "u_2", "cart.u_1": [{"id": "p_1"}]}
            )
            assert len(await pipeline.scanner.scan_all()) == 2
            assert await pipeline.scanner.scan_all() == []
            assert len(await pipeline.inbox.load()) == 2
        asyncio.run(run())

    def test_reordered_cart_is_captured_again(self) -> None:
        async def run() -> None:
            pipeline, storage, _ = _build({"cart.u_1": [{"id": "p_1"}, {"id": "p_2"}]})
            await pipeline.scanner.scan_all()
            await storage.set("cart.u_1", json.dumps([{"id": "p_2"}, {"id": "p_1"}]))
            assert len(await pipeline.scanner.scan_all()) == 2
        asyncio.run(run())

    def test_no_users_registered(self) -> None:
        async def run() -> None:
            pipeline, _, _ = _build({"app.users": "not json", "cart.u_1": [{"id": "p_1"}]})
            assert await pipeline.scanner.scan_all() == []
        asyncio.run(run())
