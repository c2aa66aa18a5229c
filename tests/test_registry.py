from __future__ import annotations

import threading

from vanguard_sync.constants import Slot
from vanguard_sync.registry import SessionRegistry


def test_join_creates_session_and_reports_slots(registry: SessionRegistry) -> None:
    a, b = object(), object()
    assert registry.join("abc123", Slot.PC1, a) == ["pc1"]
    assert registry.join("abc123", Slot.PC2, b) == ["pc1", "pc2"]
    assert "abc123" in registry
    assert registry.session_count() == 1


def test_slots_reported_in_join_order(registry: SessionRegistry) -> None:
    registry.join("t", Slot.PC2, object())
    assert registry.join("t", Slot.PC1, object()) == ["pc2", "pc1"]


def test_tokens_are_case_sensitive(registry: SessionRegistry) -> None:
    registry.join("Token", Slot.PC1, object())
    assert "token" not in registry
    assert registry.lookup("token", Slot.PC1) is None


def test_duplicate_join_overwrites_slot(registry: SessionRegistry) -> None:
    first, second = object(), object()
    registry.join("t", Slot.PC1, first)
    assert registry.join("t", Slot.PC1, second) == ["pc1"]
    assert registry.lookup("t", Slot.PC1) is second


def test_lookup_peer_uses_opposite_slot(registry: SessionRegistry) -> None:
    a, b = object(), object()
    registry.join("t", Slot.PC1, a)
    assert registry.lookup_peer("t", Slot.PC1) is None
    registry.join("t", Slot.PC2, b)
    assert registry.lookup_peer("t", Slot.PC1) is b
    assert registry.lookup_peer("t", Slot.PC2) is a
    assert registry.lookup_peer("missing", Slot.PC1) is None


def test_leave_removes_empty_session(registry: SessionRegistry) -> None:
    a, b = object(), object()
    registry.join("t", Slot.PC1, a)
    registry.join("t", Slot.PC2, b)

    assert registry.leave("t", Slot.PC2) is True
    assert registry.connected_slots("t") == ["pc1"]
    assert registry.leave("t", Slot.PC1) is True
    assert "t" not in registry
    assert registry.session_count() == 0


def test_leave_is_idempotent(registry: SessionRegistry) -> None:
    registry.join("t", Slot.PC1, object())
    registry.join("t", Slot.PC2, object())
    assert registry.leave("t", Slot.PC2) is True
    assert registry.leave("t", Slot.PC2) is False
    assert registry.leave("unknown", Slot.PC1) is False
    assert registry.connected_slots("t") == ["pc1"]


def test_leave_with_stale_handle_keeps_replacement(registry: SessionRegistry) -> None:
    old, new = object(), object()
    registry.join("t", Slot.PC1, old)
    registry.join("t", Slot.PC1, new)
    assert registry.leave("t", Slot.PC1, old) is False
    assert registry.lookup("t", Slot.PC1) is new
    assert registry.leave("t", Slot.PC1, new) is True
    assert "t" not in registry


def test_rejoin_after_leave_is_fresh(registry: SessionRegistry) -> None:
    a = object()
    registry.join("t", Slot.PC1, a)
    registry.leave("t", Slot.PC1, a)
    b = object()
    assert registry.join("t", Slot.PC1, b) == ["pc1"]
    assert registry.lookup("t", Slot.PC1) is b


def test_concurrent_join_leave_never_tears_session(registry: SessionRegistry) -> None:
    keeper = object()
    registry.join("t", Slot.PC1, keeper)

    def churn() -> None:
        for _ in range(500):
            handle = object()
            registry.join("t", Slot.PC2, handle)
            registry.leave("t", Slot.PC2, handle)

    threads = [threading.Thread(target=churn) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.connected_slots("t") == ["pc1"]
    assert registry.lookup("t", Slot.PC1) is keeper


def test_slot_parse_and_opposite() -> None:
    assert Slot.parse("PC1") is Slot.PC1
    assert Slot.parse("pc2") is Slot.PC2
    assert Slot.parse("pc3") is None
    assert Slot.parse(None) is None
    assert Slot.parse(7) is None
    assert Slot.PC1.opposite() is Slot.PC2
    assert Slot.PC2.opposite() is Slot.PC1
