from core.events.domain_events import domain_events
from core.events.signal import Signal


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(commitment_id: str) -> None:
        seen.append(commitment_id)

    domain_events.commitments_changed.connect(_handler)
    domain_events.commitments_changed.emit("c-1")
    domain_events.commitments_changed.disconnect(_handler)
    domain_events.commitments_changed.emit("c-2")

    assert seen == ["c-1"]


def test_signal_emit_prunes_dead_weak_callbacks():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    class _DeadProxyCallback:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: str) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _DeadProxyCallback()

    def _ok(payload: str) -> None:
        seen.append(payload)

    signal.connect(dead)
    signal.connect(_ok)

    signal.emit("a-1")
    signal.emit("a-2")

    assert dead.calls == 1
    assert seen == ["a-1", "a-2"]
    assert signal.subscriber_count == 1


def test_signal_emit_keeps_runtime_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    try:
        signal.emit("x")
        assert False, "Expected RuntimeError to propagate"
    except RuntimeError as exc:
        assert str(exc) == "boom"


def test_services_emit_after_commit(services, checking):
    ledger_seen: list[str] = []
    account_seen: list[str] = []

    def _on_ledger(entry_id: str) -> None:
        # the change must already be visible when subscribers run
        assert services["ledger_service"].get_entry(entry_id).description == "Lunch"
        ledger_seen.append(entry_id)

    domain_events.ledger_changed.connect(_on_ledger)
    domain_events.accounts_changed.connect(account_seen.append)
    try:
        entry = services["ledger_service"].post_entry("Lunch", 12.0, "expense", checking.id)
    finally:
        domain_events.ledger_changed.disconnect(_on_ledger)
        domain_events.accounts_changed.disconnect(account_seen.append)

    assert ledger_seen == [entry.id]
    assert account_seen == [checking.id]
