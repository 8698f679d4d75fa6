"""
Semantic test: events reach every sink only after commit.

Invariant:
Each committed transition is recorded once in the history and fanned out
to sinks (file recorder, logging, Prometheus). Failed operations emit
nothing, and a failing sink never undoes a committed operation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from supply_chain.core.config.ledger_config import LedgerConfig
from supply_chain.core.domain.errors import AuthorizationError
from supply_chain.core.domain.types import Role, Status
from supply_chain.core.events.event_notifier import EventNotifier
from supply_chain.core.events.events import OrderPlaced, OrderReady
from supply_chain.core.events.sinks.file_recorder import FileRecorderSink
from supply_chain.core.events.sinks.sink_logging import LoggingEventSink
from supply_chain.runtime.bootstrap import build_ledger
from supply_chain.runtime.prometheus_metrics import PrometheusEventSink

OWNER = "0xowner"
CUSTOMER = "0xcustomer"
COOK = "0xcook"


class _ExplodingSink:
    def on_event(self, event) -> None:
        raise RuntimeError("sink down")


def test_file_recorder_writes_json_lines(tmp_path: Path) -> None:
    path = tmp_path / "events" / "ledger.jsonl"
    ledger = build_ledger(
        LedgerConfig(
            deployer=OWNER,
            initial_balances={CUSTOMER: 100},
            event_log_path=str(path),
        )
    )
    ledger.add_employee(OWNER, COOK, Role.COOK)

    ledger.place_order(CUSTOMER, 40)
    ledger.prepare_order(COOK, 1)
    ledger.notifier.close()

    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert records == [
        {"event_type": "OrderPlaced", "order_id": 1, "customer": CUSTOMER, "price": 40},
        {"event_type": "OrderPreparing", "order_id": 1, "cook": COOK},
    ]


def test_failed_operation_emits_nothing() -> None:
    registry = CollectorRegistry()
    ledger = build_ledger(
        LedgerConfig(deployer=OWNER, initial_balances={CUSTOMER: 100}),
        extra_sinks=[PrometheusEventSink(registry=registry)],
    )
    ledger.place_order(CUSTOMER, 40)

    with pytest.raises(AuthorizationError):
        ledger.prepare_order(CUSTOMER, 1)

    assert len(ledger.notifier.history()) == 1
    assert registry.get_sample_value(
        "supply_chain_events_total", {"event_type": "OrderPlaced"}
    ) == 1.0
    assert registry.get_sample_value(
        "supply_chain_events_total", {"event_type": "OrderPreparing"}
    ) is None


def test_prometheus_sink_counts_by_type() -> None:
    registry = CollectorRegistry()
    sink = PrometheusEventSink(registry=registry)

    sink.on_event(OrderPlaced(order_id=1, customer=CUSTOMER, price=1))
    sink.on_event(OrderPlaced(order_id=2, customer=CUSTOMER, price=1))
    sink.on_event(OrderReady(order_id=1))

    assert registry.get_sample_value("supply_chain_events_total", {"event_type": "OrderPlaced"}) == 2.0
    assert registry.get_sample_value("supply_chain_events_total", {"event_type": "OrderReady"}) == 1.0


def test_failing_sink_does_not_undo_commit(caplog: pytest.LogCaptureFixture) -> None:
    ledger = build_ledger(
        LedgerConfig(deployer=OWNER, initial_balances={CUSTOMER: 100}),
        extra_sinks=[_ExplodingSink()],
    )

    with caplog.at_level(logging.ERROR):
        order_id = ledger.place_order(CUSTOMER, 40)

    assert ledger.get_order_status(order_id) == Status.PLACED
    assert ledger.escrow.held_amount(order_id) == 40
    assert len(ledger.notifier.history()) == 1
    assert any("Event sink failed" in r.getMessage() for r in caplog.records)


def test_logging_sink_logs_structured_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test.events")
    notifier = EventNotifier([LoggingEventSink(logger)])
    event = OrderPlaced(order_id=3, customer=CUSTOMER, price=25)

    with caplog.at_level(logging.INFO, logger="test.events"):
        emitted = notifier.emit(event)

    assert emitted.seq == 1
    record = caplog.records[-1]
    assert record.getMessage() == "Ledger event OrderPlaced for order 3"
    assert record.event_type == "OrderPlaced"
    assert record.order_id == 3
    assert record.payload == {
        "event_type": "OrderPlaced",
        "order_id": 3,
        "customer": CUSTOMER,
        "price": 25,
    }


def test_close_is_idempotent(tmp_path: Path) -> None:
    sink = FileRecorderSink(tmp_path / "e.jsonl")
    notifier = EventNotifier([sink])

    notifier.close()
    notifier.close()


def test_close_dispatches_queued_events(tmp_path: Path) -> None:
    path = tmp_path / "e.jsonl"
    notifier = EventNotifier([FileRecorderSink(path)])

    notifier.record(OrderReady(order_id=7))
    assert path.read_text(encoding="utf-8") == ""

    notifier.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [{"event_type": "OrderReady", "order_id": 7}]
