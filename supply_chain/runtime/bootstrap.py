"""Assemble a ledger and its collaborators from a LedgerConfig."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from supply_chain.core.domain.identity_registry import IdentityRegistry
from supply_chain.core.domain.ledger import OrderLedger
from supply_chain.core.escrow.bank import InMemoryBank
from supply_chain.core.escrow.escrow_service import EscrowTransferService
from supply_chain.core.events.event_notifier import EventNotifier
from supply_chain.core.events.sinks.file_recorder import FileRecorderSink
from supply_chain.core.events.sinks.sink_logging import LoggingEventSink

if TYPE_CHECKING:
    from supply_chain.core.config.ledger_config import LedgerConfig
    from supply_chain.core.events.event_sink import EventSink
    from supply_chain.core.ports.value_transport import ValueTransport


def build_event_notifier(
    *,
    event_log_path: str | Path | None,
    extra_sinks: Iterable[EventSink] = (),
) -> EventNotifier:
    logger = logging.getLogger("events")

    sinks: list[EventSink] = [LoggingEventSink(logger)]
    if event_log_path is not None:
        sinks.append(FileRecorderSink(event_log_path))
    sinks.extend(extra_sinks)

    return EventNotifier(sinks)


def build_ledger(
    config: LedgerConfig,
    *,
    transport: ValueTransport | None = None,
    extra_sinks: Iterable[EventSink] = (),
) -> OrderLedger:
    """Deploy a fresh ledger owned by ``config.deployer``.

    Without an explicit transport an InMemoryBank seeded with
    ``config.initial_balances`` is used.
    """
    if transport is None:
        transport = InMemoryBank(config.initial_balances)

    registry = IdentityRegistry(deployer=config.deployer)
    escrow = EscrowTransferService(transport=transport, registry=registry)
    notifier = build_event_notifier(
        event_log_path=config.event_log_path,
        extra_sinks=extra_sinks,
    )

    return OrderLedger(
        registry=registry,
        escrow=escrow,
        notifier=notifier,
        enforce_matching_roles=config.enforce_matching_roles,
    )
