"""
Sink that writes every ledger event to a stdlib logger.
"""
from __future__ import annotations

import logging

from supply_chain.core.events.events import LedgerEvent


class LoggingEventSink:
    """Logs each event at INFO with its type, order id and payload as extras."""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self._logger = logger
        self._level = level

    def on_event(self, event: LedgerEvent) -> None:
        self._logger.log(
            self._level,
            "Ledger event %s for order %s",
            event.event_type,
            event.order_id,
            extra={
                "event_type": event.event_type,
                "order_id": event.order_id,
                "payload": event.to_record(),
            },
        )
