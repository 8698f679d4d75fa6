"""
Domain event models.

These events represent immutable facts about committed order transitions.
They are consumed by the event history, loggers, recorders and metrics.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from supply_chain.core.domain.types import Amount, Identity


class _LedgerEvent:
    __slots__ = ()

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"event_type": self.event_type}
        record.update(asdict(self))
        return record


@dataclass(frozen=True, slots=True)
class OrderPlaced(_LedgerEvent):
    order_id: int
    customer: Identity
    price: Amount


@dataclass(frozen=True, slots=True)
class OrderPreparing(_LedgerEvent):
    order_id: int
    cook: Identity


@dataclass(frozen=True, slots=True)
class OrderReady(_LedgerEvent):
    order_id: int


@dataclass(frozen=True, slots=True)
class OrderInDelivery(_LedgerEvent):
    order_id: int
    delivery_man: Identity


@dataclass(frozen=True, slots=True)
class OrderCompleted(_LedgerEvent):
    order_id: int


@dataclass(frozen=True, slots=True)
class OrderCancelled(_LedgerEvent):
    order_id: int


LedgerEvent = (
    OrderPlaced
    | OrderPreparing
    | OrderReady
    | OrderInDelivery
    | OrderCompleted
    | OrderCancelled
)


@dataclass(frozen=True, slots=True)
class EmittedEvent:
    """An event as recorded in the append-only history."""

    seq: int
    event: LedgerEvent
