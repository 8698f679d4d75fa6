"""Escrow custody of the value attached to an order.

Holds are recorded per order id. Release and refund pay out first and clear
the hold only once the payout succeeded, so a failed transfer leaves the
escrow exactly as it was.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from supply_chain.core.domain.errors import NotFoundError, TransferError
from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import Amount, Identity

if TYPE_CHECKING:
    from supply_chain.core.domain.identity_registry import IdentityRegistry
    from supply_chain.core.ports.value_transport import ValueTransport

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Transfer:
    """Receipt of a completed payout."""

    order_id: int
    to: Identity
    amount: Amount


class EscrowTransferService:
    """Custodies order value until release to the company wallet or refund."""

    def __init__(self, transport: ValueTransport, registry: IdentityRegistry) -> None:
        self._transport = transport
        self._registry = registry
        self._holdings: dict[int, Amount] = {}
        self._lock = threading.Lock()

    @property
    def transport(self) -> ValueTransport:
        return self._transport

    def hold(self, order_id: int, amount: Amount, payer: Identity) -> None:
        """Take ``amount`` from ``payer`` and earmark it for ``order_id``."""
        with self._lock:
            if order_id in self._holdings:
                raise TransferError(RejectReason.DUPLICATE_HOLD, order_id=order_id)

            # Raises TransferError without side effects on failure.
            self._transport.debit(payer, amount)
            self._holdings[order_id] = amount

        LOGGER.info(
            "Escrow hold",
            extra={"order_id": order_id, "amount": amount, "payer": payer},
        )

    def release(self, order_id: int, to: Identity | None = None) -> Transfer:
        """Pay the held amount to ``to``, defaulting to the company wallet."""
        recipient = self._registry.company_wallet if to is None else to
        return self._pay_out(order_id, recipient, action="release")

    def refund(self, order_id: int, to: Identity) -> Transfer:
        """Pay the held amount back to ``to`` (the customer)."""
        return self._pay_out(order_id, to, action="refund")

    def _pay_out(self, order_id: int, to: Identity, *, action: str) -> Transfer:
        with self._lock:
            amount = self._holdings.get(order_id)
            if amount is None:
                raise NotFoundError(RejectReason.NO_ESCROW_HOLD, order_id=order_id)

            self._transport.credit(to, amount)
            del self._holdings[order_id]

        LOGGER.info(
            "Escrow %s",
            action,
            extra={"order_id": order_id, "amount": amount, "to": to},
        )
        return Transfer(order_id=order_id, to=to, amount=amount)

    # ---- Reads ----
    def held_amount(self, order_id: int) -> Amount:
        with self._lock:
            return self._holdings.get(order_id, 0)

    def total_held(self) -> Amount:
        with self._lock:
            return sum(self._holdings.values())
