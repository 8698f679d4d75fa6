"""In-memory balances implementing the ValueTransport protocol."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Mapping

from supply_chain.core.domain.errors import TransferError, ValidationError
from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import Amount, Identity, is_zero_identity


class InMemoryBank:
    """Lock-protected balance map with a custody account.

    Debits move value into custody, credits pay it back out. Custody can
    never go negative, so a credit is only possible for value previously
    debited.
    """

    def __init__(self, balances: Mapping[Identity, Amount] | None = None) -> None:
        self._balances: dict[Identity, Amount] = defaultdict(int)
        self._custody: Amount = 0
        self._lock = threading.Lock()

        for identity, amount in (balances or {}).items():
            self.deposit(identity, amount)

    def deposit(self, identity: Identity, amount: Amount) -> None:
        """Seed ``identity`` with external funds."""
        if is_zero_identity(identity):
            raise ValidationError(RejectReason.INVALID_RECIPIENT, actual=identity)
        if amount < 0:
            raise ValidationError(RejectReason.PRICE_GREATER_THAN_ZERO, actual=amount)
        with self._lock:
            self._balances[identity] += amount

    def debit(self, identity: Identity, amount: Amount) -> None:
        with self._lock:
            available = self._balances.get(identity, 0)
            if amount > available:
                raise TransferError(
                    RejectReason.INSUFFICIENT_FUNDS,
                    required=amount,
                    actual=available,
                )
            self._balances[identity] = available - amount
            self._custody += amount

    def credit(self, identity: Identity, amount: Amount) -> None:
        if is_zero_identity(identity):
            raise TransferError(RejectReason.INVALID_RECIPIENT, actual=identity)
        with self._lock:
            if amount > self._custody:
                raise TransferError(
                    RejectReason.INSUFFICIENT_FUNDS,
                    required=amount,
                    actual=self._custody,
                )
            self._custody -= amount
            self._balances[identity] += amount

    def balance_of(self, identity: Identity) -> Amount:
        with self._lock:
            return self._balances.get(identity, 0)

    @property
    def custody(self) -> Amount:
        with self._lock:
            return self._custody

    def snapshot(self) -> dict[Identity, Amount]:
        with self._lock:
            return {k: v for k, v in self._balances.items() if v}
