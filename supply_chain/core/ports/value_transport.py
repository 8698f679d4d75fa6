"""Value transport protocol for escrow custody.

This module defines the boundary the escrow service uses to move value.
Concrete implementations adapt a bank, a payment provider or a ledger of
balances to this protocol.
"""

from __future__ import annotations

from typing import Protocol

from supply_chain.core.domain.types import Amount, Identity


class ValueTransport(Protocol):
    """Moves value between identities and the escrow custody account.

    Implementations raise TransferError on any failure and must leave
    balances unchanged when they do.
    """

    def debit(self, identity: Identity, amount: Amount) -> None:
        """Take ``amount`` from ``identity`` into custody."""

    def credit(self, identity: Identity, amount: Amount) -> None:
        """Pay ``amount`` out of custody to ``identity``."""

    def balance_of(self, identity: Identity) -> Amount:
        """Return the spendable balance of ``identity``."""
