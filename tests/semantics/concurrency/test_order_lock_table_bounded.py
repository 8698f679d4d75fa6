"""
Semantic test: per-order locks exist only for live orders.

Invariant:
Reading or operating on ids that were never placed allocates no lock, and
cancelling an order drops its lock.
"""

# pylint: disable=protected-access
from __future__ import annotations

import pytest

from supply_chain.core.config.ledger_config import LedgerConfig
from supply_chain.core.domain.errors import NotFoundError
from supply_chain.core.domain.types import Role, Status
from supply_chain.runtime.bootstrap import build_ledger

OWNER = "0xowner"
CUSTOMER = "0xcustomer"
COOK = "0xcook"


def _deploy():
    ledger = build_ledger(
        LedgerConfig(deployer=OWNER, initial_balances={CUSTOMER: 1_000})
    )
    ledger.add_employee(OWNER, COOK, Role.COOK)
    return ledger


def test_reads_of_unknown_ids_allocate_no_locks() -> None:
    ledger = _deploy()

    for order_id in range(1, 5_001):
        assert ledger.get_order_status(order_id) == Status.NOT_EXISTS
        with pytest.raises(NotFoundError):
            ledger.get_order_price(order_id)
        with pytest.raises(NotFoundError):
            ledger.prepare_order(COOK, order_id)

    assert ledger._order_locks == {}


def test_cancel_drops_the_order_lock() -> None:
    ledger = _deploy()
    ledger.place_order(CUSTOMER, 100)
    ledger.place_order(CUSTOMER, 100)
    assert set(ledger._order_locks) == {1, 2}

    ledger.cancel_order(CUSTOMER, 1)

    assert set(ledger._order_locks) == {2}
    assert ledger.get_order_status(1) == Status.NOT_EXISTS
    assert set(ledger._order_locks) == {2}
