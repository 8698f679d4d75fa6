"""
Semantic test: ledger configuration validation.

Invariant:
LedgerConfig rejects unknown keys, a zero deployer and negative or
zero-identity balances; a valid config deploys a ledger owned by the
deployer with the configured balances.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from supply_chain.core.config.ledger_config import LedgerConfig
from supply_chain.core.domain.types import ZERO_IDENTITY
from supply_chain.runtime.bootstrap import build_ledger


def test_from_json_obj_applies_defaults() -> None:
    cfg = LedgerConfig.from_json_obj({"deployer": "0xowner"})

    assert cfg.enforce_matching_roles is False
    assert cfg.initial_balances == {}
    assert cfg.event_log_path is None
    assert cfg.metrics_job == "supply-chain"


@pytest.mark.parametrize(
    "obj",
    [
        {"deployer": ZERO_IDENTITY},
        {"deployer": ""},
        {"deployer": "0xowner", "unexpected": 1},
        {"deployer": "0xowner", "initial_balances": {"0xcustomer": -5}},
        {"deployer": "0xowner", "initial_balances": {ZERO_IDENTITY: 5}},
    ],
)
def test_invalid_config_is_rejected(obj: dict) -> None:
    with pytest.raises(PydanticValidationError):
        LedgerConfig.from_json_obj(obj)


def test_config_deploys_owned_ledger() -> None:
    cfg = LedgerConfig.from_json_obj(
        {"deployer": "0xowner", "initial_balances": {"0xcustomer": 30}}
    )

    ledger = build_ledger(cfg)

    assert ledger.get_owner() == "0xowner"
    assert ledger.get_company_wallet_address("0xowner") == "0xowner"
    assert ledger.escrow.transport.balance_of("0xcustomer") == 30
    assert ledger.next_order_id == 1
