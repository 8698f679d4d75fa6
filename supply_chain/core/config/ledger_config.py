"""Ledger configuration model for the replay runtime and embedders."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from supply_chain.core.domain.types import is_zero_identity


class LedgerConfig(BaseModel):
    """Structured ledger configuration.

    JSON example:
        {
          "deployer": "0xowner",
          "enforce_matching_roles": false,
          "initial_balances": {"0xcustomer": 1000},
          "event_log_path": "events.jsonl"
        }
    """

    deployer: str = Field(..., min_length=1)

    # When true, prepare/ready require COOK and deliver requires DELIVERY_MAN.
    enforce_matching_roles: bool = False

    # Seed balances for the in-memory bank.
    initial_balances: dict[str, int] = Field(default_factory=dict)

    event_log_path: str | None = Field(default=None, min_length=1)
    metrics_job: str = Field("supply-chain", min_length=1)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, ledger_obj: dict[str, Any]) -> LedgerConfig:
        """Create a LedgerConfig instance from a JSON-compatible object."""
        return cls.model_validate(ledger_obj)

    @field_validator("deployer")
    @classmethod
    def _deployer_not_zero(cls, value: str) -> str:
        if is_zero_identity(value):
            raise ValueError("deployer cannot be the zero identity")
        return value

    @field_validator("initial_balances")
    @classmethod
    def _balances_valid(cls, value: dict[str, int]) -> dict[str, int]:
        for identity, amount in value.items():
            if is_zero_identity(identity):
                raise ValueError("initial_balances cannot fund the zero identity")
            if amount < 0:
                raise ValueError(f"initial balance for {identity} must be >= 0")
        return value
