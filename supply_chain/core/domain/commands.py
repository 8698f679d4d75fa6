"""Ledger command models (discriminated union) and dispatch.

Commands are the serialized form of the public entry points. The replay
runtime parses them from JSON; embedders may also call the ledger methods
directly.
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

if TYPE_CHECKING:
    from supply_chain.core.domain.ledger import OrderLedger


class CommandBase(BaseModel):
    """Fields shared by all commands."""

    caller: str = Field(
        ...,
        description="Identity invoking the entry point.",
    )

    model_config = ConfigDict(extra="forbid")


class UpdateCompanyWalletAddressCommand(CommandBase):
    op: Literal["update_company_wallet_address"] = "update_company_wallet_address"
    identity: str


class AddEmployeeCommand(CommandBase):
    op: Literal["add_employee"] = "add_employee"
    identity: str
    # Kept as raw text: role parsing is the ledger's validation concern.
    role: str


class RemoveEmployeeCommand(CommandBase):
    op: Literal["remove_employee"] = "remove_employee"
    identity: str


class PlaceOrderCommand(CommandBase):
    op: Literal["place_order"] = "place_order"
    amount: int = Field(..., description="Value attached to the order.")


class _OrderCommand(CommandBase):
    order_id: int


class PrepareOrderCommand(_OrderCommand):
    op: Literal["prepare_order"] = "prepare_order"


class ReadyOrderCommand(_OrderCommand):
    op: Literal["ready_order"] = "ready_order"


class DeliverOrderCommand(_OrderCommand):
    op: Literal["deliver_order"] = "deliver_order"


class CompleteOrderCommand(_OrderCommand):
    op: Literal["complete_order"] = "complete_order"


class CancelOrderCommand(_OrderCommand):
    op: Literal["cancel_order"] = "cancel_order"


LedgerCommand = Annotated[
    Union[
        UpdateCompanyWalletAddressCommand,
        AddEmployeeCommand,
        RemoveEmployeeCommand,
        PlaceOrderCommand,
        PrepareOrderCommand,
        ReadyOrderCommand,
        DeliverOrderCommand,
        CompleteOrderCommand,
        CancelOrderCommand,
    ],
    Field(discriminator="op"),
]

LEDGER_COMMAND_ADAPTER: TypeAdapter[Any] = TypeAdapter(LedgerCommand)
LEDGER_SCRIPT_ADAPTER: TypeAdapter[Any] = TypeAdapter(list[LedgerCommand])


def parse_command(data: dict[str, Any]) -> Any:
    """Validate a JSON-compatible mapping into a command model."""
    return LEDGER_COMMAND_ADAPTER.validate_python(data)


def parse_script(data: list[dict[str, Any]]) -> list[Any]:
    """Validate a JSON-compatible list of commands."""
    return LEDGER_SCRIPT_ADAPTER.validate_python(data)


# pylint: disable=too-many-return-statements
def dispatch(ledger: OrderLedger, command: Any) -> Any:
    """Invoke the ledger entry point matching ``command.op``.

    Returns whatever the entry point returns (the new order id for
    place_order, the employee record for add_employee, otherwise None).
    """
    op = command.op
    caller = command.caller

    if op == "update_company_wallet_address":
        return ledger.update_company_wallet_address(caller, command.identity)
    if op == "add_employee":
        return ledger.add_employee(caller, command.identity, command.role)
    if op == "remove_employee":
        return ledger.remove_employee(caller, command.identity)
    if op == "place_order":
        return ledger.place_order(caller, command.amount)
    if op == "prepare_order":
        return ledger.prepare_order(caller, command.order_id)
    if op == "ready_order":
        return ledger.ready_order(caller, command.order_id)
    if op == "deliver_order":
        return ledger.deliver_order(caller, command.order_id)
    if op == "complete_order":
        return ledger.complete_order(caller, command.order_id)
    if op == "cancel_order":
        return ledger.cancel_order(caller, command.order_id)

    raise ValueError(f"Unknown command op: {op}")
