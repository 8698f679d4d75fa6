"""Schema conformance tests for command models and event records.

Valid commands parsed by Pydantic must dump to instances accepted by the
shipped JSON Schemas; inputs the schemas reject for structural reasons must
be rejected by Pydantic too. Event records written by the recorder must
conform to the event schema.
"""

# pylint: disable=missing-function-docstring,global-statement
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import ValidationError as JsonSchemaValidationError
from jsonschema import validate as jsonschema_validate
from pydantic import ValidationError as PydanticValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from supply_chain.core.domain.commands import (
    AddEmployeeCommand,
    PlaceOrderCommand,
    parse_command,
)
from supply_chain.core.events.events import (
    OrderCancelled,
    OrderCompleted,
    OrderInDelivery,
    OrderPlaced,
    OrderPreparing,
    OrderReady,
)

SCHEMA_REGISTRY = Registry()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_schema(name: str) -> dict:
    """
    Load JSON schema from the package schema directory.
    """
    global SCHEMA_REGISTRY

    root = Path(__file__).parent.parent.parent.parent
    schema_path = root / "supply_chain" / "core" / "schemas" / name

    with schema_path.open("r", encoding="utf-8") as f:
        schema = json.load(f)

    schema_id = schema.get("$id")
    if isinstance(schema_id, str) and schema_id:
        resource = Resource.from_contents(schema, default_specification=DRAFT202012)
        SCHEMA_REGISTRY = SCHEMA_REGISTRY.with_resource(schema_id, resource)

    return schema


def assert_pydantic_then_schema_ok(data: dict[str, Any], schema: dict[str, Any]) -> dict:
    command = parse_command(data)
    instance = command.model_dump(mode="json", exclude_none=True)
    jsonschema_validate(instance=instance, schema=schema, registry=SCHEMA_REGISTRY)
    return instance


def assert_schema_invalid_but_pydantic_rejects(data: dict[str, Any], schema: dict[str, Any]) -> None:
    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=schema, registry=SCHEMA_REGISTRY)

    with pytest.raises(PydanticValidationError):
        parse_command(data)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module", autouse=True)
def _load_common_schema() -> None:
    load_schema("common.schema.json")


@pytest.fixture(scope="module")
def command_schema() -> dict:
    return load_schema("ledger_command.schema.json")


@pytest.fixture(scope="module")
def event_schema() -> dict:
    return load_schema("ledger_event.schema.json")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "data",
    [
        {"op": "update_company_wallet_address", "caller": "0xowner", "identity": "0xwallet"},
        {"op": "add_employee", "caller": "0xowner", "identity": "0xcook", "role": "COOK"},
        {"op": "remove_employee", "caller": "0xowner", "identity": "0xcook"},
        {"op": "place_order", "caller": "0xcustomer", "amount": 100},
        {"op": "prepare_order", "caller": "0xcook", "order_id": 1},
        {"op": "ready_order", "caller": "0xcook", "order_id": 1},
        {"op": "deliver_order", "caller": "0xcourier", "order_id": 1},
        {"op": "complete_order", "caller": "0xcustomer", "order_id": 1},
        {"op": "cancel_order", "caller": "0xcustomer", "order_id": 1},
    ],
    ids=lambda d: d["op"],
)
def test_valid_commands_conform(data: dict[str, Any], command_schema: dict) -> None:
    instance = assert_pydantic_then_schema_ok(data, command_schema)
    assert instance == data


def test_command_types_are_discriminated_by_op() -> None:
    assert isinstance(parse_command({"op": "place_order", "caller": "0xc", "amount": 1}), PlaceOrderCommand)
    assert isinstance(
        parse_command({"op": "add_employee", "caller": "0xo", "identity": "0xe", "role": "COOK"}),
        AddEmployeeCommand,
    )


@pytest.mark.parametrize(
    "data",
    [
        {"op": "teleport_order", "caller": "0xcustomer", "order_id": 1},
        {"op": "place_order", "amount": 100},
        {"op": "prepare_order", "caller": "0xcook"},
        {"op": "cancel_order", "caller": "0xcustomer", "order_id": 1, "reason": "changed mind"},
        {"op": "place_order", "caller": "0xcustomer", "amount": "a lot"},
    ],
)
def test_structurally_invalid_commands_rejected(data: dict[str, Any], command_schema: dict) -> None:
    assert_schema_invalid_but_pydantic_rejects(data, command_schema)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "event",
    [
        OrderPlaced(order_id=1, customer="0xcustomer", price=100),
        OrderPreparing(order_id=1, cook="0xcook"),
        OrderReady(order_id=1),
        OrderInDelivery(order_id=1, delivery_man="0xcourier"),
        OrderCompleted(order_id=1),
        OrderCancelled(order_id=2),
    ],
    ids=lambda e: e.event_type,
)
def test_event_records_conform(event, event_schema: dict) -> None:
    record = event.to_record()
    jsonschema_validate(instance=record, schema=event_schema, registry=SCHEMA_REGISTRY)
    assert record["event_type"] == type(event).__name__


def test_event_schema_rejects_missing_identity(event_schema: dict) -> None:
    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(
            instance={"event_type": "OrderPreparing", "order_id": 1},
            schema=event_schema,
            registry=SCHEMA_REGISTRY,
        )
