"""Public API for the supply_chain package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Ledger API
# ----------------------------------------------------------------------
from supply_chain.core.domain.identity_registry import IdentityRegistry
from supply_chain.core.domain.ledger import OrderLedger
from supply_chain.core.escrow.bank import InMemoryBank
from supply_chain.core.escrow.escrow_service import EscrowTransferService, Transfer

# ----------------------------------------------------------------------
# Domain Types and Errors
# ----------------------------------------------------------------------
from supply_chain.core.domain.errors import (
    AuthorizationError,
    NotFoundError,
    StateError,
    SupplyChainError,
    TransferError,
    ValidationError,
)
from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import (
    NO_ROLE_CODE,
    ZERO_IDENTITY,
    Employee,
    Order,
    Role,
    Status,
)

# ----------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------
from supply_chain.core.events.event_notifier import EventNotifier
from supply_chain.core.events.events import (
    EmittedEvent,
    OrderCancelled,
    OrderCompleted,
    OrderInDelivery,
    OrderPlaced,
    OrderPreparing,
    OrderReady,
)

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from supply_chain.core.config.ledger_config import LedgerConfig
from supply_chain.runtime.bootstrap import build_ledger

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Ledger
    "OrderLedger",
    "IdentityRegistry",
    "EscrowTransferService",
    "InMemoryBank",
    "Transfer",
    "build_ledger",

    # Config
    "LedgerConfig",

    # Domain
    "Role",
    "Status",
    "Order",
    "Employee",
    "ZERO_IDENTITY",
    "NO_ROLE_CODE",
    "RejectReason",

    # Errors
    "SupplyChainError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "StateError",
    "TransferError",

    # Events
    "EventNotifier",
    "EmittedEvent",
    "OrderPlaced",
    "OrderPreparing",
    "OrderReady",
    "OrderInDelivery",
    "OrderCompleted",
    "OrderCancelled",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("supply-chain")
except PackageNotFoundError:
    __version__ = "0.0.0"
