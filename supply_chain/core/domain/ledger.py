"""Order ledger: order creation and the role-gated status state machine.

Every operation runs as one indivisible unit. Checks happen in a fixed
order (authorization, existence, predecessor status), the new order record
is staged as a copy, and value movement and install happen together under
the ledger lock. A failure at any step leaves the ledger, the registry and
the escrow untouched. Events are recorded before the locks are released and
dispatched to sinks after.
"""

# pylint: disable=too-many-public-methods
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Iterator

from supply_chain.core.domain.errors import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)
from supply_chain.core.domain.order_state_machine import (
    OPERATION_PREDECESSORS,
    is_valid_transition,
    required_status_reason,
)
from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import (
    Amount,
    Employee,
    Identity,
    Order,
    Role,
    Status,
    is_zero_identity,
)
from supply_chain.core.events.events import (
    OrderCancelled,
    OrderCompleted,
    OrderInDelivery,
    OrderPlaced,
    OrderPreparing,
    OrderReady,
)

if TYPE_CHECKING:
    from supply_chain.core.domain.identity_registry import IdentityRegistry
    from supply_chain.core.escrow.escrow_service import EscrowTransferService
    from supply_chain.core.events.event_notifier import EventNotifier

LOGGER = logging.getLogger(__name__)

# Only consulted when matching roles are enforced.
ROLE_REQUIREMENTS: dict[str, Role] = {
    "prepare_order": Role.COOK,
    "ready_order": Role.COOK,
    "deliver_order": Role.DELIVERY_MAN,
}


class OrderLedger:
    """Owns the orders and drives their lifecycle.

    Locking:
    - ``_lock`` guards the order map, ``next_order_id`` and the lock table.
      Escrow holds and payouts run under it together with the record
      change they pay for, so ``snapshot`` never sees one without the other.
      It is never held while waiting on an order lock.
    - one lock per live order id serializes every operation and read on that
      id. It is created at placement and dropped at cancellation; ids that
      never existed get no lock.
    - sinks are dispatched only after both are released.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        escrow: EscrowTransferService,
        notifier: EventNotifier,
        *,
        enforce_matching_roles: bool = False,
    ) -> None:
        self._registry = registry
        self._escrow = escrow
        self._notifier = notifier
        self._enforce_matching_roles = enforce_matching_roles

        self._orders: dict[int, Order] = {}
        self._next_order_id: int = 1
        self._lock = threading.Lock()
        self._order_locks: dict[int, threading.Lock] = {}

    # ---- Collaborators ----
    @property
    def registry(self) -> IdentityRegistry:
        return self._registry

    @property
    def escrow(self) -> EscrowTransferService:
        return self._escrow

    @property
    def notifier(self) -> EventNotifier:
        return self._notifier

    @property
    def next_order_id(self) -> int:
        with self._lock:
            return self._next_order_id

    # ------------------------------------------------------------------
    # Registry entry points
    # ------------------------------------------------------------------

    def update_company_wallet_address(self, caller: Identity, identity: Identity) -> None:
        self._registry.update_company_wallet_address(caller, identity)

    def add_employee(self, caller: Identity, identity: Identity, role: Role | str) -> Employee:
        return self._registry.add_employee(caller, identity, role)

    def remove_employee(self, caller: Identity, identity: Identity) -> None:
        self._registry.remove_employee(caller, identity)

    def is_employee(self, identity: Identity) -> bool:
        return self._registry.is_employee(identity)

    def employees(self, identity: Identity) -> tuple[Identity, Role | None]:
        return self._registry.employees(identity)

    def employee_role_code(self, identity: Identity) -> int:
        return self._registry.employee_role_code(identity)

    def get_owner(self) -> Identity:
        return self._registry.get_owner()

    def get_company_wallet_address(self, caller: Identity) -> Identity:
        return self._registry.get_company_wallet_address(caller)

    # ------------------------------------------------------------------
    # Order lifecycle
    # ------------------------------------------------------------------

    def place_order(self, caller: Identity, amount: Amount) -> int:
        """Create an order paid with ``amount`` and return its id.

        The id is only consumed when the escrow hold succeeds.
        """
        if is_zero_identity(caller):
            raise ValidationError(RejectReason.CUSTOMER_ZERO_ADDRESS, actual=caller)
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError(RejectReason.PRICE_GREATER_THAN_ZERO, actual=amount)

        with self._lock:
            order_id = self._next_order_id
            self._escrow.hold(order_id, amount, payer=caller)

            self._orders[order_id] = Order(
                order_id=order_id,
                customer=caller,
                price=amount,
                status=Status.PLACED,
            )
            self._order_locks[order_id] = threading.Lock()
            self._next_order_id = order_id + 1

            # Recorded under the allocation lock so placements keep id order.
            self._notifier.record(OrderPlaced(order_id=order_id, customer=caller, price=amount))

        self._notifier.flush()
        LOGGER.info(
            "Order placed",
            extra={"order_id": order_id, "customer": caller, "price": amount},
        )
        return order_id

    def prepare_order(self, caller: Identity, order_id: int) -> None:
        with self._locked_order(order_id) as current:
            self._authorize_employee(caller, "prepare_order")
            order = self._require_existing(current, order_id)
            self._require_status(order, "prepare_order")

            self._install(self._stage(order, Status.PREPARING, cook=caller))
            self._notifier.record(OrderPreparing(order_id=order_id, cook=caller))

        self._notifier.flush()
        LOGGER.info("Order preparing", extra={"order_id": order_id, "cook": caller})

    def ready_order(self, caller: Identity, order_id: int) -> None:
        with self._locked_order(order_id) as current:
            self._authorize_employee(caller, "ready_order")
            order = self._require_existing(current, order_id)
            self._require_status(order, "ready_order")

            self._install(self._stage(order, Status.READY))
            self._notifier.record(OrderReady(order_id=order_id))

        self._notifier.flush()
        LOGGER.info("Order ready", extra={"order_id": order_id})

    def deliver_order(self, caller: Identity, order_id: int) -> None:
        with self._locked_order(order_id) as current:
            self._authorize_employee(caller, "deliver_order")
            order = self._require_existing(current, order_id)
            self._require_status(order, "deliver_order")

            self._install(self._stage(order, Status.DELIVERING, delivery_man=caller))
            self._notifier.record(OrderInDelivery(order_id=order_id, delivery_man=caller))

        self._notifier.flush()
        LOGGER.info("Order in delivery", extra={"order_id": order_id, "delivery_man": caller})

    def complete_order(self, caller: Identity, order_id: int) -> None:
        """Mark the order completed and release its price to the company wallet."""
        with self._locked_order(order_id) as current:
            order = self._require_existing(current, order_id)
            self._require_customer(order, caller)
            self._require_status(order, "complete_order")

            staged = self._stage(order, Status.COMPLETED)
            with self._lock:
                # TransferError propagates before anything is installed.
                transfer = self._escrow.release(order_id)
                self._orders[order_id] = staged
            self._notifier.record(OrderCompleted(order_id=order_id))

        self._notifier.flush()
        LOGGER.info(
            "Order completed",
            extra={"order_id": order_id, "to": transfer.to, "amount": transfer.amount},
        )

    def cancel_order(self, caller: Identity, order_id: int) -> None:
        """Refund the customer and remove the order record."""
        with self._locked_order(order_id) as current:
            order = self._require_existing(current, order_id)
            self._require_customer(order, caller)
            self._require_status(order, "cancel_order")

            with self._lock:
                transfer = self._escrow.refund(order_id, to=order.customer)
                del self._orders[order_id]
                # Waiters on the old lock find the record gone.
                del self._order_locks[order_id]
            self._notifier.record(OrderCancelled(order_id=order_id))

        self._notifier.flush()
        LOGGER.info(
            "Order cancelled",
            extra={"order_id": order_id, "to": transfer.to, "amount": transfer.amount},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_order_status(self, order_id: int) -> Status:
        """Return the order status; unknown and cancelled ids read as NOT_EXISTS."""
        with self._locked_order(order_id) as current:
            return Status.NOT_EXISTS if current is None else current.status

    def get_order_price(self, order_id: int) -> Amount:
        return self._read(order_id).price

    def get_order_cook(self, order_id: int) -> Identity | None:
        return self._read(order_id).cook

    def get_order_delivery_man(self, order_id: int) -> Identity | None:
        return self._read(order_id).delivery_man

    def get_order_customer(self, order_id: int) -> Identity:
        return self._read(order_id).customer

    def orders(self, order_id: int) -> Order:
        """Return a copy of the order record."""
        return self._read(order_id)

    def order_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._orders)

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible view of all live orders and the escrow total.

        Both are read under the ledger lock, so every status in the view
        agrees with the value held for it.
        """
        with self._lock:
            orders = [replace(o) for o in self._orders.values()]
            next_order_id = self._next_order_id
            escrow_total = self._escrow.total_held()

        return {
            "next_order_id": next_order_id,
            "orders": {
                str(o.order_id): {
                    "customer": o.customer,
                    "price": o.price,
                    "status": o.status.name,
                    "cook": o.cook,
                    "delivery_man": o.delivery_man,
                }
                for o in sorted(orders, key=lambda o: o.order_id)
            },
            "escrow_total": escrow_total,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _locked_order(self, order_id: int) -> Iterator[Order | None]:
        """Hold the id's lock and yield its current record, or None if absent."""
        with self._lock:
            lock = self._order_locks.get(order_id)
        if lock is None:
            yield None
            return

        with lock:
            with self._lock:
                order = self._orders.get(order_id)
            yield order

    def _read(self, order_id: int) -> Order:
        with self._locked_order(order_id) as current:
            return replace(self._require_existing(current, order_id))

    @staticmethod
    def _require_existing(order: Order | None, order_id: int) -> Order:
        if order is None:
            raise NotFoundError(
                RejectReason.ORDER_NOT_EXISTS,
                order_id=order_id,
                actual=Status.NOT_EXISTS,
            )
        return order

    def _authorize_employee(self, caller: Identity, operation: str) -> None:
        employee = self._registry.require_employee(caller)
        if not self._enforce_matching_roles:
            return

        required = ROLE_REQUIREMENTS[operation]
        if employee.role != required:
            raise AuthorizationError(
                RejectReason.ROLE_NOT_ALLOWED,
                required=required,
                actual=employee.role,
            )

    @staticmethod
    def _require_customer(order: Order, caller: Identity) -> None:
        if caller != order.customer:
            raise AuthorizationError(
                RejectReason.ONLY_CUSTOMER,
                order_id=order.order_id,
                actual=caller,
            )

    @staticmethod
    def _require_status(order: Order, operation: str) -> None:
        required = OPERATION_PREDECESSORS[operation]
        if order.status != required:
            raise StateError(
                required_status_reason(required),
                order_id=order.order_id,
                required=required,
                actual=order.status,
            )

    @staticmethod
    def _stage(order: Order, next_status: Status, **changes: Any) -> Order:
        if not is_valid_transition(order.status, next_status):
            raise StateError(
                required_status_reason(order.status),
                order_id=order.order_id,
                required=next_status,
                actual=order.status,
            )
        return replace(order, status=next_status, **changes)

    def _install(self, staged: Order) -> None:
        with self._lock:
            self._orders[staged.order_id] = staged
