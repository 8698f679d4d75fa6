"""
Order lifecycle state machine definitions.

This module defines the allowed status transitions of an order and the
predecessor status each ledger operation requires. It is passive: the
ledger consults it, it never mutates anything itself.
"""

from __future__ import annotations

from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import Status

# Terminal statuses: once reached, no operation may move the order again.
# NOT_EXISTS is terminal only for an id that was cancelled; a fresh id is
# created directly in PLACED by place_order.
ORDER_TERMINAL_STATES: frozenset[Status] = frozenset(
    {
        Status.COMPLETED,
        Status.NOT_EXISTS,
    }
)


# Allowed order status transitions.
#
# Key   : previous status
# Value : set of allowed next statuses
#
# Notes:
# - The forward path is strictly linear.
# - PLACED -> NOT_EXISTS is the cancellation escape; the record is removed.
ORDER_ALLOWED_TRANSITIONS: dict[Status, frozenset[Status]] = {
    Status.NOT_EXISTS: frozenset({Status.PLACED}),

    Status.PLACED: frozenset(
        {
            Status.PREPARING,
            Status.NOT_EXISTS,
        }
    ),

    Status.PREPARING: frozenset({Status.READY}),

    Status.READY: frozenset({Status.DELIVERING}),

    Status.DELIVERING: frozenset({Status.COMPLETED}),
}


# Required predecessor status per transition operation.
OPERATION_PREDECESSORS: dict[str, Status] = {
    "prepare_order": Status.PLACED,
    "ready_order": Status.PREPARING,
    "deliver_order": Status.READY,
    "complete_order": Status.DELIVERING,
    "cancel_order": Status.PLACED,
}


def is_terminal_state(status: Status) -> bool:
    """Return True if the given status is terminal."""
    return status in ORDER_TERMINAL_STATES


def is_valid_transition(prev_status: Status, next_status: Status) -> bool:
    """Return True if the transition prev_status -> next_status is allowed."""
    allowed = ORDER_ALLOWED_TRANSITIONS.get(prev_status)
    if allowed is None:
        return False
    return next_status in allowed


def required_status_reason(required: Status) -> str:
    """Reject reason for an order that is not in the required status."""
    return RejectReason.order_must_be(required.name)
