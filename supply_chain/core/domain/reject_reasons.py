"""Canonical reject reasons.

The values double as the human-readable error messages surfaced to callers.
"""

from __future__ import annotations


class RejectReason:
    # Authorization
    ONLY_OWNER = "Only owner can call this function"
    ONLY_EMPLOYEE = "Only employees can call this function"
    ONLY_CUSTOMER = "Only the customer of this order can call this function"
    ROLE_NOT_ALLOWED = "Employee role is not allowed to perform this transition"

    # Validation
    EMPLOYEE_ZERO_ADDRESS = "Employee address cannot be zero address"
    COMPANY_WALLET_ZERO_ADDRESS = "Company wallet address cannot be zero address"
    CUSTOMER_ZERO_ADDRESS = "Customer address cannot be zero address"
    PRICE_GREATER_THAN_ZERO = "Price must be greater than 0"
    EMPLOYEE_ROLE = "Employee role is not valid"

    # Not found
    EMPLOYEE_NOT_EXISTS = "Employee does not exist with this address"
    ORDER_NOT_EXISTS = "Order does not exist with this id"

    # State
    ORDER_MUST_BE_PLACED = "Order must be in PLACED status"
    ORDER_MUST_BE_PREPARING = "Order must be in PREPARING status"
    ORDER_MUST_BE_READY = "Order must be in READY status"
    ORDER_MUST_BE_DELIVERING = "Order must be in DELIVERING status"

    # Transfer
    INSUFFICIENT_FUNDS = "Insufficient funds for transfer"
    INVALID_RECIPIENT = "Transfer recipient cannot be zero address"
    NO_ESCROW_HOLD = "No escrow hold exists for this order"
    DUPLICATE_HOLD = "Escrow hold already exists for this order"

    @classmethod
    def order_must_be(cls, status_name: str) -> str:
        return f"Order must be in {status_name} status"
