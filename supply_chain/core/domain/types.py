"""Core shared domain types.

Identities, roles, order statuses and the internal order/employee records
used by the registry, the ledger and the escrow service.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from supply_chain.core.domain.errors import ValidationError
from supply_chain.core.domain.reject_reasons import RejectReason

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

# Opaque principal reference (an address in the original deployment).
Identity = str

ZERO_IDENTITY: Identity = "0x" + "0" * 40

# Attached value, in the smallest indivisible unit.
Amount = int


def is_zero_identity(identity: Identity | None) -> bool:
    """Return True if the identity is missing, blank or an all-zero address."""
    if identity is None:
        return True
    text = str(identity).strip()
    if not text:
        return True
    if text[:2].lower() == "0x":
        digits = text[2:]
        return digits == "" or set(digits) == {"0"}
    return False


# ---------------------------------------------------------------------------
# Role / Status
# ---------------------------------------------------------------------------


class Role(str, Enum):
    COOK = "COOK"
    DELIVERY_MAN = "DELIVERY_MAN"
    CUSTOMER = "CUSTOMER"

    @property
    def code(self) -> int:
        """Numeric role code. ``NO_ROLE_CODE`` (0) stands for "not an employee"."""
        return _ROLE_CODES[self]

    @classmethod
    def parse(cls, tag: Role | str) -> Role:
        """Parse a textual role tag.

        Only the exact tags are accepted. Anything else is a ValidationError,
        never coerced to a default role.
        """
        if isinstance(tag, Role):
            return tag
        if isinstance(tag, str):
            for role in cls:
                if role.value == tag:
                    return role
        raise ValidationError(RejectReason.EMPLOYEE_ROLE, actual=tag)


NO_ROLE_CODE = 0
_ROLE_CODES = {Role.COOK: 1, Role.DELIVERY_MAN: 2, Role.CUSTOMER: 3}


class Status(IntEnum):
    NOT_EXISTS = 0
    PLACED = 1
    PREPARING = 2
    READY = 3
    DELIVERING = 4
    COMPLETED = 5


# ---------------------------------------------------------------------------
# Records
#
# Internal state. Callers outside the ledger only ever receive copies.
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Employee:
    identity: Identity
    role: Role


@dataclass(slots=True)
class Order:
    order_id: int
    customer: Identity
    price: Amount
    status: Status = Status.PLACED

    # Set exactly once, by prepare_order / deliver_order respectively.
    cook: Identity | None = None
    delivery_man: Identity | None = None
