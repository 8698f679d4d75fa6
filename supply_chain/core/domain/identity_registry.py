"""Owner, company wallet and employee bookkeeping.

The registry is the only authority consulted by authorization checks.
"""

from __future__ import annotations

import logging
import threading

from supply_chain.core.domain.errors import AuthorizationError, NotFoundError, ValidationError
from supply_chain.core.domain.reject_reasons import RejectReason
from supply_chain.core.domain.types import (
    NO_ROLE_CODE,
    ZERO_IDENTITY,
    Employee,
    Identity,
    Role,
    is_zero_identity,
)

LOGGER = logging.getLogger(__name__)


class IdentityRegistry:
    """Tracks the owner, the payout identity and the employee roster.

    owner and company wallet both start as the deployer identity.
    """

    def __init__(self, deployer: Identity) -> None:
        if is_zero_identity(deployer):
            raise ValidationError(RejectReason.COMPANY_WALLET_ZERO_ADDRESS, actual=deployer)

        self._owner: Identity = deployer
        self._company_wallet: Identity = deployer
        self._employees: dict[Identity, Employee] = {}
        self._lock = threading.RLock()

    # ---- Guards ----
    def require_owner(self, caller: Identity) -> None:
        if caller != self._owner:
            raise AuthorizationError(RejectReason.ONLY_OWNER, actual=caller)

    def require_employee(self, caller: Identity) -> Employee:
        with self._lock:
            employee = self._employees.get(caller)
        if employee is None:
            raise AuthorizationError(RejectReason.ONLY_EMPLOYEE, actual=caller)
        return employee

    # ---- Owner-only mutations ----
    def update_company_wallet_address(self, caller: Identity, identity: Identity) -> None:
        with self._lock:
            self.require_owner(caller)
            if is_zero_identity(identity):
                raise ValidationError(RejectReason.COMPANY_WALLET_ZERO_ADDRESS, actual=identity)

            previous = self._company_wallet
            self._company_wallet = identity

        LOGGER.info(
            "Company wallet updated",
            extra={"previous": previous, "company_wallet": identity},
        )

    def add_employee(self, caller: Identity, identity: Identity, role: Role | str) -> Employee:
        """Insert or overwrite the employee record for ``identity``."""
        with self._lock:
            self.require_owner(caller)
            if is_zero_identity(identity):
                raise ValidationError(RejectReason.EMPLOYEE_ZERO_ADDRESS, actual=identity)
            parsed = Role.parse(role)

            previous = self._employees.get(identity)
            employee = Employee(identity=identity, role=parsed)
            self._employees[identity] = employee

        if previous is not None and previous.role != parsed:
            LOGGER.info(
                "Employee role overwritten",
                extra={"employee": identity, "previous_role": previous.role.value, "role": parsed.value},
            )
        else:
            LOGGER.info("Employee added", extra={"employee": identity, "role": parsed.value})
        return employee

    def remove_employee(self, caller: Identity, identity: Identity) -> None:
        with self._lock:
            self.require_owner(caller)
            if is_zero_identity(identity):
                raise ValidationError(RejectReason.EMPLOYEE_ZERO_ADDRESS, actual=identity)
            if identity not in self._employees:
                raise NotFoundError(RejectReason.EMPLOYEE_NOT_EXISTS, actual=identity)

            del self._employees[identity]

        LOGGER.info("Employee removed", extra={"employee": identity})

    # ---- Reads ----
    def is_employee(self, identity: Identity) -> bool:
        with self._lock:
            return identity in self._employees

    def employees(self, identity: Identity) -> tuple[Identity, Role | None]:
        """Return ``(identity, role)``, or ``(ZERO_IDENTITY, None)`` when absent."""
        with self._lock:
            employee = self._employees.get(identity)
        if employee is None:
            return ZERO_IDENTITY, None
        return employee.identity, employee.role

    def employee_role_code(self, identity: Identity) -> int:
        """Numeric form of the role, ``NO_ROLE_CODE`` when not an employee."""
        _, role = self.employees(identity)
        return NO_ROLE_CODE if role is None else role.code

    def get_owner(self) -> Identity:
        return self._owner

    def get_company_wallet_address(self, caller: Identity) -> Identity:
        self.require_owner(caller)
        return self._company_wallet

    @property
    def company_wallet(self) -> Identity:
        """Payout identity for internal use (no caller check)."""
        with self._lock:
            return self._company_wallet
