"""Error taxonomy.

Every failed operation raises exactly one of these and leaves ledger,
registry and escrow state unchanged.
"""

from __future__ import annotations

from typing import Any


class SupplyChainError(Exception):
    """Base class for all rejected operations."""

    def __init__(
        self,
        reason: str,
        *,
        order_id: int | None = None,
        required: Any = None,
        actual: Any = None,
    ) -> None:
        self.reason = reason
        self.order_id = order_id
        self.required = required
        self.actual = actual
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.reason]
        if self.order_id is not None:
            parts.append(f"order_id={self.order_id}")
        if self.required is not None:
            parts.append(f"required={_display(self.required)}")
        if self.actual is not None:
            parts.append(f"actual={_display(self.actual)}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "reason": self.reason,
            "order_id": self.order_id,
            "required": _display(self.required),
            "actual": _display(self.actual),
        }


class AuthorizationError(SupplyChainError):
    """Caller lacks the required ownership, employment or order ownership."""


class ValidationError(SupplyChainError):
    """Zero identity, non-positive amount or unparseable role."""


class NotFoundError(SupplyChainError):
    """Referenced order or employee does not exist."""


class StateError(SupplyChainError):
    """Order exists but is not in the required predecessor status."""


class TransferError(SupplyChainError):
    """Value movement failed."""


def _display(value: Any) -> Any:
    # Enums render by name so messages read "PLACED", not "Status.PLACED".
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return value
