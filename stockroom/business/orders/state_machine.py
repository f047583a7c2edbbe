"""
Order status state machine

Encodes which status values exist and what each transition does to stock.
Keeps "what is allowed" separate from "how persistence occurs".
"""

from dataclasses import dataclass
from typing import Set

from stockroom.business.core.errors import InvalidTransition


@dataclass(frozen=True)
class StatusChange:
    """Describes a requested transition and its stock effect"""
    from_status: str
    to_status: str

    @property
    def is_noop(self) -> bool:
        return self.from_status == self.to_status

    @property
    def releases_stock(self) -> bool:
        return (
            self.to_status == OrderStateMachine.CANCELLED
            and self.from_status != OrderStateMachine.CANCELLED
        )

    @property
    def reacquires_stock(self) -> bool:
        return (
            self.from_status == OrderStateMachine.CANCELLED
            and self.to_status != OrderStateMachine.CANCELLED
        )


class OrderStateMachine:
    """
    State machine for Order.status.

    Any status may move to any other status; only the stock side effects
    differ. Cancelling releases stock, leaving `cancelled` takes it again.
    """

    PENDING = 'pending'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

    STATUSES = (PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED)

    # Orders whose sales count as realized (series, product demand)
    REALIZED: Set[str] = {PROCESSING, SHIPPED, DELIVERED}
    # Orders that have left the building (sales report, performance, velocity)
    FULFILLED: Set[str] = {SHIPPED, DELIVERED}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        return from_status in cls.STATUSES and to_status in cls.STATUSES

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> StatusChange:
        """
        Raises:
            InvalidTransition: if either status is not a known order status
        """
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransition(
                f"Invalid order status transition: {from_status} → {to_status}. "
                f"Allowed statuses: {', '.join(cls.STATUSES)}"
            )
        return StatusChange(from_status, to_status)
