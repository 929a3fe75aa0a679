"""
Ordering Service — Order status state machine

State transitions: PENDING → PREPARING → READY → DELIVERED (terminal)

NEXT_STATUS is the only transition table. Both the manual ``advance`` action
and the auto-progression sweep read it; the operator override does not.
"""
from ordering.models.order import OrderStatus


class InvalidTransitionError(ValueError):
    """Raised when an order in a terminal state is asked to advance."""


NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING:   OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY:     OrderStatus.DELIVERED,
}

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset({OrderStatus.DELIVERED})


def is_terminal(status: str) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def next_status(status: str) -> OrderStatus:
    """Return the single allowed successor of ``status``.

    Raises InvalidTransitionError for terminal statuses and ValueError for
    strings that are not a known status.
    """
    current = OrderStatus(status)
    try:
        return NEXT_STATUS[current]
    except KeyError:
        raise InvalidTransitionError(f"Cannot advance order from status '{current.value}'.") from None


def can_advance(src: str, dst: str) -> bool:
    """True if ``dst`` is the table's forward edge out of ``src``."""
    return NEXT_STATUS.get(OrderStatus(src)) == OrderStatus(dst)
