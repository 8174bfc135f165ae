from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


_ALLOWED: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
}


class InvalidStatusTransitionError(Exception):
    def __init__(self, current: OrderStatus, requested: OrderStatus) -> None:
        super().__init__(f"Cannot move order from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError as e:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValueError(f"Unknown order status {value!r}. Expected one of: {allowed}") from e


def check_transition(current: OrderStatus, requested: OrderStatus) -> None:
    if current == requested:
        return
    if requested not in _ALLOWED[current]:
        raise InvalidStatusTransitionError(current, requested)


def is_terminal(status: OrderStatus) -> bool:
    return not _ALLOWED[status]
