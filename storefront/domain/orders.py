# storefront/domain/orders.py
from enum import Enum

from storefront.domain.exceptions import InvalidStatusTransition


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


_ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),
    PaymentStatus.REFUNDED: set(),
}


def ensure_order_transition(current, target) -> OrderStatus:
    current, target = OrderStatus(current), OrderStatus(target)
    if target not in _ORDER_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)
    return target


def ensure_payment_transition(current, target) -> PaymentStatus:
    current, target = PaymentStatus(current), PaymentStatus(target)
    if target not in _PAYMENT_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)
    return target
