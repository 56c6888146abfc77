from decimal import Decimal

import pytest

from storefront.domain.exceptions import InvalidStatusTransition, NotFoundError
from storefront.domain.orders import OrderStatus, ensure_order_transition
from storefront.domain.schemas import UserCreate
from storefront.services.cart_service import CartService, user_owner
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, status):
        self.sent.append((user_id, order_id, status))


@pytest.fixture
def placed_order(db, user, make_product, make_shipping):
    """A PENDING order for 2 pcs of a tracked product (5 in stock before)."""
    product = make_product(available_quantity=5)
    method = make_shipping()
    CartService(db).add_item(user_owner(user.id), product.id, "M", "red", 2)
    order = CheckoutService(db, notifier=FakeNotifier()).checkout(user.id, method.id)
    return order, product


def test_status_workflow():
    assert ensure_order_transition("PENDING", "PROCESSING") is OrderStatus.PROCESSING
    assert ensure_order_transition("SHIPPED", "CANCELLED") is OrderStatus.CANCELLED

    with pytest.raises(InvalidStatusTransition):
        ensure_order_transition("PENDING", "DELIVERED")
    with pytest.raises(InvalidStatusTransition):
        ensure_order_transition("CANCELLED", "PENDING")


def test_cancel_puts_stock_back(db, placed_order):
    order, product = placed_order
    db.refresh(product)
    assert product.available_quantity == 3

    notifier = FakeNotifier()
    updated = OrderService(db, notifier=notifier).update_status(order["id"], OrderStatus.CANCELLED)

    assert updated["status"] == "CANCELLED"
    db.refresh(product)
    assert product.available_quantity == 5
    assert notifier.sent == [(order["user_id"], order["id"], "CANCELLED")]


def test_cancel_skips_lines_untracked_at_checkout(db, user, make_product, make_shipping):
    product = make_product(track_quantity=False, available_quantity=0, sizes=(), colors=())
    method = make_shipping()
    CartService(db).add_item(user_owner(user.id), product.id, "", "", 4)
    order = CheckoutService(db, notifier=FakeNotifier()).checkout(user.id, method.id)

    #tracking switched on after the order was placed
    product.track_quantity = True
    product.available_quantity = 5
    db.commit()

    OrderService(db, notifier=FakeNotifier()).update_status(order["id"], OrderStatus.CANCELLED)

    db.refresh(product)
    assert product.available_quantity == 5


def test_delivered_order_cannot_be_cancelled(db, placed_order):
    order, product = placed_order
    service = OrderService(db, notifier=FakeNotifier())
    for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
        service.update_status(order["id"], status)

    with pytest.raises(InvalidStatusTransition):
        service.update_status(order["id"], OrderStatus.CANCELLED)

    db.refresh(product)
    assert product.available_quantity == 3


def test_orders_are_private_to_owner(db, user, admin, placed_order):
    order, _ = placed_order
    stranger = UserService(db).get_user(
        UserService(db).register(UserCreate(email="x@example.com", name="X", password="stranger-1")).id
    )
    service = OrderService(db)

    assert service.get_order(order["id"], user)["total"] == order["total"]
    assert service.get_order(order["id"], admin)["id"] == order["id"]
    with pytest.raises(PermissionError):
        service.get_order(order["id"], stranger)
    with pytest.raises(NotFoundError):
        service.get_order(999, admin)


def test_listing_is_paginated(db, user, admin, make_product, make_shipping):
    product = make_product(available_quantity=10)
    method = make_shipping()
    for _ in range(3):
        CartService(db).add_item(user_owner(user.id), product.id, "M", "red", 1)
        CheckoutService(db, notifier=FakeNotifier()).checkout(user.id, method.id)

    page = OrderService(db).list_orders(user, page=1, limit=2)

    assert len(page["orders"]) == 2
    assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}
    assert OrderService(db).list_orders(admin, page=1, limit=10, user_id=admin.id)["pagination"]["total"] == 0
    assert OrderService(db).list_orders(admin, page=1, limit=10)["pagination"]["total"] == 3
    assert all(o["total"] > Decimal("0") for o in page["orders"])
