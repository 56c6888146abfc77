from decimal import Decimal

import pytest

from storefront.domain.exceptions import InvalidStatusTransition, ValidationError
from storefront.domain.orders import OrderStatus, PaymentStatus
from storefront.services.cart_service import CartService, user_owner
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService


class FakeNotifier:
    def send_order_notification(self, user_id, order_id, status):
        pass


@pytest.fixture
def order(db, user, make_product, make_shipping):
    product = make_product(base_price="500.00")
    method = make_shipping(cost="100.00")
    CartService(db).add_item(user_owner(user.id), product.id, "M", "red", 2)
    return CheckoutService(db, notifier=FakeNotifier()).checkout(user.id, method.id)


def test_amount_defaults_to_order_total(db, user, order):
    payment = PaymentService(db).create_payment(user, order["id"])

    assert payment["amount"] == Decimal("1100.00")
    assert payment["status"] == "PENDING"


def test_payment_status_workflow(db, user, order):
    service = PaymentService(db)
    payment = service.create_payment(user, order["id"], amount=Decimal("1100.00"))

    done = service.update_status(payment["id"], PaymentStatus.COMPLETED, transaction_id="tx-1")
    assert done["status"] == "COMPLETED"
    assert done["transaction_id"] == "tx-1"

    with pytest.raises(InvalidStatusTransition):
        service.update_status(payment["id"], PaymentStatus.FAILED)


def test_cancelled_order_cannot_be_paid(db, user, order):
    OrderService(db, notifier=FakeNotifier()).update_status(order["id"], OrderStatus.CANCELLED)

    with pytest.raises(ValidationError):
        PaymentService(db).create_payment(user, order["id"])


def test_listing_is_scoped_to_owner(db, user, admin, order):
    PaymentService(db).create_payment(user, order["id"])

    assert len(PaymentService(db).list_payments(user)) == 1
    assert len(PaymentService(db).list_payments(admin, order_id=order["id"])) == 1
