# storefront/services/checkout_service.py
from collections import OrderedDict
from typing import Any, Dict, Iterable

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.cart import Cart
from storefront.domain.checkout import CheckoutAttempt, CheckoutState, FrozenLine
from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    EmptyCartError,
    NotFoundError,
    ProductUnavailable,
    StockConflict,
    StorefrontError,
    ValidationError,
)
from storefront.domain.pricing import accumulate, effective_price, format_price, round_money
from storefront.repos.cart_repo import CartStorage, SqlCartStorage
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.shipping_repo import ShippingMethodRepo
from storefront.services.cart_service import cart_key, user_owner
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import order_to_dict
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def quantities_by_product(lines: Iterable, tracked_only: bool = False) -> "OrderedDict[int, int]":
    """Sum line quantities per product; variants of one product share its stock."""
    totals: "OrderedDict[int, int]" = OrderedDict()
    for line in lines:
        if tracked_only and not line.track_quantity:
            continue
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return totals


class CheckoutService:
    """
    Checkout reconciliation, one attempt at a time:

    STARTED    cart snapshot and shipping method taken
    VALIDATED  every line re-checked against live stock, prices frozen
    COMMITTED  stock decremented, order created, cart lines cleared,
               all in one transaction

    Any failure moves the attempt to FAILED and is raised to the caller.
    Nothing is retried: a retry could silently change what the user buys.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notifier: NotificationService | None = None,
        storage: CartStorage | None = None,
    ):
        self.db = db
        self.storage = storage or SqlCartStorage(db)
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)
        self.shipping = ShippingMethodRepo(db)
        self.lock_service = lock_service
        self.notifier = notifier or NotificationService()

    # =====================================================
    # use case
    # =====================================================
    def checkout(self, user_id: int, shipping_method_id: int | None = None) -> Dict[str, Any]:
        attempt = self.start(user_id, shipping_method_id)
        product_ids = sorted({line.product_id for line in attempt.lines})

        if self.lock_service is not None:
            busy = self.lock_service.acquire_many(
                product_ids, attempt.attempt_id, CHECKOUT_LOCK_TTL_SECONDS
            )
            if busy is not None:
                conflict = StockConflict(busy, self.products.available_quantity(busy))
                attempt.fail(conflict)
                raise conflict

        try:
            self.validate(attempt)
            order = self.commit(attempt)
        finally:
            if self.lock_service is not None:
                self.lock_service.release_many(product_ids, attempt.attempt_id)

        return order_to_dict(order)

    # =====================================================
    # steps
    # =====================================================
    def start(self, user_id: int, shipping_method_id: int | None = None) -> CheckoutAttempt:
        owner = user_owner(user_id)
        cart = Cart.from_dict(self.storage.get(cart_key(owner)))

        if cart.is_empty():
            raise EmptyCartError()

        method_id = shipping_method_id or cart.shipping_method_id
        if method_id is None:
            raise ValidationError("Shipping method is required", field="shipping_method_id")

        attempt = CheckoutAttempt(
            user_id=user_id,
            owner_key=owner,
            lines=tuple(cart.lines),
            shipping_method_id=method_id,
            cart_version=self.storage.version_of(cart_key(owner)),
        )
        logger.info(
            f"Checkout {attempt.attempt_id} STARTED for user {user_id}: "
            f"{len(attempt.lines)} lines, shipping method {method_id}"
        )
        return attempt

    def validate(self, attempt: CheckoutAttempt) -> CheckoutAttempt:
        attempt.require(CheckoutState.STARTED)

        try:
            method = self.shipping.get_active(attempt.shipping_method_id)
            if method is None:
                raise NotFoundError("Shipping method", attempt.shipping_method_id)

            products = self.products.get_products(line.product_id for line in attempt.lines)

            frozen = []
            for line in attempt.lines:
                product = products.get(line.product_id)
                if product is None or not product.active:
                    raise ProductUnavailable(line.product_id)
                frozen.append(
                    FrozenLine(
                        product_id=product.id,
                        product_name=product.name,
                        size=line.size,
                        color=line.color,
                        quantity=line.quantity,
                        unit_price=effective_price(product),
                        track_quantity=product.track_quantity,
                    )
                )

            for product_id, requested in quantities_by_product(frozen, tracked_only=True).items():
                available = products[product_id].available_quantity
                if requested > available:
                    raise StockConflict(product_id, available)

        except StorefrontError as e:
            attempt.fail(e)
            logger.warning(f"Checkout {attempt.attempt_id} FAILED during validation: {e.message}")
            raise

        subtotal = accumulate(line.amount for line in frozen)

        attempt.frozen_lines = frozen
        attempt.shipping_method_name = method.name
        attempt.shipping_cost = round_money(method.cost)
        attempt.subtotal = round_money(subtotal)
        attempt.total = round_money(subtotal + method.cost)
        attempt.advance(CheckoutState.VALIDATED)

        logger.info(
            f"Checkout {attempt.attempt_id} VALIDATED: subtotal {attempt.subtotal}, "
            f"shipping {attempt.shipping_cost}, total {attempt.total}"
        )
        return attempt

    def commit(self, attempt: CheckoutAttempt) -> OrderModel:
        attempt.require(CheckoutState.VALIDATED)

        decrements = quantities_by_product(attempt.frozen_lines, tracked_only=True)
        depleted = None

        try:
            for product_id in sorted(decrements):
                if not self.products.decrement_stock(product_id, decrements[product_id]):
                    depleted = product_id
                    break

            if depleted is None:
                order = self.orders.create_order(
                    user_id=attempt.user_id,
                    lines=attempt.frozen_lines,
                    shipping_method_id=attempt.shipping_method_id,
                    shipping_method_name=attempt.shipping_method_name,
                    subtotal=attempt.subtotal,
                    shipping_cost=attempt.shipping_cost,
                    total=attempt.total,
                )
                self._clear_cart(attempt)
                self.db.commit()
        except ConcurrentUpdateError as e:
            self.db.rollback()
            self.storage.forget()
            attempt.fail(e)
            logger.warning(f"Checkout {attempt.attempt_id} FAILED: cart changed since it was read")
            raise
        except Exception as e:
            self.db.rollback()
            self.storage.forget()
            attempt.fail(e)
            logger.error(f"Checkout {attempt.attempt_id} FAILED during commit: {e}")
            raise

        if depleted is not None:
            #undo decrements already applied, then report the live stock
            self.db.rollback()
            self.storage.forget()
            conflict = StockConflict(depleted, self.products.available_quantity(depleted))
            attempt.fail(conflict)
            logger.warning(
                f"Checkout {attempt.attempt_id} FAILED: product {depleted} depleted concurrently, "
                f"{conflict.available} left"
            )
            raise conflict

        attempt.order_id = order.id
        attempt.advance(CheckoutState.COMMITTED)
        logger.info(
            f"Checkout {attempt.attempt_id} COMMITTED: order {order.id} ({order.order_number}), "
            f"total {format_price(attempt.total)}"
        )

        self.notifier.send_order_notification(attempt.user_id, order.id, order.status)
        return order

    def _clear_cart(self, attempt: CheckoutAttempt) -> None:
        """
        The attempt holds every line of the cart as read in start(), so the
        cart left behind is empty. The write is checked against that read:
        a cart edited or checked out by another request since then raises
        ConcurrentUpdateError and the whole commit is rolled back.
        """
        self.storage.set(
            cart_key(attempt.owner_key),
            Cart().to_dict(),
            expected_version=attempt.cart_version,
        )
