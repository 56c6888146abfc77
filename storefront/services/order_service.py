# storefront/services/order_service.py
import math
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import NotFoundError
from storefront.domain.orders import OrderStatus, ensure_order_transition
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "status": order.status,
        "shipping_method_id": order.shipping_method_id,
        "shipping_method_name": order.shipping_method_name,
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "total": order.total,
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "size": item.size,
                "color": item.color,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
            }
            for item in order.items
        ],
        "created_at": order.created_at,
    }


class OrderService:
    """
    Orders after checkout: reads and the status workflow.
    Orders are created only by the checkout reconciler.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notifier or NotificationService()

    def load_order(self, order_id: int, user: UserModel) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order", order_id)

        if order.user_id != user.id and not user.is_admin:
            raise PermissionError("No access to this order")

        return order

    def get_order(self, order_id: int, user: UserModel) -> Dict[str, Any]:
        """
        Use Case: fetch one order (Query). Owner or admin only.
        """
        return order_to_dict(self.load_order(order_id, user))

    def list_orders(self, user: UserModel, page: int, limit: int, user_id: int | None = None) -> Dict[str, Any]:
        """
        Users see their own orders; admins see everything or filter by user_id.
        """
        owner_filter = user_id if user.is_admin else user.id
        rows, total = self.repo.list_orders(owner_filter, page, limit)

        return {
            "orders": [order_to_dict(row) for row in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def update_status(self, order_id: int, status: OrderStatus) -> Dict[str, Any]:
        """
        Use Case: move an order along its workflow.

        1. Checks the transition is allowed
        2. On cancel, puts tracked quantities back into stock
        3. Notifies the customer (async)
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)

        previous = order.status
        target = ensure_order_transition(previous, status)

        if target is OrderStatus.CANCELLED:
            for item in order.items:
                if not item.track_quantity:
                    continue
                if self.products.increment_stock(item.product_id, item.quantity):
                    logger.info(f"Order {order_id}: restocked {item.quantity} pcs of product {item.product_id}")

        self.repo.update_order_status(order, target.value)
        self.db.commit()

        logger.info(f"Order {order_id} status {previous} -> {target.value}")

        self.notification_service.send_order_notification(order.user_id, order.id, target.value)
        return order_to_dict(order)
