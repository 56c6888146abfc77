# storefront/services/payment_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.orders import OrderStatus, PaymentStatus, ensure_payment_transition
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def payment_to_dict(payment: PaymentModel) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "order_id": payment.order_id,
        "amount": payment.amount,
        "payment_method": payment.payment_method,
        "status": payment.status,
        "transaction_id": payment.transaction_id,
        "created_at": payment.created_at,
    }


class PaymentService:
    """Payment records for orders. No payment provider is called from here."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepo(db)
        self.orders = OrderService(db)

    def create_payment(
        self,
        user: UserModel,
        order_id: int,
        amount: Decimal | None = None,
        payment_method: str = "card",
    ) -> Dict[str, Any]:
        order = self.orders.load_order(order_id, user)

        if order.status == OrderStatus.CANCELLED.value:
            raise ValidationError("Cannot pay for a cancelled order", field="order_id")

        payment = self.repo.add(
            PaymentModel(
                order_id=order.id,
                amount=order.total if amount is None else amount,
                payment_method=payment_method,
                status=PaymentStatus.PENDING.value,
            )
        )
        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Payment {payment.id} created for order {order.id}: {payment.amount}")
        return payment_to_dict(payment)

    def list_payments(self, user: UserModel, order_id: int | None = None) -> List[Dict[str, Any]]:
        if order_id is not None:
            #raises for orders the user cannot see
            self.orders.load_order(order_id, user)

        owner_filter = None if user.is_admin else user.id
        return [payment_to_dict(p) for p in self.repo.list_payments(owner_filter, order_id)]

    def update_status(
        self,
        payment_id: int,
        status: PaymentStatus,
        transaction_id: str | None = None,
    ) -> Dict[str, Any]:
        payment = self.repo.get(payment_id)
        if not payment:
            raise NotFoundError("Payment", payment_id)

        previous = payment.status
        target = ensure_payment_transition(previous, status)

        payment.status = target.value
        if transaction_id is not None:
            payment.transaction_id = transaction_id
        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Payment {payment_id} status {previous} -> {target.value}")
        return payment_to_dict(payment)
