# storefront/repos/payment_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, payment_id: int) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    def add(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def list_payments(self, user_id: int | None = None, order_id: int | None = None) -> List[PaymentModel]:
        stmt = select(PaymentModel)
        if user_id is not None:
            stmt = stmt.join(OrderModel, OrderModel.id == PaymentModel.order_id).where(
                OrderModel.user_id == user_id
            )
        if order_id is not None:
            stmt = stmt.where(PaymentModel.order_id == order_id)
        stmt = stmt.order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())
