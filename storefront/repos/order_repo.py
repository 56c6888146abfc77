# storefront/repos/order_repo.py
import secrets
import string
import time
from decimal import Decimal
from typing import Iterable, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.checkout import FrozenLine
from storefront.domain.pricing import round_money

_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    """ORD-<epoch ms>-<9 random uppercase alphanumerics>."""
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(
        self,
        user_id: int,
        lines: Iterable[FrozenLine],
        shipping_method_id: int | None,
        shipping_method_name: str | None,
        subtotal: Decimal,
        shipping_cost: Decimal,
        total: Decimal,
    ) -> OrderModel:
        order = OrderModel(
            order_number=generate_order_number(),
            user_id=user_id,
            status="PENDING",
            shipping_method_id=shipping_method_id,
            shipping_method_name=shipping_method_name,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total=total,
            items=[
                OrderItemModel(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    size=line.size,
                    color=line.color,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=round_money(line.amount),
                    track_quantity=line.track_quantity,
                )
                for line in lines
            ],
        )
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: int | None, page: int, limit: int) -> Tuple[List[OrderModel], int]:
        conditions = []
        if user_id is not None:
            conditions.append(OrderModel.user_id == user_id)

        total = self.db.execute(
            select(func.count(OrderModel.id)).where(*conditions)
        ).scalar_one()

        rows = self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(rows), total

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.flush()
        return order
