# storefront/repos/shipping_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.shipping_method import ShippingMethodModel


class ShippingMethodRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, method_id: int) -> ShippingMethodModel | None:
        return self.db.get(ShippingMethodModel, method_id)

    def get_active(self, method_id: int) -> ShippingMethodModel | None:
        method = self.get(method_id)
        if method is None or not method.active:
            return None
        return method

    def list_methods(self, active_only: bool = False) -> List[ShippingMethodModel]:
        stmt = select(ShippingMethodModel)
        if active_only:
            stmt = stmt.where(ShippingMethodModel.active.is_(True))
        stmt = stmt.order_by(ShippingMethodModel.cost.asc(), ShippingMethodModel.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def add(self, method: ShippingMethodModel) -> ShippingMethodModel:
        self.db.add(method)
        self.db.flush()
        return method
