# storefront/services/shipping_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.shipping_method import ShippingMethodModel
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import ShippingMethodCreate, ShippingMethodPatch
from storefront.repos.shipping_repo import ShippingMethodRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ShippingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ShippingMethodRepo(db)

    def list_methods(self, active_only: bool = False) -> List[ShippingMethodModel]:
        return self.repo.list_methods(active_only=active_only)

    def get_method(self, method_id: int) -> ShippingMethodModel:
        method = self.repo.get(method_id)
        if method is None:
            raise NotFoundError("Shipping method", method_id)
        return method

    def create_method(self, payload: ShippingMethodCreate) -> ShippingMethodModel:
        method = self.repo.add(ShippingMethodModel(**payload.model_dump()))
        self.db.commit()
        self.db.refresh(method)
        logger.info(f"Created shipping method {method.id} ({method.name})")
        return method

    def update_method(self, method_id: int, patch: ShippingMethodPatch) -> ShippingMethodModel:
        method = self.get_method(method_id)
        for name, value in patch.changes().items():
            setattr(method, name, value)
        self.db.commit()
        self.db.refresh(method)
        return method

    def deactivate_method(self, method_id: int) -> ShippingMethodModel:
        """Orders keep referencing the method, so it is switched off instead of deleted."""
        method = self.get_method(method_id)
        method.active = False
        self.db.commit()
        self.db.refresh(method)
        logger.info(f"Deactivated shipping method {method_id}")
        return method
