# storefront/api/routers/shipping_methods.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import ShippingMethodCreate, ShippingMethodOut, ShippingMethodPatch
from storefront.services.shipping_service import ShippingService

router = APIRouter(prefix="/shipping-methods", tags=["shipping"])


@router.get("/", response_model=List[ShippingMethodOut])
def list_methods(active_only: bool = True, db: Session = Depends(get_db)):
    return ShippingService(db).list_methods(active_only=active_only)


@router.get("/{method_id}", response_model=ShippingMethodOut)
def get_method(method_id: int, db: Session = Depends(get_db)):
    return ShippingService(db).get_method(method_id)


@router.post("/", response_model=ShippingMethodOut, status_code=201)
def create_method(
    payload: ShippingMethodCreate,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ShippingService(db).create_method(payload)


@router.patch("/{method_id}", response_model=ShippingMethodOut)
def update_method(
    method_id: int,
    patch: ShippingMethodPatch,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ShippingService(db).update_method(method_id, patch)


@router.delete("/{method_id}", response_model=ShippingMethodOut)
def deactivate_method(
    method_id: int,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ShippingService(db).deactivate_method(method_id)
