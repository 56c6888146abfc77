# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service, require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CheckoutIn, OrderOut
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn | None = None,
    user: UserModel = Depends(require_user),
    lock_service: LockService | None = Depends(get_lock_service),
    db: Session = Depends(get_db),
):
    """
    Turns the user's cart into a PENDING order.
    On a stock conflict nothing is written and the response is 409 with
    {error, code, product_id, available}.
    """
    svc = CheckoutService(db, lock_service=lock_service)
    return svc.checkout(user.id, payload.shipping_method_id if payload else None)
