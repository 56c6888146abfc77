# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin, require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import OrderListOut, OrderOut, OrderStatusIn
from storefront.services.order_service import OrderService
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/", response_model=OrderListOut)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user_id: int | None = Query(None, description="Admin only"),
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_orders(user, page, limit, user_id=user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    """
    Order details. Owner or admin.
    """
    return OrderService(db).get_order(order_id, user)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderService(db).update_status(order_id, payload.status)
