# storefront/api/routers/payments.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin, require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import PaymentCreate, PaymentOut, PaymentStatusIn
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/", response_model=PaymentOut, status_code=201)
def create_payment(payload: PaymentCreate, user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    return PaymentService(db).create_payment(
        user, payload.order_id, amount=payload.amount, payment_method=payload.payment_method
    )


@router.get("/", response_model=List[PaymentOut])
def list_payments(
    order_id: int | None = None,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    return PaymentService(db).list_payments(user, order_id=order_id)


@router.patch("/{payment_id}/status", response_model=PaymentOut)
def update_payment_status(
    payment_id: int,
    payload: PaymentStatusIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return PaymentService(db).update_status(payment_id, payload.status, payload.transaction_id)
