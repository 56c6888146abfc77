# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_owner
from storefront.data.database import get_db
from storefront.domain.schemas import CartLineIn, CartOut, CartQuantityIn, ShippingSelectionIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return CartService(db).get_cart(owner)


@router.post("/items", response_model=CartOut)
def add_item(payload: CartLineIn, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    """
    Adds to the line keyed by (product_id, size, color); 409 when the
    resulting quantity exceeds available stock.
    """
    return CartService(db).add_item(
        owner, payload.product_id, payload.size, payload.color, payload.quantity
    )


@router.put("/items", response_model=CartOut)
def set_quantity(payload: CartQuantityIn, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return CartService(db).set_quantity(
        owner, payload.product_id, payload.size, payload.color, payload.quantity
    )


@router.delete("/items", response_model=CartOut)
def remove_item(
    product_id: int,
    size: str = "",
    color: str = "",
    owner: str = Depends(get_owner),
    db: Session = Depends(get_db),
):
    return CartService(db).remove_item(owner, product_id, size, color)


@router.delete("/", response_model=CartOut)
def clear_cart(owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return CartService(db).clear(owner)


@router.put("/shipping-method", response_model=CartOut)
def select_shipping_method(
    payload: ShippingSelectionIn,
    owner: str = Depends(get_owner),
    db: Session = Depends(get_db),
):
    return CartService(db).select_shipping_method(owner, payload.shipping_method_id)
