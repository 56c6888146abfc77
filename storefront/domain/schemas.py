# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import ClassVar, List
from decimal import Decimal
from datetime import datetime

from storefront.domain.orders import OrderStatus, PaymentStatus


# ==========================================
# Users / auth
# ==========================================
class UserCreate(BaseModel):
    """Registration payload."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)


class LoginIn(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    role: str

    model_config = ConfigDict(from_attributes=True)


# ==========================================
# Catalog
# ==========================================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=220)
    description: str = ""
    base_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    discount_percent: Decimal | None = Field(None, ge=0, le=100, decimal_places=2)
    track_quantity: bool = True
    available_quantity: int = Field(0, ge=0)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    active: bool = True


class _Patch(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    `model_fields_set` is the per-field presence flag.
    """

    nullable_fields: ClassVar[frozenset] = frozenset()

    @model_validator(mode="after")
    def _reject_null_for_required(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class ProductPatch(_Patch):
    nullable_fields: ClassVar[frozenset] = frozenset({"discount_percent"})

    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=220)
    description: str | None = None
    base_price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    discount_percent: Decimal | None = Field(None, ge=0, le=100, decimal_places=2)
    track_quantity: bool | None = None
    available_quantity: int | None = Field(None, ge=0)
    sizes: List[str] | None = None
    colors: List[str] | None = None
    active: bool | None = None


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    base_price: Decimal
    discount_percent: Decimal | None = None
    effective_price: Decimal
    track_quantity: bool
    available_quantity: int
    in_stock: bool
    sizes: List[str]
    colors: List[str]
    active: bool


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ProductListOut(BaseModel):
    products: List[ProductOut]
    pagination: Pagination


# ==========================================
# Shipping methods
# ==========================================
class ShippingMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    cost: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    estimated_days: int | None = Field(None, ge=0)
    active: bool = True


class ShippingMethodPatch(_Patch):
    nullable_fields: ClassVar[frozenset] = frozenset({"description", "estimated_days"})

    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    cost: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    estimated_days: int | None = Field(None, ge=0)
    active: bool | None = None


class ShippingMethodOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    cost: Decimal
    estimated_days: int | None = None
    active: bool

    model_config = ConfigDict(from_attributes=True)


# ==========================================
# Cart / favorites
# ==========================================
class CartLineIn(BaseModel):
    """Add a line to the cart."""

    product_id: int = Field(..., gt=0)
    size: str = Field("", max_length=50)
    color: str = Field("", max_length=50)
    quantity: int = Field(1, gt=0)


class CartQuantityIn(BaseModel):
    """Set a line's quantity; zero or less removes the line."""

    product_id: int = Field(..., gt=0)
    size: str = Field("", max_length=50)
    color: str = Field("", max_length=50)
    quantity: int


class ShippingSelectionIn(BaseModel):
    shipping_method_id: int | None = Field(None, gt=0)


class CartItemOut(BaseModel):
    product_id: int
    name: str
    size: str
    color: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    available_quantity: int | None = None


class CartOut(BaseModel):
    owner: str
    items: List[CartItemOut]
    item_count: int
    total: Decimal
    shipping_method_id: int | None = None
    shipping_cost: Decimal | None = None
    grand_total: Decimal
    removed_product_ids: List[int] = Field(default_factory=list)


class FavoritesOut(BaseModel):
    product_ids: List[int]


class FavoriteToggleOut(FavoritesOut):
    product_id: int
    favorite: bool


# ==========================================
# Checkout / orders
# ==========================================
class CheckoutIn(BaseModel):
    shipping_method_id: int | None = Field(None, gt=0)


class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    size: str
    color: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: str
    user_id: int
    status: OrderStatus
    shipping_method_id: int | None = None
    shipping_method_name: str | None = None
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal
    items: List[OrderItemOut]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination


class OrderStatusIn(BaseModel):
    status: OrderStatus


# ==========================================
# Payments
# ==========================================
class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    amount: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
    payment_method: str = Field("card", min_length=1, max_length=40)


class PaymentStatusIn(BaseModel):
    status: PaymentStatus
    transaction_id: str | None = Field(None, max_length=120)


class PaymentOut(BaseModel):
    id: int
    order_id: int
    amount: Decimal
    payment_method: str
    status: PaymentStatus
    transaction_id: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
