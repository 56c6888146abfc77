# storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Numeric, JSON, CheckConstraint,
)

from storefront.data.database import Base
from storefront.data.models.mixins import SoftDeleteMixin


class ProductModel(SoftDeleteMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(220), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")

    base_price = Column(Numeric(12, 2), nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=True)

    track_quantity = Column(Boolean, nullable=False, default=True)
    available_quantity = Column(Integer, nullable=False, default=0)

    #allowed variant selectors, empty list = selector not applicable
    sizes = Column(JSON, nullable=False, default=list)
    colors = Column(JSON, nullable=False, default=list)

    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="ck_product_price"),
        CheckConstraint("available_quantity >= 0", name="ck_product_qty"),
        CheckConstraint(
            "discount_percent IS NULL OR (discount_percent >= 0 AND discount_percent <= 100)",
            name="ck_product_discount",
        ),
    )
