from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(40), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED

    shipping_method_id = Column(Integer, ForeignKey("shipping_methods.id"), nullable=True)
    shipping_method_name = Column(String(120), nullable=True)

    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    payments = relationship("PaymentModel", back_populates="order", order_by="PaymentModel.id")


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #snapshot at checkout time
    product_name = Column(String(200), nullable=False)
    size = Column(String(50), nullable=False, default="")
    color = Column(String(50), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 6), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)
    #stock was decremented for this line at checkout
    track_quantity = Column(Boolean, nullable=False, default=True)

    order = relationship("OrderModel", back_populates="items")
