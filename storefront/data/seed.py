# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import ProductModel, ShippingMethodModel
from storefront.services.user_service import UserService
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    dict(name="Linen Shirt", slug="linen-shirt", base_price=Decimal("3000.00"), discount_percent=Decimal("20"),
         available_quantity=5, sizes=["S", "M", "L"], colors=["white", "blue"]),
    dict(name="Wool Scarf", slug="wool-scarf", base_price=Decimal("1500.00"),
         available_quantity=12, sizes=[], colors=["grey", "red"]),
    dict(name="Gift Card", slug="gift-card", base_price=Decimal("1000.00"),
         track_quantity=False, available_quantity=0, sizes=[], colors=[]),
]

DEMO_SHIPPING = [
    dict(name="Courier", description="Delivery to the door", cost=Decimal("350.00"), estimated_days=2),
    dict(name="Pickup point", description="Self pickup", cost=Decimal("0.00"), estimated_days=4),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        db.add_all([ProductModel(**data) for data in DEMO_PRODUCTS])
        db.add_all([ShippingMethodModel(**data) for data in DEMO_SHIPPING])
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products and {len(DEMO_SHIPPING)} shipping methods")

        if ADMIN_EMAIL and ADMIN_PASSWORD:
            UserService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    finally:
        db.close()


if __name__ == "__main__":
    from storefront.main import init_db

    init_db()
    seed()
