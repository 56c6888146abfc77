# storefront/repos/product_repo.py
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.catalog import ProductSnapshot


class ProductRepo:
    """Catalog reads and the stock write path."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # catalog read
    # ------------------------------------------------------------------
    def get_model(self, product_id: int, include_deleted: bool = False) -> ProductModel | None:
        stmt = select(ProductModel).where(ProductModel.id == product_id)
        if not include_deleted:
            stmt = stmt.where(ProductModel.not_deleted())
        return self.db.execute(stmt).scalar_one_or_none()

    def get_product(self, product_id: int) -> ProductSnapshot | None:
        model = self.get_model(product_id)
        return ProductSnapshot.from_model(model) if model else None

    def get_products(self, product_ids: Iterable[int]) -> Dict[int, ProductSnapshot]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids), ProductModel.not_deleted())
        ).scalars().all()
        return {row.id: ProductSnapshot.from_model(row) for row in rows}

    def available_quantity(self, product_id: int) -> int:
        qty = self.db.execute(
            select(ProductModel.available_quantity).where(
                ProductModel.id == product_id,
                ProductModel.active.is_(True),
                ProductModel.not_deleted(),
            )
        ).scalar_one_or_none()
        return int(qty or 0)

    def slug_exists(self, slug: str, exclude_id: int | None = None) -> bool:
        stmt = select(ProductModel.id).where(ProductModel.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(ProductModel.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def list_products(
        self,
        page: int,
        limit: int,
        q: str | None = None,
        in_stock: bool | None = None,
        on_sale: bool | None = None,
        include_inactive: bool = False,
    ) -> Tuple[List[ProductModel], int]:
        conditions = [ProductModel.not_deleted()]
        if not include_inactive:
            conditions.append(ProductModel.active.is_(True))
        if q:
            conditions.append(ProductModel.name.ilike(f"%{q}%"))
        if in_stock:
            conditions.append(
                or_(ProductModel.track_quantity.is_(False), ProductModel.available_quantity > 0)
            )
        if on_sale:
            conditions.append(ProductModel.discount_percent > 0)

        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()

        rows = self.db.execute(
            select(ProductModel)
            .where(*conditions)
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(rows), total

    # ------------------------------------------------------------------
    # catalog write
    # ------------------------------------------------------------------
    def add(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def decrement_stock(self, product_id: int, qty: int) -> bool:
        """
        Conditional decrement, the only path that lowers stock:
        UPDATE products SET available_quantity = available_quantity - :qty
        WHERE id = :id AND available_quantity >= :qty AND active AND not deleted
        False means another writer got there first.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.available_quantity >= qty,
                ProductModel.active.is_(True),
                ProductModel.not_deleted(),
            )
            .values(available_quantity=ProductModel.available_quantity - qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_stock(self, product_id: int, qty: int) -> bool:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.track_quantity.is_(True))
            .values(available_quantity=ProductModel.available_quantity + qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
