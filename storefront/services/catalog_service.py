# storefront/services/catalog_service.py
import math
import re
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.catalog import ProductSnapshot
from storefront.domain.exceptions import NotFoundError, ValidationError
from storefront.domain.pricing import effective_price, round_money
from storefront.domain.schemas import ProductCreate, ProductPatch
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def slugify(text: str) -> str:
    text = str(text).lower().strip()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^\w\-]+", "", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


def _normalize_options(values: Iterable[str], field: str) -> List[str]:
    cleaned = []
    for value in values:
        value = value.strip()
        if not value:
            raise ValidationError(f"{field} cannot contain empty values", field=field)
        if len(value) > 50:
            raise ValidationError(f"{field} value '{value}' is too long", field=field)
        if value not in cleaned:
            cleaned.append(value)
    return cleaned


def product_to_dict(model: ProductModel) -> Dict[str, Any]:
    snapshot = ProductSnapshot.from_model(model)
    return {
        "id": model.id,
        "name": model.name,
        "slug": model.slug,
        "description": model.description or "",
        "base_price": model.base_price,
        "discount_percent": model.discount_percent,
        "effective_price": round_money(effective_price(snapshot)),
        "track_quantity": model.track_quantity,
        "available_quantity": model.available_quantity,
        "in_stock": snapshot.in_stock,
        "sizes": list(model.sizes or []),
        "colors": list(model.colors or []),
        "active": model.active,
    }


class CatalogService:
    """Admin write paths and public reads for products."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    #query
    def get_product(self, product_id: int, include_inactive: bool = False) -> Dict[str, Any]:
        model = self.repo.get_model(product_id)
        if model is None or (not model.active and not include_inactive):
            raise NotFoundError("Product", product_id)
        return product_to_dict(model)

    def list_products(
        self,
        page: int,
        limit: int,
        q: str | None = None,
        in_stock: bool | None = None,
        on_sale: bool | None = None,
        include_inactive: bool = False,
    ) -> Dict[str, Any]:
        rows, total = self.repo.list_products(
            page=page,
            limit=limit,
            q=q,
            in_stock=in_stock,
            on_sale=on_sale,
            include_inactive=include_inactive,
        )
        return {
            "products": [product_to_dict(row) for row in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if limit else 0,
            },
        }

    #commands
    def create_product(self, payload: ProductCreate) -> Dict[str, Any]:
        slug = slugify(payload.slug or payload.name)
        if not slug:
            raise ValidationError("Slug cannot be empty", field="slug")
        if self.repo.slug_exists(slug):
            raise ValidationError(f"Slug '{slug}' is already used", field="slug")

        model = self.repo.add(
            ProductModel(
                name=payload.name,
                slug=slug,
                description=payload.description,
                base_price=payload.base_price,
                discount_percent=payload.discount_percent,
                track_quantity=payload.track_quantity,
                available_quantity=payload.available_quantity,
                sizes=_normalize_options(payload.sizes, "sizes"),
                colors=_normalize_options(payload.colors, "colors"),
                active=payload.active,
            )
        )
        self.db.commit()
        self.db.refresh(model)

        logger.info(f"Created product {model.id} ({model.slug})")
        return product_to_dict(model)

    def update_product(self, product_id: int, patch: ProductPatch) -> Dict[str, Any]:
        model = self.repo.get_model(product_id)
        if model is None:
            raise NotFoundError("Product", product_id)

        changes = patch.changes()

        if "slug" in changes:
            slug = slugify(changes["slug"])
            if not slug:
                raise ValidationError("Slug cannot be empty", field="slug")
            if self.repo.slug_exists(slug, exclude_id=product_id):
                raise ValidationError(f"Slug '{slug}' is already used", field="slug")
            changes["slug"] = slug
        for field in ("sizes", "colors"):
            if field in changes:
                changes[field] = _normalize_options(changes[field], field)

        for name, value in changes.items():
            setattr(model, name, value)

        self.db.commit()
        self.db.refresh(model)

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product_to_dict(model)

    def delete_product(self, product_id: int) -> None:
        model = self.repo.get_model(product_id)
        if model is None:
            raise NotFoundError("Product", product_id)

        model.mark_deleted()
        self.db.commit()
        logger.info(f"Soft-deleted product {product_id}")
