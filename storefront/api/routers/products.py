# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import ProductCreate, ProductListOut, ProductOut, ProductPatch
from storefront.services.catalog_service import CatalogService
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductListOut)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    q: str | None = Query(None, max_length=100),
    in_stock: bool | None = None,
    on_sale: bool | None = None,
    include_inactive: bool = False,
    user: UserModel | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    #inactive products are visible to admins only
    show_inactive = include_inactive and user is not None and user.is_admin
    return CatalogService(db).list_products(
        page=page,
        limit=limit,
        q=q,
        in_stock=in_stock,
        on_sale=on_sale,
        include_inactive=show_inactive,
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    user: UserModel | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CatalogService(db).get_product(
        product_id, include_inactive=user is not None and user.is_admin
    )


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CatalogService(db).create_product(payload)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    patch: ProductPatch,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CatalogService(db).update_product(product_id, patch)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    CatalogService(db).delete_product(product_id)
