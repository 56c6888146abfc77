# storefront/api/routers/favorites.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_owner
from storefront.data.database import get_db
from storefront.domain.schemas import FavoritesOut, FavoriteToggleOut
from storefront.services.favorites_service import FavoritesService

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=FavoritesOut)
def list_favorites(owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return FavoritesService(db).list_favorites(owner)


@router.post("/{product_id}/toggle", response_model=FavoriteToggleOut)
def toggle_favorite(product_id: int, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return FavoritesService(db).toggle(owner, product_id)


@router.delete("/{product_id}", response_model=FavoritesOut)
def remove_favorite(product_id: int, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
    return FavoritesService(db).remove(owner, product_id)
