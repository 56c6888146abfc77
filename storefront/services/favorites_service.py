# storefront/services/favorites_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.exceptions import NotFoundError
from storefront.domain.favorites import Favorites
from storefront.repos.cart_repo import CartStorage, SqlCartStorage
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def favorites_key(owner: str) -> str:
    return f"favorites:{owner}"


class FavoritesService:
    def __init__(self, db: Session, storage: CartStorage | None = None):
        self.db = db
        self.storage = storage or SqlCartStorage(db)
        self.products = ProductRepo(db)

    def _load(self, owner: str) -> Favorites:
        return Favorites.from_dict(self.storage.get(favorites_key(owner)))

    def _save(self, owner: str, favorites: Favorites) -> None:
        self.storage.set(favorites_key(owner), favorites.to_dict())
        self.db.commit()

    def list_favorites(self, owner: str) -> Dict[str, Any]:
        favorites = self._load(owner)
        #deleted products stay stored but are not shown
        live = self.products.get_products(favorites.product_ids)
        return {"product_ids": [pid for pid in favorites.product_ids if pid in live]}

    def toggle(self, owner: str, product_id: int) -> Dict[str, Any]:
        favorites = self._load(owner)

        if not favorites.is_favorite(product_id) and self.products.get_product(product_id) is None:
            raise NotFoundError("Product", product_id)

        is_favorite = favorites.toggle(product_id)
        self._save(owner, favorites)
        logger.info(f"Favorites {owner}: product {product_id} favorite={is_favorite}")

        return {"product_id": product_id, "favorite": is_favorite, "product_ids": favorites.product_ids}

    def remove(self, owner: str, product_id: int) -> Dict[str, Any]:
        favorites = self._load(owner)
        if favorites.is_favorite(product_id):
            favorites.remove(product_id)
            self._save(owner, favorites)
        return {"product_ids": favorites.product_ids}
