# storefront/domain/favorites.py
from typing import Any, Dict, Iterable, List


class Favorites:
    """Ordered set of favourite product ids."""

    def __init__(self, product_ids: Iterable[int] = ()):
        self._ids: List[int] = list(dict.fromkeys(int(pid) for pid in product_ids))

    @property
    def product_ids(self) -> List[int]:
        return list(self._ids)

    def is_favorite(self, product_id: int) -> bool:
        return product_id in self._ids

    def add(self, product_id: int) -> None:
        if not self.is_favorite(product_id):
            self._ids.append(product_id)

    def remove(self, product_id: int) -> None:
        if product_id in self._ids:
            self._ids.remove(product_id)

    def toggle(self, product_id: int) -> bool:
        """Returns True when the product ends up favourited."""
        if self.is_favorite(product_id):
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"product_ids": list(self._ids)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Favorites":
        return cls((data or {}).get("product_ids", []))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Favorites):
            return NotImplemented
        return self._ids == other._ids
