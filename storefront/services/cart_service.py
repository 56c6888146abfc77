# storefront/services/cart_service.py
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from storefront.domain.cart import Cart
from storefront.domain.exceptions import ConcurrentUpdateError, NotFoundError
from storefront.domain.pricing import effective_price, round_money
from storefront.repos.cart_repo import CartStorage, SqlCartStorage
from storefront.repos.product_repo import ProductRepo
from storefront.repos.shipping_repo import ShippingMethodRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def user_owner(user_id: int) -> str:
    return f"user:{user_id}"


def session_owner(token: str) -> str:
    return f"session:{token}"


def cart_key(owner: str) -> str:
    return f"cart:{owner}"


class CartService:
    """
    Use cases for the cart of one owner (a user or an anonymous session).
    Each command hydrates the aggregate from storage, applies the change and
    persists it before returning. Callers serialize requests per owner.
    """

    def __init__(self, db: Session, storage: CartStorage | None = None):
        self.db = db
        self.storage = storage or SqlCartStorage(db)
        self.products = ProductRepo(db)
        self.shipping = ShippingMethodRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def load_cart(self, owner: str) -> Tuple[Cart, List[int]]:
        """
        Hydrate the cart and attach live product snapshots.
        Lines whose product was deleted or deactivated are dropped and their
        product ids returned so the client can tell the user.
        """
        cart = Cart.from_dict(self.storage.get(cart_key(owner)))
        products = self.products.get_products(cart.product_ids)

        removed = []
        for product_id in cart.product_ids:
            product = products.get(product_id)
            if product is None or not product.active:
                cart.remove_product(product_id)
                removed.append(product_id)
            else:
                cart.attach(product)

        changed = bool(removed)
        if cart.shipping_method_id is not None and self.shipping.get_active(cart.shipping_method_id) is None:
            cart.shipping_method_id = None
            changed = True

        if changed:
            logger.info(f"Cart {owner}: dropped unavailable products {removed}")
            self._persist(owner, cart)

        return cart, removed

    def get_cart(self, owner: str) -> Dict[str, Any]:
        cart, removed = self.load_cart(owner)
        return self._view(owner, cart, removed)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, owner: str, product_id: int, size: str, color: str, quantity: int) -> Dict[str, Any]:
        cart, removed = self.load_cart(owner)

        product = self.products.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        new_qty = cart.add_line(product, size, color, quantity)
        self._persist(owner, cart)

        logger.info(f"Cart {owner}: product {product_id} ({size}/{color}) quantity now {new_qty}")
        return self._view(owner, cart, removed)

    def set_quantity(self, owner: str, product_id: int, size: str, color: str, quantity: int) -> Dict[str, Any]:
        cart, removed = self.load_cart(owner)

        new_qty = cart.set_quantity(product_id, size, color, quantity)
        self._persist(owner, cart)

        logger.info(f"Cart {owner}: product {product_id} ({size}/{color}) set to {new_qty}")
        return self._view(owner, cart, removed)

    def remove_item(self, owner: str, product_id: int, size: str, color: str) -> Dict[str, Any]:
        cart, removed = self.load_cart(owner)

        if cart.get_line(product_id, size, color) is not None:
            cart.remove_line(product_id, size, color)
            self._persist(owner, cart)
            logger.info(f"Cart {owner}: removed product {product_id} ({size}/{color})")

        return self._view(owner, cart, removed)

    def clear(self, owner: str) -> Dict[str, Any]:
        cart = Cart()
        self._persist(owner, cart)
        logger.info(f"Cart {owner}: cleared")
        return self._view(owner, cart, [])

    def select_shipping_method(self, owner: str, method_id: int | None) -> Dict[str, Any]:
        cart, removed = self.load_cart(owner)

        if method_id is not None and self.shipping.get_active(method_id) is None:
            raise NotFoundError("Shipping method", method_id)

        cart.shipping_method_id = method_id
        self._persist(owner, cart)
        return self._view(owner, cart, removed)

    def adopt(self, from_owner: str, to_owner: str) -> bool:
        """
        Hand an anonymous session cart over to a user who just logged in.
        Only happens when the user's own cart is empty; the session cart is
        dropped either way.
        """
        source = self.storage.get(cart_key(from_owner))
        if not source or not source.get("lines"):
            return False

        target = Cart.from_dict(self.storage.get(cart_key(to_owner)))
        adopted = target.is_empty()
        if adopted:
            self.storage.set(cart_key(to_owner), Cart.from_dict(source).to_dict())
        self.storage.remove(cart_key(from_owner))
        self.db.commit()

        logger.info(f"Cart {from_owner} -> {to_owner}: adopted={adopted}")
        return adopted

    # =====================================================
    # helpers
    # =====================================================
    def _persist(self, owner: str, cart: Cart) -> None:
        try:
            self.storage.set(cart_key(owner), cart.to_dict())
            self.db.commit()
        except ConcurrentUpdateError:
            self.db.rollback()
            self.storage.forget()
            logger.warning(f"Cart {owner} was modified concurrently")
            raise

    def _view(self, owner: str, cart: Cart, removed: List[int]) -> Dict[str, Any]:
        items = []
        for line in cart.lines:
            product = cart.product_for(line.product_id)
            unit = effective_price(product)
            items.append(
                {
                    "product_id": line.product_id,
                    "name": product.name,
                    "size": line.size,
                    "color": line.color,
                    "quantity": line.quantity,
                    "unit_price": round_money(unit),
                    "line_total": round_money(unit * line.quantity),
                    "available_quantity": product.available_quantity if product.track_quantity else None,
                }
            )

        total = cart.total()
        shipping_cost = None
        if cart.shipping_method_id is not None:
            method = self.shipping.get_active(cart.shipping_method_id)
            shipping_cost = round_money(method.cost) if method else None

        return {
            "owner": owner,
            "items": items,
            "item_count": cart.item_count(),
            "total": total,
            "shipping_method_id": cart.shipping_method_id,
            "shipping_cost": shipping_cost,
            "grand_total": round_money(total + (shipping_cost or 0)),
            "removed_product_ids": removed,
        }
