# storefront/domain/cart.py
"""
Cart aggregate.

Lines are keyed by (product_id, size, color) and kept in insertion order.
The cart guards quantities against the product snapshots it was handed; it
does not own stock, the checkout reconciler has the final word.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, NamedTuple

from storefront.domain.catalog import ProductSnapshot
from storefront.domain.exceptions import (
    InsufficientStock,
    NotFoundError,
    ProductUnavailable,
    ValidationError,
)
from storefront.domain.pricing import accumulate, line_amount, round_money

MAX_SELECTOR_LENGTH = 50


class LineKey(NamedTuple):
    product_id: int
    size: str
    color: str


@dataclass
class CartLine:
    product_id: int
    size: str
    color: str
    quantity: int

    @property
    def key(self) -> LineKey:
        return LineKey(self.product_id, self.size, self.color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
        }


def _check_quantity(qty) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int):
        raise ValidationError("Quantity must be an integer", field="quantity")


def _check_selector(value, name: str, allowed: Iterable[str]) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name)
    if len(value) > MAX_SELECTOR_LENGTH:
        raise ValidationError(f"{name} is too long", field=name)

    allowed = tuple(allowed)
    if allowed:
        if value not in allowed:
            raise ValidationError(f"{name} '{value}' is not offered for this product", field=name)
    elif value != "":
        raise ValidationError(f"Product has no {name} options", field=name)


class Cart:
    def __init__(self, lines: Iterable[CartLine] = (), shipping_method_id: int | None = None):
        self._lines: Dict[LineKey, CartLine] = {}
        for line in lines:
            if line.key in self._lines:
                self._lines[line.key].quantity += line.quantity
            else:
                self._lines[line.key] = CartLine(line.product_id, line.size, line.color, line.quantity)
        self.shipping_method_id = shipping_method_id
        self._products: Dict[int, ProductSnapshot] = {}

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    def attach(self, product: ProductSnapshot) -> None:
        """Refresh the snapshot used for stock checks and pricing."""
        self._products[product.id] = product

    def product_for(self, product_id: int) -> ProductSnapshot | None:
        return self._products.get(product_id)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def product_ids(self) -> List[int]:
        return list(dict.fromkeys(line.product_id for line in self._lines.values()))

    def get_line(self, product_id: int, size: str = "", color: str = "") -> CartLine | None:
        return self._lines.get(LineKey(product_id, size, color))

    def is_empty(self) -> bool:
        return not self._lines

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def subtotal(self) -> Decimal:
        """Line sum at full precision."""
        amounts = []
        for line in self._lines.values():
            product = self._products.get(line.product_id)
            if product is None:
                raise ProductUnavailable(line.product_id)
            amounts.append(line_amount(product, line.quantity))
        return accumulate(amounts)

    def total(self) -> Decimal:
        return round_money(self.subtotal())

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------
    def add_line(self, product: ProductSnapshot, size: str, color: str, qty: int) -> int:
        _check_quantity(qty)
        if qty <= 0:
            raise ValidationError("Quantity must be greater than 0", field="quantity")
        self._check_product(product, size, color)

        key = LineKey(product.id, size, color)
        existing = self._lines.get(key)
        requested = (existing.quantity if existing else 0) + qty

        if product.track_quantity and requested > product.available_quantity:
            raise InsufficientStock(product.id, requested, product.available_quantity)

        self.attach(product)
        if existing:
            existing.quantity = requested
        else:
            self._lines[key] = CartLine(product.id, size, color, qty)
        return requested

    def set_quantity(self, product_id: int, size: str, color: str, qty: int) -> int:
        """Replace a line's quantity; zero or less removes it. Returns the new quantity."""
        _check_quantity(qty)
        if qty <= 0:
            self.remove_line(product_id, size, color)
            return 0

        key = LineKey(product_id, size, color)
        line = self._lines.get(key)
        if line is None:
            raise NotFoundError("Cart line", f"{product_id}/{size}/{color}")

        product = self._products.get(product_id)
        if product is None:
            raise ProductUnavailable(product_id)
        self._check_product(product, size, color)

        if product.track_quantity and qty > product.available_quantity:
            raise InsufficientStock(product_id, qty, product.available_quantity)

        line.quantity = qty
        return qty

    def remove_line(self, product_id: int, size: str, color: str) -> None:
        self._lines.pop(LineKey(product_id, size, color), None)

    def remove_product(self, product_id: int) -> None:
        for key in [k for k in self._lines if k.product_id == product_id]:
            del self._lines[key]

    def clear(self) -> None:
        self._lines.clear()
        self.shipping_method_id = None

    def _check_product(self, product: ProductSnapshot, size: str, color: str) -> None:
        if not product.active:
            raise ProductUnavailable(product.id)
        _check_selector(size, "size", product.sizes)
        _check_selector(color, "color", product.colors)

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self._lines.values()],
            "shipping_method_id": self.shipping_method_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Cart":
        if not data:
            return cls()

        lines = []
        for raw in data.get("lines", []):
            quantity = int(raw["quantity"])
            if quantity <= 0:
                continue
            lines.append(
                CartLine(
                    product_id=int(raw["product_id"]),
                    size=str(raw.get("size", "")),
                    color=str(raw.get("color", "")),
                    quantity=quantity,
                )
            )
        return cls(lines, shipping_method_id=data.get("shipping_method_id"))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cart):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Cart(lines={self.lines!r}, shipping_method_id={self.shipping_method_id!r})"
