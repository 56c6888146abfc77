# storefront/domain/catalog.py
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class ProductSnapshot:
    """Read-only view of a catalog product as seen by the cart and checkout."""

    id: int
    name: str
    base_price: Decimal
    discount_percent: Decimal | None = None
    track_quantity: bool = True
    available_quantity: int = 0
    active: bool = True
    sizes: tuple[str, ...] = field(default_factory=tuple)
    colors: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_model(cls, model) -> "ProductSnapshot":
        return cls(
            id=model.id,
            name=model.name,
            base_price=Decimal(model.base_price),
            discount_percent=(
                Decimal(model.discount_percent) if model.discount_percent is not None else None
            ),
            track_quantity=bool(model.track_quantity),
            available_quantity=int(model.available_quantity or 0),
            active=bool(model.active) and not model.is_deleted,
            sizes=tuple(model.sizes or ()),
            colors=tuple(model.colors or ()),
        )

    @property
    def in_stock(self) -> bool:
        return not self.track_quantity or self.available_quantity > 0
