# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from storefront.utils.settings import CURRENCY, CURRENCY_PLACES

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def effective_price(product) -> Decimal:
    """
    Unit price after the product's discount, at full precision.

    `discount_percent` is trusted to lie in [0, 100]; the catalog rejects
    anything else when the product is written.
    """
    base = Decimal(product.base_price)
    if product.discount_percent is None:
        return base
    return base * (1 - Decimal(product.discount_percent) / HUNDRED)


def line_amount(product, quantity: int) -> Decimal:
    return effective_price(product) * quantity


def accumulate(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def round_money(amount: Decimal, places: int = CURRENCY_PLACES) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_price(amount, currency: str = CURRENCY) -> str:
    """Whole currency units with thousands separators, e.g. `2,400 RUB`."""
    if amount is None:
        amount = ZERO
    whole = Decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{whole:,} {currency}"
