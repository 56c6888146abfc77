# storefront/domain/checkout.py
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Tuple

from storefront.domain.cart import CartLine
from storefront.domain.exceptions import StorefrontError
from storefront.domain.pricing import ZERO


class CheckoutState(str, Enum):
    STARTED = "STARTED"
    VALIDATED = "VALIDATED"
    COMMITTED = "COMMITTED"
    FAILED = "FAILED"


_TRANSITIONS = {
    CheckoutState.STARTED: {CheckoutState.VALIDATED, CheckoutState.FAILED},
    CheckoutState.VALIDATED: {CheckoutState.COMMITTED, CheckoutState.FAILED},
    CheckoutState.COMMITTED: set(),
    CheckoutState.FAILED: set(),
}


class CheckoutStateError(StorefrontError):
    def __init__(self, state: CheckoutState, expected: CheckoutState):
        super().__init__(
            f"Checkout attempt is {state.value}, expected {expected.value}",
            code="CHECKOUT_STATE",
        )


@dataclass(frozen=True)
class FrozenLine:
    product_id: int
    product_name: str
    size: str
    color: str
    quantity: int
    unit_price: Decimal
    track_quantity: bool

    @property
    def amount(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class CheckoutAttempt:
    user_id: int
    owner_key: str
    lines: Tuple[CartLine, ...]
    shipping_method_id: int | None
    cart_version: int | None = None
    attempt_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: CheckoutState = CheckoutState.STARTED

    frozen_lines: List[FrozenLine] = field(default_factory=list)
    shipping_method_name: str | None = None
    shipping_cost: Decimal = ZERO
    subtotal: Decimal = ZERO
    total: Decimal = ZERO
    failure: Exception | None = None
    order_id: int | None = None

    def require(self, expected: CheckoutState) -> None:
        if self.state is not expected:
            raise CheckoutStateError(self.state, expected)

    def advance(self, target: CheckoutState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise CheckoutStateError(self.state, target)
        self.state = target

    def fail(self, error: Exception) -> None:
        if self.state in (CheckoutState.STARTED, CheckoutState.VALIDATED):
            self.failure = error
            self.state = CheckoutState.FAILED
