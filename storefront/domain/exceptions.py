"""
Domain exceptions.

Every failure of a cart or checkout command is reported to the caller; none
of these are retried.
"""


class StorefrontError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(StorefrontError, ValueError):
    """Malformed input, rejected before any state is mutated."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EmptyCartError(ValidationError):
    def __init__(self):
        super().__init__("Cart is empty", field="cart")


class NotFoundError(StorefrontError, LookupError):
    def __init__(self, entity_name: str, entity_id):
        super().__init__(f"{entity_name} '{entity_id}' not found", code="NOT_FOUND")
        self.entity_name = entity_name
        self.entity_id = entity_id


class InsufficientStock(StorefrontError):
    """Requested cart quantity exceeds what the product has available."""

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Only {available} pcs of product {product_id} available, requested {requested}",
            code="INSUFFICIENT_STOCK",
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StockConflict(StorefrontError):
    """Live stock no longer covers a line at checkout time."""

    def __init__(self, product_id: int, available: int):
        super().__init__(
            f"Stock for product {product_id} changed, {available} pcs available",
            code="STOCK_CONFLICT",
        )
        self.product_id = product_id
        self.available = available


class ProductUnavailable(StorefrontError):
    """Product was deleted or deactivated."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is no longer available", code="PRODUCT_UNAVAILABLE")
        self.product_id = product_id
        self.available = 0


class InvalidStatusTransition(StorefrontError):
    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot change status from {current} to {target}",
            code="INVALID_STATUS_TRANSITION",
        )
        self.current = current
        self.target = target


class ConcurrentUpdateError(StorefrontError):
    """Stored state was modified by another request since it was read."""

    def __init__(self, key: str):
        super().__init__(f"'{key}' was modified concurrently", code="CONCURRENT_UPDATE")
        self.key = key


class AuthenticationError(StorefrontError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTHENTICATION_REQUIRED")
