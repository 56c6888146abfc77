# storefront/api/errors.py
"""
Domain exceptions to JSON responses.
Body shape: {"error": <message>, "code": <code>, ...details}.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storefront.domain.checkout import CheckoutStateError
from storefront.domain.exceptions import (
    AuthenticationError,
    ConcurrentUpdateError,
    InsufficientStock,
    InvalidStatusTransition,
    NotFoundError,
    ProductUnavailable,
    StockConflict,
    StorefrontError,
    ValidationError,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _body(exc: StorefrontError, **details) -> dict:
    return {"error": exc.message, "code": exc.code, **details}


def domain_exception_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return JSONResponse(_body(exc, field=exc.field), status_code=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, NotFoundError):
        return JSONResponse(
            _body(exc, entity=exc.entity_name, entity_id=exc.entity_id),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, InsufficientStock):
        return JSONResponse(
            _body(exc, product_id=exc.product_id, requested=exc.requested, available=exc.available),
            status_code=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, (StockConflict, ProductUnavailable)):
        return JSONResponse(
            _body(exc, product_id=exc.product_id, available=exc.available),
            status_code=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, InvalidStatusTransition):
        return JSONResponse(
            _body(exc, current=exc.current, target=exc.target),
            status_code=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, (ConcurrentUpdateError, CheckoutStateError)):
        return JSONResponse(_body(exc), status_code=status.HTTP_409_CONFLICT)

    if isinstance(exc, AuthenticationError):
        return JSONResponse(_body(exc), status_code=status.HTTP_401_UNAUTHORIZED)

    logger.error(f"Unhandled domain error on {request.url.path}: {exc.code} {exc.message}")
    return JSONResponse(_body(exc), status_code=status.HTTP_400_BAD_REQUEST)


def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    return JSONResponse(
        {"error": str(exc) or "Forbidden", "code": "FORBIDDEN"},
        status_code=status.HTTP_403_FORBIDDEN,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, domain_exception_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
