# storefront/api/__init__.py
from storefront.api.routers import (
    auth,
    carts,
    checkout,
    favorites,
    health,
    orders,
    payments,
    products,
    shipping_methods,
)

ROUTERS = [
    health.router,
    auth.router,
    products.router,
    shipping_methods.router,
    carts.router,
    favorites.router,
    checkout.router,
    orders.router,
    payments.router,
]
