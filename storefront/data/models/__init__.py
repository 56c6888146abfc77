#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import StoredStateModel
from storefront.data.models.shipping_method import ShippingMethodModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.payment import PaymentModel

__all__ = [
    "UserModel",
    "ProductModel",
    "StoredStateModel",
    "ShippingMethodModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
]
