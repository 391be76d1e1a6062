# every model imported here so Base.metadata knows all tables

from marketplace.data.models.user import UserModel
from marketplace.data.models.product import ProductModel
from marketplace.data.models.cart import CartModel
from marketplace.data.models.cart_item import CartItemModel
from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel

__all__ = ["UserModel", "ProductModel", "CartModel", "CartItemModel", "OrderModel", "OrderItemModel"]
