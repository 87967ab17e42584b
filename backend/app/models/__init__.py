"""Import every ORM model so ``Base.metadata`` is complete for Alembic and tests."""

from modules.cart.models.cart_models import Cart
from modules.customers.models.customer_models import Customer
from modules.inventory.models.inventory_models import Inventory
from modules.menu.models.menu_models import Menu
from modules.orders.models.order_models import Order, OrderItem, OrderStatusLog
from modules.payments.models.payment_models import Payment
from modules.reservations.models.reservation_models import Reservation
from modules.tables.models.table_models import DiningTable
from modules.wishlist.models.wishlist_models import Wishlist

__all__ = [
    "Cart",
    "Customer",
    "DiningTable",
    "Inventory",
    "Menu",
    "Order",
    "OrderItem",
    "OrderStatusLog",
    "Payment",
    "Reservation",
    "Wishlist",
]
