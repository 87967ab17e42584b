# backend/tests/factories/__init__.py

"""
Shared test factories for the bakery backend.
"""

from .base import BaseFactory, bind_session
from .customer import AdminFactory, CustomerFactory, StaffFactory, DEFAULT_PASSWORD
from .inventory import InventoryFactory
from .menu import MenuFactory
from .order import (
    OrderFactory,
    OrderItemFactory,
    OrderWithItemsFactory,
    PaymentFactory,
)
from .table import DiningTableFactory, ReservationFactory

__all__ = [
    'BaseFactory',
    'bind_session',
    'AdminFactory',
    'CustomerFactory',
    'StaffFactory',
    'DEFAULT_PASSWORD',
    'InventoryFactory',
    'MenuFactory',
    'OrderFactory',
    'OrderItemFactory',
    'OrderWithItemsFactory',
    'PaymentFactory',
    'DiningTableFactory',
    'ReservationFactory',
]
