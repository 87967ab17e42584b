# backend/tests/factories/inventory.py

from datetime import datetime
from decimal import Decimal

from factory import Sequence

from modules.inventory.models.inventory_models import Inventory
from .base import BaseFactory


class InventoryFactory(BaseFactory):
    """Factory for creating inventory items."""

    class Meta:
        model = Inventory

    name = Sequence(lambda n: f"Flour {n}")
    quantity = Decimal("20.000")
    unit = "kg"
    minimum_stock = Decimal("5.000")
    reorder_point = Decimal("8.000")
    unit_price = Decimal("12000.00")
    last_restock_date = datetime(2029, 12, 1)
