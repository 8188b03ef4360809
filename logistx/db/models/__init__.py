"""Re-export all ORM models so Base.metadata has all tables."""

from logistx.db.models.audit import InventoryTransaction
from logistx.db.models.catalog import Category, InventoryItem, Supplier
from logistx.db.models.orders import Order, OrderItem
from logistx.db.models.users import Profile

# table name -> ORM class
MODELS_BY_TABLE = {
    model.__tablename__: model
    for model in (Category, Supplier, InventoryItem, InventoryTransaction, Order, OrderItem, Profile)
}

__all__ = [
    "Category",
    "Supplier",
    "InventoryItem",
    "InventoryTransaction",
    "Order",
    "OrderItem",
    "Profile",
    "MODELS_BY_TABLE",
]
