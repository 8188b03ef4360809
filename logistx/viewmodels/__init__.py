"""Entity view-models: cached rows per table with write-through operations and aggregates."""

from logistx.viewmodels.base import EntityViewModel
from logistx.viewmodels.categories import CategoryViewModel
from logistx.viewmodels.inventory import InventoryViewModel
from logistx.viewmodels.notify import CollectingNotifier, LogNotifier, Notifier
from logistx.viewmodels.orders import OrderViewModel, generate_order_number
from logistx.viewmodels.suppliers import SupplierViewModel
from logistx.viewmodels.transactions import TransactionViewModel, record_transaction
from logistx.viewmodels.users import UserViewModel

__all__ = [
    "CategoryViewModel",
    "CollectingNotifier",
    "EntityViewModel",
    "InventoryViewModel",
    "LogNotifier",
    "Notifier",
    "OrderViewModel",
    "SupplierViewModel",
    "TransactionViewModel",
    "UserViewModel",
    "generate_order_number",
    "record_transaction",
]
