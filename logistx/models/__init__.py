"""Pydantic models for LogistX entities, payloads and results."""

from logistx.models.entities import (
    ORDER_STATUSES,
    Category,
    InventoryItem,
    InventoryTransaction,
    ItemRef,
    NameRef,
    Order,
    OrderItem,
    OrderStatus,
    Supplier,
    TransactionType,
    UserProfile,
    UserRef,
    UserRole,
)
from logistx.models.inputs import (
    CategoryCreate,
    CategoryPatch,
    InventoryItemCreate,
    InventoryItemPatch,
    OrderCreate,
    OrderLineInput,
    SupplierCreate,
    SupplierPatch,
    TransactionCreate,
    UserProfileCreate,
    UserProfilePatch,
)
from logistx.models.results import (
    AnalyticsSummary,
    CategoryBreakdown,
    DatabaseStatus,
    OperationResult,
    OrderStats,
    TopProduct,
    TransactionStats,
    UserStats,
)

__all__ = [
    "ORDER_STATUSES",
    "Category",
    "InventoryItem",
    "InventoryTransaction",
    "ItemRef",
    "NameRef",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Supplier",
    "TransactionType",
    "UserProfile",
    "UserRef",
    "UserRole",
    "CategoryCreate",
    "CategoryPatch",
    "InventoryItemCreate",
    "InventoryItemPatch",
    "OrderCreate",
    "OrderLineInput",
    "SupplierCreate",
    "SupplierPatch",
    "TransactionCreate",
    "UserProfileCreate",
    "UserProfilePatch",
    "AnalyticsSummary",
    "CategoryBreakdown",
    "DatabaseStatus",
    "OperationResult",
    "OrderStats",
    "TopProduct",
    "TransactionStats",
    "UserStats",
]
