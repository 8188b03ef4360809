"""Entity row models as returned by the remote store (with embedded join fields)."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

TransactionType = Literal["create", "add", "remove", "adjust", "update", "delete"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
UserRole = Literal["admin", "staff"]

ORDER_STATUSES: tuple[str, ...] = ("pending", "processing", "shipped", "delivered", "cancelled")

_ROW_CONFIG = {"extra": "ignore", "populate_by_name": True}


class NameRef(BaseModel):
    """Embedded display name of a referenced row (category, supplier)."""

    name: str

    model_config = _ROW_CONFIG


class ItemRef(BaseModel):
    """Embedded inventory item summary (order items, transactions)."""

    name: str
    sku: str
    category: Optional[NameRef] = None

    model_config = _ROW_CONFIG


class UserRef(BaseModel):
    """Embedded profile summary on transaction rows."""

    name: str
    email: str

    model_config = _ROW_CONFIG


class Category(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = _ROW_CONFIG


class Supplier(BaseModel):
    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _ROW_CONFIG


class InventoryItem(BaseModel):
    """Inventory item row. quantity is not clamped; negative values are stored as-is."""

    id: str
    name: str
    sku: str
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    quantity: int = 0
    min_quantity: int = 0
    price: Decimal = Decimal("0")
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[NameRef] = None
    supplier: Optional[NameRef] = None

    model_config = _ROW_CONFIG

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity

    @property
    def line_value(self) -> Decimal:
        return self.quantity * self.price

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None

    @property
    def supplier_name(self) -> Optional[str]:
        return self.supplier.name if self.supplier else None


class InventoryTransaction(BaseModel):
    """Append-only audit row for a quantity-affecting event on an inventory item."""

    id: str
    item_id: str
    user_id: Optional[str] = None
    transaction_type: TransactionType
    quantity_change: int = 0
    previous_quantity: int = 0
    new_quantity: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    item: Optional[ItemRef] = None
    user: Optional[UserRef] = None

    model_config = _ROW_CONFIG


class OrderItem(BaseModel):
    id: str
    order_id: str
    inventory_item_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    created_at: Optional[datetime] = None
    inventory_item: Optional[ItemRef] = None

    model_config = _ROW_CONFIG


class Order(BaseModel):
    """Order header. total_amount is fixed at creation and never recomputed."""

    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    order_date: datetime
    delivery_date: Optional[datetime] = None
    status: OrderStatus = "pending"
    total_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    order_items: list[OrderItem] = Field(default_factory=list)

    model_config = _ROW_CONFIG


class UserProfile(BaseModel):
    id: str
    user_id: str
    email: str
    name: str
    role: UserRole = "staff"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _ROW_CONFIG

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
