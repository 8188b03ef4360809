"""Create and patch payloads per entity. Patches list exactly the mutable fields."""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, model_validator

from logistx.models.entities import TransactionType, UserRole


class _Payload(BaseModel):
    model_config = {"extra": "forbid"}

    # columns a patch may leave out but never set to null
    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        nulls = [name for name in self.not_null if name in self.model_fields_set and getattr(self, name) is None]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    def values(self) -> dict[str, Any]:
        """Fields explicitly set by the caller, as python values."""
        return self.model_dump(exclude_unset=True)


class InventoryItemCreate(_Payload):
    """New inventory item. Required: name, sku, quantity, price (checked by the view-model)."""

    name: str = ""
    sku: str = ""
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    quantity: Optional[int] = None
    min_quantity: Optional[int] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None


class InventoryItemPatch(_Payload):
    """Mutable inventory item fields. A new SKU must stay unique (checked by the view-model)."""

    not_null = ("name", "sku", "quantity", "min_quantity", "price")

    name: Optional[str] = None
    sku: Optional[str] = None
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    quantity: Optional[int] = None
    min_quantity: Optional[int] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None


class CategoryCreate(_Payload):
    name: str = ""
    description: Optional[str] = None


class CategoryPatch(_Payload):
    not_null = ("name",)

    name: Optional[str] = None
    description: Optional[str] = None


class SupplierCreate(_Payload):
    name: str = ""
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


class SupplierPatch(_Payload):
    not_null = ("name",)

    name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


class OrderLineInput(_Payload):
    """One requested order line. unit_price defaults to the item's current price."""

    inventory_item_id: str = ""
    quantity: int = 1
    unit_price: Optional[Decimal] = None


class OrderCreate(_Payload):
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: Optional[str] = None
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    items: list[OrderLineInput] = Field(default_factory=list)


class TransactionCreate(_Payload):
    item_id: str
    user_id: Optional[str] = None
    transaction_type: TransactionType
    quantity_change: int = 0
    previous_quantity: int = 0
    new_quantity: int = 0
    notes: Optional[str] = None


class UserProfileCreate(_Payload):
    user_id: str = ""
    email: str = ""
    name: str = ""
    role: UserRole = "staff"


class UserProfilePatch(_Payload):
    not_null = ("email", "name", "role")

    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None
