"""Operation results and derived aggregate models."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field


class OperationResult(BaseModel):
    """Outcome of a view-model write. error carries the stringified failure message."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)


class CategoryBreakdown(BaseModel):
    """Units and value held per category name."""

    name: str
    count: int = 0
    value: Decimal = Decimal("0")


class TopProduct(BaseModel):
    name: str
    quantity: int
    value: Decimal


class OrderStats(BaseModel):
    total: int = 0
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    today: int = 0
    total_revenue: Decimal = Decimal("0")


class TransactionStats(BaseModel):
    total: int = 0
    today: int = 0
    adds: int = 0
    removes: int = 0
    adjustments: int = 0


class UserStats(BaseModel):
    total: int = 0
    admins: int = 0
    staff: int = 0


class AnalyticsSummary(BaseModel):
    """Cross-entity dashboard figures, computed from the cached lists."""

    total_items: int = 0
    low_stock_count: int = 0
    total_value: Decimal = Decimal("0")
    categories: list[CategoryBreakdown] = Field(default_factory=list)
    top_products: list[TopProduct] = Field(default_factory=list)
    orders: OrderStats = Field(default_factory=OrderStats)
    transactions: TransactionStats = Field(default_factory=TransactionStats)
    users: UserStats = Field(default_factory=UserStats)
    transaction_mix: dict[str, int] = Field(default_factory=dict)
    using_demo: bool = False


class DatabaseStatus(BaseModel):
    """Row counts per table as reported by the remote store."""

    connected: bool
    items: int = 0
    categories: int = 0
    suppliers: int = 0
    users: int = 0
    error: Optional[str] = None
