"""Report tables: ordered, typed columns per report type, built from the cached view-model rows."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Literal, Optional

from logistx.config import CURRENCY_SYMBOL
from logistx.models import AnalyticsSummary, InventoryItem, InventoryTransaction, Order

if TYPE_CHECKING:
    from logistx.dashboard import Dashboard

ColumnKind = Literal["text", "int", "money", "date", "percent"]

NOT_AVAILABLE = "N/A"

TRANSACTION_LABELS = {
    "create": "Item Created",
    "add": "Stock Added",
    "remove": "Stock Removed",
    "adjust": "Stock Adjustment",
    "update": "Item Updated",
    "delete": "Item Deleted",
}


@dataclass(frozen=True)
class Column:
    label: str
    kind: ColumnKind = "text"


@dataclass
class ReportTable:
    """A titled table whose rows hold typed values (Decimal, int, datetime, str) in column order."""

    title: str
    columns: list[Column]
    rows: list[list[Any]] = field(default_factory=list)
    subtitle: list[str] = field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self.columns]

    def formatted_rows(self, currency: str = CURRENCY_SYMBOL) -> list[list[str]]:
        return [
            [format_value(value, col.kind, currency) for value, col in zip(row, self.columns)]
            for row in self.rows
        ]


def as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def format_value(value: Any, kind: ColumnKind, currency: str = CURRENCY_SYMBOL) -> str:
    """Render one cell as text: money with symbol and 2 decimals, ISO dates, 1-decimal percent."""
    if value is None:
        return ""
    if kind == "money":
        return f"{currency}{Decimal(value):.2f}"
    if kind == "percent":
        return f"{Decimal(value):.1f}%"
    if kind == "date":
        d = as_date(value)
        return d.isoformat() if d else str(value)
    if kind == "int":
        return str(int(value))
    return str(value)


def _in_range(value: Optional[datetime], date_from: Optional[date], date_to: Optional[date]) -> bool:
    d = as_date(value)
    if d is None:
        return date_from is None and date_to is None
    if date_from and d < date_from:
        return False
    if date_to and d > date_to:
        return False
    return True


def _range_line(date_from: Optional[date], date_to: Optional[date]) -> list[str]:
    if date_from and date_to:
        return [f"Date Range: {date_from:%b %d, %Y} - {date_to:%b %d, %Y}"]
    return []


def inventory_report(items: Iterable[InventoryItem]) -> ReportTable:
    table = ReportTable(
        title="Inventory Report",
        columns=[
            Column("Product Name"),
            Column("SKU"),
            Column("Category"),
            Column("Supplier"),
            Column("Quantity", "int"),
            Column("Min Quantity", "int"),
            Column("Price", "money"),
            Column("Total Value", "money"),
            Column("Status"),
            Column("Last Updated", "date"),
        ],
    )
    for item in items:
        table.rows.append(
            [
                item.name,
                item.sku,
                item.category_name or NOT_AVAILABLE,
                item.supplier_name or NOT_AVAILABLE,
                item.quantity,
                item.min_quantity,
                item.price,
                item.line_value,
                "Low Stock" if item.is_low_stock else "In Stock",
                item.updated_at,
            ]
        )
    return table


def low_stock_report(items: Iterable[InventoryItem]) -> ReportTable:
    table = ReportTable(
        title="Low-stock Report",
        columns=[
            Column("Product Name"),
            Column("SKU"),
            Column("Category"),
            Column("Current Stock", "int"),
            Column("Min Required", "int"),
            Column("Shortage", "int"),
            Column("Price", "money"),
            Column("Supplier"),
            Column("Last Updated", "date"),
        ],
    )
    for item in items:
        if not item.is_low_stock:
            continue
        table.rows.append(
            [
                item.name,
                item.sku,
                item.category_name or NOT_AVAILABLE,
                item.quantity,
                item.min_quantity,
                item.min_quantity - item.quantity,
                item.price,
                item.supplier_name or NOT_AVAILABLE,
                item.updated_at,
            ]
        )
    return table


def value_report(items: Iterable[InventoryItem]) -> ReportTable:
    """Items by line value, highest first, with each item's share of the total value."""
    ranked = sorted(items, key=lambda i: i.line_value, reverse=True)
    total = sum((i.line_value for i in ranked), Decimal("0"))
    table = ReportTable(
        title="Value Report",
        columns=[
            Column("Product Name"),
            Column("SKU"),
            Column("Category"),
            Column("Quantity", "int"),
            Column("Unit Price", "money"),
            Column("Total Value", "money"),
            Column("Percentage of Total", "percent"),
        ],
    )
    for item in ranked:
        share = item.line_value / total * 100 if total else Decimal("0")
        table.rows.append(
            [
                item.name,
                item.sku,
                item.category_name or NOT_AVAILABLE,
                item.quantity,
                item.price,
                item.line_value,
                share,
            ]
        )
    return table


def transactions_report(
    transactions: Iterable[InventoryTransaction],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> ReportTable:
    table = ReportTable(
        title="Transactions Report",
        columns=[
            Column("Date", "date"),
            Column("Type"),
            Column("Product"),
            Column("SKU"),
            Column("Quantity Change"),
            Column("Previous Qty", "int"),
            Column("New Qty", "int"),
            Column("User"),
            Column("Notes"),
        ],
        subtitle=_range_line(date_from, date_to),
    )
    for t in transactions:
        if not _in_range(t.created_at, date_from, date_to):
            continue
        table.rows.append(
            [
                t.created_at,
                TRANSACTION_LABELS.get(t.transaction_type, t.transaction_type),
                t.item.name if t.item else NOT_AVAILABLE,
                t.item.sku if t.item else NOT_AVAILABLE,
                f"{t.new_quantity - t.previous_quantity:+d}",
                t.previous_quantity,
                t.new_quantity,
                t.user.name if t.user else (t.user_id or NOT_AVAILABLE),
                t.notes or "",
            ]
        )
    return table


def orders_report(
    orders: Iterable[Order],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> ReportTable:
    table = ReportTable(
        title="Orders Report",
        columns=[
            Column("Order Number"),
            Column("Customer"),
            Column("Email"),
            Column("Order Date", "date"),
            Column("Delivery Date", "date"),
            Column("Status"),
            Column("Items", "int"),
            Column("Total Amount", "money"),
        ],
        subtitle=_range_line(date_from, date_to),
    )
    for o in orders:
        if not _in_range(o.order_date, date_from, date_to):
            continue
        table.rows.append(
            [
                o.order_number,
                o.customer_name,
                o.customer_email,
                o.order_date,
                o.delivery_date,
                o.status.capitalize(),
                sum(line.quantity for line in o.order_items),
                o.total_amount,
            ]
        )
    return table


def analytics_report(summary: AnalyticsSummary, currency: str = CURRENCY_SYMBOL) -> ReportTable:
    """Headline metrics as Metric/Value pairs."""
    metrics = [
        ("Total Inventory Value", f"{currency}{summary.total_value:,.2f}"),
        ("Total Items", summary.total_items),
        ("Low Stock Items", summary.low_stock_count),
        ("Total Users", summary.users.total),
        ("Total Transactions", summary.transactions.total),
        ("Total Orders", summary.orders.total),
        ("Total Revenue", f"{currency}{summary.orders.total_revenue:,.2f}"),
    ]
    return ReportTable(
        title="Analytics Summary",
        columns=[Column("Metric"), Column("Value")],
        rows=[[name, value] for name, value in metrics],
    )


def inventory_export(items: Iterable[InventoryItem]) -> ReportTable:
    """Plain inventory listing (raw price, no totals) as exported from the inventory screen."""
    table = ReportTable(
        title="Inventory Export",
        columns=[
            Column("Name"),
            Column("SKU"),
            Column("Category"),
            Column("Quantity", "int"),
            Column("Min Quantity", "int"),
            Column("Price"),
            Column("Supplier"),
            Column("Last Updated", "date"),
        ],
    )
    for item in items:
        table.rows.append(
            [
                item.name,
                item.sku,
                item.category_name or NOT_AVAILABLE,
                item.quantity,
                item.min_quantity,
                str(item.price),
                item.supplier_name or NOT_AVAILABLE,
                item.updated_at,
            ]
        )
    return table


REPORT_TYPES = ("inventory", "low-stock", "value", "transactions", "orders", "analytics", "inventory-export")


def build_report(
    report_type: str,
    dashboard: "Dashboard",
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> ReportTable:
    """Build the named report from a started dashboard's cached rows."""
    items = dashboard.inventory.rows
    if report_type == "inventory":
        return inventory_report(items)
    if report_type == "low-stock":
        return low_stock_report(items)
    if report_type == "value":
        return value_report(items)
    if report_type == "transactions":
        return transactions_report(dashboard.transactions.rows, date_from, date_to)
    if report_type == "orders":
        return orders_report(dashboard.orders.rows, date_from, date_to)
    if report_type == "analytics":
        return analytics_report(dashboard.summary())
    if report_type == "inventory-export":
        return inventory_export(items)
    raise ValueError(f"Unknown report type: {report_type!r}. Use one of {', '.join(REPORT_TYPES)}")
