"""Fixed demo datasets substituted when the remote store is unreachable or slow.

Timestamps are taken at call time, so every call returns fresh copies.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from logistx.models import (
    Category,
    InventoryItem,
    InventoryTransaction,
    ItemRef,
    NameRef,
    Order,
    OrderItem,
    Supplier,
    UserProfile,
    UserRef,
)

ADMIN_USER_ID = "00000000-0000-0000-0000-000000000001"
STAFF_USER_ID = "00000000-0000-0000-0000-000000000002"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def demo_categories() -> list[Category]:
    now = _now()
    return [
        Category(id="demo-cat-1", name="Electronics", description="Electronic devices and components", created_at=now),
        Category(id="demo-cat-2", name="Furniture", description="Office and workspace furniture", created_at=now),
        Category(id="demo-cat-3", name="Computer Accessories", description="Computer peripherals and accessories", created_at=now),
        Category(id="demo-cat-4", name="Office Equipment", description="General office equipment", created_at=now),
        Category(id="demo-cat-5", name="Appliances", description="Kitchen and office appliances", created_at=now),
        Category(id="demo-cat-6", name="Accessories", description="General accessories and supplies", created_at=now),
    ]


def demo_suppliers() -> list[Supplier]:
    now = _now()
    return [
        Supplier(
            id="demo-sup-1",
            name="Apple Inc.",
            contact_email="business@apple.com",
            contact_phone="+1-800-APL-CARE",
            address="One Apple Park Way, Cupertino, CA 95014, USA",
            created_at=now,
            updated_at=now,
        ),
        Supplier(
            id="demo-sup-2",
            name="Herman Miller",
            contact_email="sales@hermanmiller.com",
            contact_phone="+1-800-646-4400",
            address="855 East Main Avenue, Zeeland, MI 49464, USA",
            created_at=now,
            updated_at=now,
        ),
        Supplier(
            id="demo-sup-3",
            name="Logitech",
            contact_email="business@logitech.com",
            contact_phone="+1-646-454-3200",
            address="7700 Gateway Blvd, Newark, CA 94560, USA",
            created_at=now,
            updated_at=now,
        ),
    ]


def demo_items() -> list[InventoryItem]:
    now = _now()
    return [
        InventoryItem(
            id="demo-1",
            name='MacBook Pro 14"',
            sku="APPLE-MBP14-001",
            category_id="demo-cat-1",
            supplier_id="demo-sup-1",
            quantity=25,
            min_quantity=5,
            price=Decimal("1999.99"),
            description="Professional laptop for development and design work",
            created_at=now,
            updated_at=now,
            category=NameRef(name="Electronics"),
            supplier=NameRef(name="Apple Inc."),
        ),
        InventoryItem(
            id="demo-2",
            name="Office Chair Ergonomic",
            sku="FURN-CHAIR-002",
            category_id="demo-cat-2",
            supplier_id="demo-sup-2",
            quantity=12,
            min_quantity=10,
            price=Decimal("299.99"),
            description="Ergonomic office chair with lumbar support",
            created_at=now,
            updated_at=now,
            category=NameRef(name="Furniture"),
            supplier=NameRef(name="Herman Miller"),
        ),
        InventoryItem(
            id="demo-3",
            name="Wireless Mouse",
            sku="COMP-MOUSE-003",
            category_id="demo-cat-3",
            supplier_id="demo-sup-3",
            quantity=150,
            min_quantity=20,
            price=Decimal("49.99"),
            description="Wireless optical mouse with precision tracking",
            created_at=now,
            updated_at=now,
            category=NameRef(name="Computer Accessories"),
            supplier=NameRef(name="Logitech"),
        ),
    ]


def demo_order_items() -> list[OrderItem]:
    return [
        OrderItem(
            id="demo-item-1",
            order_id="demo-order-1",
            inventory_item_id="demo-1",
            quantity=1,
            unit_price=Decimal("1999.99"),
            total_price=Decimal("1999.99"),
            created_at=_now(),
            inventory_item=ItemRef(
                name='MacBook Pro 14"',
                sku="APPLE-MBP14-001",
                category=NameRef(name="Electronics"),
            ),
        ),
    ]


def demo_orders() -> list[Order]:
    now = _now()
    day = timedelta(days=1)
    return [
        Order(
            id="demo-order-1",
            order_number="ORD240001",
            customer_name="John Smith",
            customer_email="john@example.com",
            customer_phone="+1-555-0123",
            order_date=now,
            delivery_date=now + 3 * day,
            status="pending",
            total_amount=Decimal("2599.97"),
            notes="Urgent delivery requested",
            created_at=now,
            updated_at=now,
            order_items=demo_order_items(),
        ),
        Order(
            id="demo-order-2",
            order_number="ORD240002",
            customer_name="Sarah Johnson",
            customer_email="sarah@company.com",
            customer_phone="+1-555-0456",
            order_date=now - day,
            delivery_date=now + 2 * day,
            status="processing",
            total_amount=Decimal("899.99"),
            notes="",
            created_at=now - day,
            updated_at=now,
        ),
    ]


def demo_transactions() -> list[InventoryTransaction]:
    now = _now()
    return [
        InventoryTransaction(
            id="demo-tx-1",
            item_id="demo-1",
            user_id=ADMIN_USER_ID,
            transaction_type="create",
            quantity_change=0,
            previous_quantity=0,
            new_quantity=25,
            notes="Initial inventory setup",
            created_at=now,
            item=ItemRef(name='MacBook Pro 14"', sku="APPLE-MBP14-001"),
            user=UserRef(name="System Administrator", email="admin@logistx.com"),
        ),
        InventoryTransaction(
            id="demo-tx-2",
            item_id="demo-2",
            user_id=STAFF_USER_ID,
            transaction_type="add",
            quantity_change=12,
            previous_quantity=0,
            new_quantity=12,
            notes="Stock received from supplier",
            created_at=now - timedelta(days=1),
            item=ItemRef(name="Office Chair Ergonomic", sku="FURN-CHAIR-002"),
            user=UserRef(name="Inventory Staff", email="staff@logistx.com"),
        ),
    ]


def demo_users() -> list[UserProfile]:
    now = _now()
    return [
        UserProfile(
            id="demo-user-1",
            user_id=ADMIN_USER_ID,
            email="admin@logistx.com",
            name="System Administrator",
            role="admin",
            created_at=now,
            updated_at=now,
        ),
        UserProfile(
            id="demo-user-2",
            user_id=STAFF_USER_ID,
            email="staff@logistx.com",
            name="Inventory Staff",
            role="staff",
            created_at=now,
            updated_at=now,
        ),
    ]


_EMBEDDED = {"category", "supplier", "order_items", "inventory_item", "item", "user"}


def _plain(rows: list[Any]) -> list[dict[str, Any]]:
    return [r.model_dump(exclude=_EMBEDDED) for r in rows]


def demo_tables() -> dict[str, list[dict[str, Any]]]:
    """Demo dataset as plain table rows (no embedded joins), for seeding a store."""
    return {
        "categories": _plain(demo_categories()),
        "suppliers": _plain(demo_suppliers()),
        "profiles": _plain(demo_users()),
        "inventory_items": _plain(demo_items()),
        "orders": _plain(demo_orders()),
        "order_items": _plain(demo_order_items()),
        "inventory_transactions": _plain(demo_transactions()),
    }
