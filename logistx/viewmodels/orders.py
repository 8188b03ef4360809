"""Orders: creation with stock decrement, deletion with stock restore, status and revenue figures.

Order creation is a multi-write sequence (order, order lines, one stock update per line). If a
step after the order insert fails, the steps already applied are compensated in reverse before
the failure is reported, so a failed order leaves neither rows nor decremented stock behind.
"""

import random
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from logistx.config import LOAD_TIMEOUT_SECONDS, ORDER_NUMBER_MAX_ATTEMPTS, ORDER_NUMBER_PREFIX
from logistx.demo_data import demo_order_items, demo_orders
from logistx.models import (
    ORDER_STATUSES,
    InventoryItem,
    Order,
    OrderCreate,
    OrderItem,
    OrderStats,
    OperationResult,
)
from logistx.store import Embed, RecordNotFoundError, RemoteStore
from logistx.store.schema import CATEGORIES, INVENTORY_ITEMS, ORDER_ITEMS, ORDERS
from logistx.viewmodels.base import EntityViewModel, same_day, utcnow, validation_message
from logistx.viewmodels.inventory import InventoryViewModel
from logistx.viewmodels.notify import Notifier
from logistx.viewmodels.transactions import record_transaction

ORDER_ITEM_EMBED = Embed(
    "inventory_item",
    INVENTORY_ITEMS,
    ("name", "sku"),
    (Embed("category", CATEGORIES, ("name",)),),
)


def generate_order_number(
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    prefix: str = ORDER_NUMBER_PREFIX,
) -> str:
    """prefix + YYMMDD + 3-digit random suffix, e.g. ORD250314042."""
    now = now or utcnow()
    suffix = (rng or random).randint(0, 999)
    return f"{prefix}{now:%y%m%d}{suffix:03d}"


class OrderViewModel(EntityViewModel[Order]):
    """Orders with their lines (and each line's item name, SKU and category) embedded."""

    entity = "orders"
    table = ORDERS
    model = Order
    embed = (Embed("order_items", ORDER_ITEMS, (), (ORDER_ITEM_EMBED,)),)
    also_watch = (ORDER_ITEMS,)

    def __init__(
        self,
        store: RemoteStore,
        notifier: Notifier | None = None,
        *,
        inventory: InventoryViewModel | None = None,
        load_timeout: float = LOAD_TIMEOUT_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(store, notifier, load_timeout=load_timeout)
        self.inventory = inventory
        self.rng = rng

    def demo_rows(self) -> list[Order]:
        return demo_orders()

    async def _stock_item(self, item_id: str) -> Optional[InventoryItem]:
        """Current item: from the linked inventory cache when present, else from the store."""
        if self.inventory is not None:
            cached = self.inventory.find(item_id)
            if cached is not None:
                return cached
        rows = await self.store.select(INVENTORY_ITEMS, filters={"id": item_id})
        return InventoryItem.model_validate(rows[0]) if rows else None

    def _next_order_number(self, now: datetime) -> Optional[str]:
        taken = {o.order_number for o in self.rows}
        for attempt in range(ORDER_NUMBER_MAX_ATTEMPTS):
            number = generate_order_number(now, self.rng)
            if number not in taken:
                return number
            self.log.debug("orders.number.collision", order_number=number, attempt=attempt + 1)
        return None

    async def _set_stock(
        self,
        item_id: str,
        previous: int,
        new: int,
        *,
        actor: Optional[str],
        notes: str,
        applied: Optional[list[tuple[str, int, int]]] = None,
    ) -> None:
        """Write the new quantity, then its audit row. `applied` records the write before the audit."""
        await self.store.update(INVENTORY_ITEMS, {"quantity": new}, filters={"id": item_id})
        if applied is not None:
            applied.append((item_id, previous, new))
        await record_transaction(
            self.store,
            actor=actor,
            item_id=item_id,
            transaction_type="add" if new > previous else "remove",
            quantity_change=new - previous,
            previous_quantity=previous,
            new_quantity=new,
            notes=notes,
        )

    async def _refresh(self) -> None:
        if self.inventory is not None:
            await self.inventory.load()
        await self.load()

    async def create_order(
        self,
        payload: OrderCreate | dict[str, Any],
        *,
        actor: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> OperationResult:
        """Insert order + lines and decrement stock per line; compensates on partial failure."""
        try:
            data = self._coerce(payload, OrderCreate)
        except ValidationError as e:
            return self._invalid("create", validation_message(e))
        if not data.customer_name.strip() or not data.customer_email.strip():
            return self._invalid("create", "Please fill in all required fields")
        if not data.items:
            return self._invalid("create", "Order must contain at least one item")
        if any(not line.inventory_item_id or line.quantity <= 0 for line in data.items):
            return self._invalid("create", "Each order line needs an item and a positive quantity")
        now = now or utcnow()
        order_number = self._next_order_number(now)
        if order_number is None:
            return self._invalid("create", "Could not generate a unique order number")

        async def action() -> OperationResult:
            # resolve prices and starting stock before any write
            stock: dict[str, int] = {}
            lines = []
            for line in data.items:
                item = await self._stock_item(line.inventory_item_id)
                if item is None:
                    raise RecordNotFoundError(
                        f"Item not found: {line.inventory_item_id}", status_code=404, table=INVENTORY_ITEMS
                    )
                stock.setdefault(item.id, item.quantity)
                unit_price = line.unit_price if line.unit_price is not None else item.price
                lines.append(
                    {
                        "inventory_item_id": item.id,
                        "quantity": line.quantity,
                        "unit_price": unit_price,
                        "total_price": line.quantity * unit_price,
                    }
                )
            total = sum((ln["total_price"] for ln in lines), Decimal("0"))

            rows = await self.store.insert(
                ORDERS,
                {
                    "order_number": order_number,
                    "customer_name": data.customer_name.strip(),
                    "customer_email": data.customer_email.strip(),
                    "customer_phone": data.customer_phone,
                    "order_date": now,
                    "delivery_date": data.delivery_date,
                    "status": "pending",
                    "total_amount": total,
                    "notes": data.notes,
                },
            )
            order_id = rows[0]["id"]
            decremented: list[tuple[str, int, int]] = []
            try:
                await self.store.insert(ORDER_ITEMS, [{**ln, "order_id": order_id} for ln in lines])
                for ln in lines:
                    item_id = ln["inventory_item_id"]
                    previous = stock[item_id]
                    new = previous - ln["quantity"]
                    stock[item_id] = new
                    await self._set_stock(
                        item_id,
                        previous,
                        new,
                        actor=actor,
                        notes=f"Quantity decreased from {previous} to {new} for order {order_number}",
                        applied=decremented,
                    )
            except Exception:
                await self._compensate(order_id, order_number, decremented, actor=actor)
                await self._refresh()
                raise

            await self._refresh()
            created = self.find(order_id)
            return OperationResult.ok("Order created successfully!", data=created or rows[0])

        return await self._run(
            "create", action, "Failed to create order", order_number=order_number, lines=len(data.items)
        )

    async def _compensate(
        self,
        order_id: str,
        order_number: str,
        decremented: list[tuple[str, int, int]],
        *,
        actor: Optional[str],
    ) -> None:
        """Undo a partially created order: restore stock, then delete its lines and header."""
        self.log.warning("orders.create.compensating", order_id=order_id, restores=len(decremented))
        await self._undo_stock(decremented, actor=actor, reason=f"failed order {order_number}")
        for table, filters in ((ORDER_ITEMS, {"order_id": order_id}), (ORDERS, {"id": order_id})):
            try:
                await self.store.delete(table, filters=filters)
            except Exception as e:
                self.log.error("orders.compensate.delete_failed", table=table, order_id=order_id, error=str(e))

    async def _undo_stock(self, applied: list[tuple[str, int, int]], *, actor: Optional[str], reason: str) -> None:
        for item_id, previous, new in reversed(applied):
            try:
                await self._set_stock(
                    item_id,
                    new,
                    previous,
                    actor=actor,
                    notes=f"Quantity restored from {new} to {previous} after {reason}",
                )
            except Exception as e:
                self.log.error("orders.compensate.stock_failed", item_id=item_id, error=str(e))

    async def update_status(self, order_id: str, status: str) -> OperationResult:
        if status not in ORDER_STATUSES:
            return self._invalid("update_status", f"Invalid order status: {status}")

        async def action() -> OperationResult:
            await self.store.update(ORDERS, {"status": status}, filters={"id": order_id})
            await self.load()
            return OperationResult.ok("Order status updated successfully!", data=self.find(order_id))

        return await self._run("update_status", action, "Failed to update order status", order_id=order_id, status=status)

    async def delete_order(self, order_id: str, *, actor: Optional[str] = None) -> OperationResult:
        """Restore stock for every line, then delete the lines, then the order.

        A failure before the lines are gone undoes the restores, so a retry restores stock once.
        Once the lines are deleted the stock is settled; a retry only removes the header.
        """
        order = self.find(order_id)
        if order is None:
            return self._invalid("delete", "Order not found")

        async def action() -> OperationResult:
            lines = await self.store.select(ORDER_ITEMS, filters={"order_id": order_id})
            stock: dict[str, int] = {}
            restored: list[tuple[str, int, int]] = []
            try:
                for line in lines:
                    item_id = line["inventory_item_id"]
                    if item_id not in stock:
                        item = await self._stock_item(item_id)
                        if item is None:
                            self.log.warning("orders.delete.item_missing", order_id=order_id, item_id=item_id)
                            continue
                        stock[item_id] = item.quantity
                    previous = stock[item_id]
                    new = previous + line["quantity"]
                    stock[item_id] = new
                    await self._set_stock(
                        item_id,
                        previous,
                        new,
                        actor=actor,
                        notes=f"Quantity increased from {previous} to {new} for deleted order {order.order_number}",
                        applied=restored,
                    )
                await self.store.delete(ORDER_ITEMS, filters={"order_id": order_id})
            except Exception:
                self.log.warning("orders.delete.compensating", order_id=order_id, restores=len(restored))
                await self._undo_stock(restored, actor=actor, reason=f"failed deletion of order {order.order_number}")
                await self._refresh()
                raise
            await self.store.delete(ORDERS, filters={"id": order_id})
            await self._refresh()
            return OperationResult.ok("Order deleted successfully!")

        return await self._run("delete", action, "Failed to delete order", order_id=order_id)

    async def fetch_order_items(self, order_id: str) -> list[OrderItem]:
        """Lines of one order, read from the store; the demo lines for that order on failure."""
        try:
            rows = await self.store.select(ORDER_ITEMS, filters={"order_id": order_id}, embed=(ORDER_ITEM_EMBED,))
        except Exception as e:
            self.log.warning("orders.items.fallback", order_id=order_id, error=str(e))
            return [i for i in demo_order_items() if i.order_id == order_id]
        return [OrderItem.model_validate(r) for r in rows]

    def today_orders(self, now: Optional[datetime] = None) -> list[Order]:
        now = now or utcnow()
        return [o for o in self.rows if same_day(o.order_date, now)]

    def order_stats(self, now: Optional[datetime] = None) -> OrderStats:
        statuses = [o.status for o in self.rows]
        return OrderStats(
            total=len(self.rows),
            pending=statuses.count("pending"),
            processing=statuses.count("processing"),
            shipped=statuses.count("shipped"),
            delivered=statuses.count("delivered"),
            cancelled=statuses.count("cancelled"),
            today=len(self.today_orders(now)),
            total_revenue=sum((o.total_amount for o in self.rows), Decimal("0")),
        )

    def search(self, term: str = "", status: Optional[str] = None) -> list[Order]:
        """Order number / customer name / email substring match, optionally one status."""
        needle = term.strip().lower()
        out = []
        for order in self.rows:
            haystack = (order.order_number, order.customer_name, order.customer_email)
            if needle and not any(needle in field.lower() for field in haystack):
                continue
            if status and status != "all" and order.status != status:
                continue
            out.append(order)
        return out
