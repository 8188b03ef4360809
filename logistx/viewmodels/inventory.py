"""Inventory items: CRUD with audit rows on quantity changes, plus stock aggregates."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from logistx.config import DEFAULT_MIN_QUANTITY, TOP_PRODUCTS_LIMIT
from logistx.demo_data import demo_items
from logistx.models import (
    CategoryBreakdown,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemPatch,
    OperationResult,
    TopProduct,
)
from logistx.store import Embed
from logistx.store.schema import CATEGORIES, INVENTORY_ITEMS, SUPPLIERS
from logistx.viewmodels.base import EntityViewModel, validation_message
from logistx.viewmodels.transactions import record_transaction

UNCATEGORIZED = "Uncategorized"


class InventoryViewModel(EntityViewModel[InventoryItem]):
    """Inventory item list with category/supplier names embedded, newest first."""

    entity = "inventory"
    table = INVENTORY_ITEMS
    model = InventoryItem
    embed = (
        Embed("category", CATEGORIES, ("name",)),
        Embed("supplier", SUPPLIERS, ("name",)),
    )
    also_watch = (CATEGORIES, SUPPLIERS)

    def demo_rows(self) -> list[InventoryItem]:
        return demo_items()

    def find_by_sku(self, sku: str) -> Optional[InventoryItem]:
        key = sku.strip().lower()
        return next((i for i in self.rows if i.sku.strip().lower() == key), None)

    async def create_item(
        self, payload: InventoryItemCreate | dict[str, Any], *, actor: Optional[str] = None
    ) -> OperationResult:
        """Insert an item; with an actor, also append a `create` transaction."""
        try:
            data = self._coerce(payload, InventoryItemCreate)
        except ValidationError as e:
            return self._invalid("create", validation_message(e))
        if not data.name.strip() or not data.sku.strip() or data.quantity is None or data.price is None:
            return self._invalid("create", "Please fill in all required fields")
        if data.price < 0:
            return self._invalid("create", "Price must not be negative")
        if self.find_by_sku(data.sku):
            return self._invalid("create", f"An item with SKU {data.sku.strip()} already exists")

        values = data.values()
        values["name"] = data.name.strip()
        values["sku"] = data.sku.strip()
        if data.min_quantity is None:
            values["min_quantity"] = DEFAULT_MIN_QUANTITY

        async def action() -> OperationResult:
            rows = await self.store.insert(self.table, values)
            created = rows[0]
            await record_transaction(
                self.store,
                actor=actor,
                item_id=created["id"],
                transaction_type="create",
                quantity_change=0,
                previous_quantity=0,
                new_quantity=data.quantity,
                notes=f"New item created with initial quantity of {data.quantity}",
            )
            await self.load()
            return OperationResult.ok("Item added successfully!", data=self.find(created["id"]) or created)

        return await self._run("create", action, "Failed to add item", sku=values["sku"])

    async def update_item(
        self,
        item_id: str,
        patch: InventoryItemPatch | dict[str, Any],
        *,
        actor: Optional[str] = None,
    ) -> OperationResult:
        """Apply a patch; a quantity change appends an `add`/`remove` transaction."""
        try:
            data = self._coerce(patch, InventoryItemPatch)
        except ValidationError as e:
            return self._invalid("update", validation_message(e))
        current = self.find(item_id)
        if current is None:
            return self._invalid("update", "Item not found")
        values = data.values()
        if not values:
            return self._invalid("update", "Nothing to update")
        for field in ("name", "sku"):
            if field in values:
                values[field] = values[field].strip()
                if not values[field]:
                    return self._invalid("update", "Please fill in all required fields")
        if values.get("price") is not None and values["price"] < 0:
            return self._invalid("update", "Price must not be negative")
        if "sku" in values:
            clash = self.find_by_sku(values["sku"])
            if clash is not None and clash.id != item_id:
                return self._invalid("update", f"An item with SKU {values['sku']} already exists")

        async def action() -> OperationResult:
            await self.store.update(self.table, values, filters={"id": item_id})
            new_quantity = values.get("quantity")
            if new_quantity is not None and new_quantity != current.quantity:
                delta = new_quantity - current.quantity
                kind = "add" if delta > 0 else "remove"
                verb = "increased" if delta > 0 else "decreased"
                await record_transaction(
                    self.store,
                    actor=actor,
                    item_id=item_id,
                    transaction_type=kind,
                    quantity_change=delta,
                    previous_quantity=current.quantity,
                    new_quantity=new_quantity,
                    notes=f"Quantity {verb} from {current.quantity} to {new_quantity}",
                )
            await self.load()
            return OperationResult.ok("Item updated successfully!", data=self.find(item_id))

        return await self._run("update", action, "Failed to update item", item_id=item_id)

    async def adjust_stock(
        self,
        item_id: str,
        delta: int,
        *,
        actor: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OperationResult:
        """Move stock by delta units and append an `adjust` transaction."""
        current = self.find(item_id)
        if current is None:
            return self._invalid("adjust", "Item not found")
        if delta == 0:
            return self._invalid("adjust", "Adjustment must change the quantity")
        new_quantity = current.quantity + delta

        async def action() -> OperationResult:
            await self.store.update(self.table, {"quantity": new_quantity}, filters={"id": item_id})
            await record_transaction(
                self.store,
                actor=actor,
                item_id=item_id,
                transaction_type="adjust",
                quantity_change=delta,
                previous_quantity=current.quantity,
                new_quantity=new_quantity,
                notes=notes or f"Stock adjusted from {current.quantity} to {new_quantity}",
            )
            await self.load()
            return OperationResult.ok("Stock updated successfully!", data=self.find(item_id))

        return await self._run("adjust", action, "Failed to update stock", item_id=item_id, delta=delta)

    async def delete_item(self, item_id: str, *, actor: Optional[str] = None) -> OperationResult:
        """Delete an item; with an actor, append a terminal `delete` transaction."""
        current = self.find(item_id)
        if current is None:
            return self._invalid("delete", "Item not found")

        async def action() -> OperationResult:
            await self.store.delete(self.table, filters={"id": item_id})
            await record_transaction(
                self.store,
                actor=actor,
                item_id=item_id,
                transaction_type="delete",
                quantity_change=0,
                previous_quantity=current.quantity,
                new_quantity=0,
                notes="Item deleted from inventory",
            )
            await self.load()
            return OperationResult.ok("Item deleted successfully!")

        return await self._run("delete", action, "Failed to delete item", item_id=item_id)

    # Derived aggregates, recomputed from the cache on every call

    def low_stock_items(self) -> list[InventoryItem]:
        return [i for i in self.rows if i.is_low_stock]

    def total_value(self) -> Decimal:
        return sum((i.line_value for i in self.rows), Decimal("0"))

    def category_breakdown(self) -> list[CategoryBreakdown]:
        """Units and value per category name, in first-seen order."""
        groups: dict[str, CategoryBreakdown] = {}
        for item in self.rows:
            name = item.category_name or UNCATEGORIZED
            group = groups.setdefault(name, CategoryBreakdown(name=name))
            group.count += item.quantity
            group.value += item.line_value
        return list(groups.values())

    def top_products(self, limit: int = TOP_PRODUCTS_LIMIT) -> list[TopProduct]:
        ranked = sorted(self.rows, key=lambda i: i.line_value, reverse=True)[:limit]
        return [TopProduct(name=i.name, quantity=i.quantity, value=i.line_value) for i in ranked]

    def search(self, term: str = "", category: Optional[str] = None) -> list[InventoryItem]:
        """Case-insensitive name/SKU substring match, optionally limited to one category name."""
        needle = term.strip().lower()
        out = []
        for item in self.rows:
            if needle and needle not in item.name.lower() and needle not in item.sku.lower():
                continue
            if category and category != "all" and (item.category_name or UNCATEGORIZED) != category:
                continue
            out.append(item)
        return out
