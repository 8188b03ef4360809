"""Tests for InventoryViewModel: loading with demo fallback, writes with audit rows, aggregates."""

import asyncio
import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from logistx.demo_data import ADMIN_USER_ID, demo_tables
from logistx.store import MemoryStore, StoreError, StoreUnavailableError
from logistx.viewmodels import CollectingNotifier, InventoryViewModel


class FlakyStore(MemoryStore):
    """MemoryStore whose reads can be made slow or failing, and whose writes can be rejected."""

    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.fail_reads = False
        self.reject_writes = False

    async def select(self, table, **kwargs):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_reads:
            raise StoreUnavailableError("connection refused", table=table)
        return await super().select(table, **kwargs)

    async def update(self, table, values, *, filters):
        if self.reject_writes:
            raise StoreError("permission denied for table " + table, status_code=403, table=table)
        return await super().update(table, values, filters=filters)


def _seeded() -> FlakyStore:
    return FlakyStore(demo_tables())


class TestLoading(unittest.TestCase):
    def test_initial_load_failure_uses_demo_data(self):
        store = FlakyStore()
        store.fail_reads = True
        vm = InventoryViewModel(store)

        asyncio.run(vm.start())
        self.assertTrue(vm.using_demo)
        self.assertFalse(vm.loading)
        self.assertEqual({i.id for i in vm.rows}, {"demo-1", "demo-2", "demo-3"})
        self.assertIsNone(vm.last_loaded_at)

    def test_initial_load_timeout_uses_demo_data(self):
        store = FlakyStore(delay=0.5)
        vm = InventoryViewModel(store, load_timeout=0.05)

        asyncio.run(vm.start())
        self.assertTrue(vm.using_demo)
        self.assertEqual(len(vm.rows), 3)

    def test_successful_load_replaces_cache(self):
        store = _seeded()
        vm = InventoryViewModel(store)

        async def run():
            self.assertTrue(await vm.load(initial=True))
            first = [i.model_dump() for i in vm.rows]
            self.assertTrue(await vm.load())
            self.assertEqual([i.model_dump() for i in vm.rows], first)

        asyncio.run(run())
        self.assertFalse(vm.using_demo)
        self.assertIsNotNone(vm.last_loaded_at)
        mouse = vm.find("demo-3")
        self.assertEqual(mouse.category_name, "Computer Accessories")
        self.assertEqual(mouse.supplier_name, "Logitech")

    def test_empty_store_is_not_demo(self):
        vm = InventoryViewModel(MemoryStore())
        asyncio.run(vm.start())
        self.assertFalse(vm.using_demo)
        self.assertEqual(vm.rows, [])

    def test_refresh_failure_keeps_cache(self):
        store = _seeded()
        vm = InventoryViewModel(store)

        async def run():
            await vm.start()
            store.fail_reads = True
            self.assertFalse(await vm.load())

        asyncio.run(run())
        self.assertFalse(vm.using_demo)
        self.assertEqual(len(vm.rows), 3)

    def test_change_notification_triggers_reload(self):
        store = MemoryStore()
        vm = InventoryViewModel(store)

        async def run():
            await vm.start()
            self.assertEqual(vm.rows, [])
            await store.insert("inventory_items", {"name": "Cable", "sku": "CAB-1", "quantity": 4, "price": Decimal("3.00")})
            self.assertEqual([i.sku for i in vm.rows], ["CAB-1"])
            cat = (await store.insert("categories", {"name": "Cables"}))[0]
            await store.update("inventory_items", {"category_id": cat["id"]}, filters={"sku": "CAB-1"})
            self.assertEqual(vm.rows[0].category_name, "Cables")
            vm.close()
            await store.insert("inventory_items", {"name": "Plug", "sku": "PLG-1", "quantity": 1, "price": Decimal("1")})
            self.assertEqual(len(vm.rows), 1)

        asyncio.run(run())


class TestWrites(unittest.TestCase):
    def setUp(self):
        self.store = _seeded()
        self.notifier = CollectingNotifier()
        self.vm = InventoryViewModel(self.store, self.notifier)
        asyncio.run(self.vm.start())

    async def _transactions(self):
        return await self.store.select("inventory_transactions", order_by="created_at")

    def test_quantity_decrease_records_remove(self):
        async def run():
            before = len(await self._transactions())
            result = await self.vm.update_item("demo-1", {"quantity": 20}, actor=ADMIN_USER_ID)
            self.assertTrue(result.success)
            self.assertEqual(result.message, "Item updated successfully!")
            txs = await self._transactions()
            self.assertEqual(len(txs), before + 1)
            tx = txs[-1]
            self.assertEqual(tx["transaction_type"], "remove")
            self.assertEqual(tx["quantity_change"], 5)
            self.assertEqual(tx["previous_quantity"], 25)
            self.assertEqual(tx["new_quantity"], 20)
            self.assertEqual(tx["notes"], "Quantity decreased from 25 to 20")
            self.assertEqual(tx["user_id"], ADMIN_USER_ID)

        asyncio.run(run())
        self.assertEqual(self.vm.find("demo-1").quantity, 20)
        self.assertEqual(self.notifier.successes, ["Item updated successfully!"])

    def test_quantity_increase_records_add(self):
        async def run():
            await self.vm.update_item("demo-2", {"quantity": 30}, actor=ADMIN_USER_ID)
            tx = (await self._transactions())[-1]
            self.assertEqual(tx["transaction_type"], "add")
            self.assertEqual(tx["quantity_change"], 18)

        asyncio.run(run())

    def test_non_quantity_update_writes_no_audit_row(self):
        async def run():
            before = len(await self._transactions())
            result = await self.vm.update_item("demo-1", {"price": "1899.99"}, actor=ADMIN_USER_ID)
            self.assertTrue(result.success)
            self.assertEqual(len(await self._transactions()), before)

        asyncio.run(run())
        self.assertEqual(self.vm.find("demo-1").price, Decimal("1899.99"))

    def test_no_actor_skips_audit_row(self):
        async def run():
            before = len(await self._transactions())
            result = await self.vm.update_item("demo-1", {"quantity": 1})
            self.assertTrue(result.success)
            self.assertEqual(len(await self._transactions()), before)

        asyncio.run(run())

    def test_create_and_delete_write_audit_rows(self):
        async def run():
            result = await self.vm.create_item(
                {"name": "USB Hub", "sku": "HUB-1", "quantity": 7, "price": "19.90"}, actor=ADMIN_USER_ID
            )
            self.assertTrue(result.success)
            self.assertEqual(result.message, "Item added successfully!")
            created = self.vm.find_by_sku("hub-1")
            self.assertIsNotNone(created)
            self.assertEqual(created.min_quantity, 10)
            tx = (await self._transactions())[-1]
            self.assertEqual(tx["transaction_type"], "create")
            self.assertEqual(tx["new_quantity"], 7)
            self.assertEqual(tx["notes"], "New item created with initial quantity of 7")

            result = await self.vm.delete_item(created.id, actor=ADMIN_USER_ID)
            self.assertTrue(result.success)
            tx = (await self._transactions())[-1]
            self.assertEqual(tx["transaction_type"], "delete")
            self.assertEqual(tx["previous_quantity"], 7)
            self.assertEqual(tx["new_quantity"], 0)
            self.assertIsNone(self.vm.find(created.id))

        asyncio.run(run())

    def test_adjust_stock(self):
        async def run():
            result = await self.vm.adjust_stock("demo-3", -10, actor=ADMIN_USER_ID, notes="Damaged in transit")
            self.assertTrue(result.success)
            tx = (await self._transactions())[-1]
            self.assertEqual(tx["transaction_type"], "adjust")
            self.assertEqual(tx["quantity_change"], 10)
            self.assertEqual(tx["notes"], "Damaged in transit")
            self.assertFalse((await self.vm.adjust_stock("demo-3", 0)).success)

        asyncio.run(run())
        self.assertEqual(self.vm.find("demo-3").quantity, 140)

    def test_validation_failures(self):
        async def run():
            missing = await self.vm.create_item({"name": "No SKU", "quantity": 1, "price": "1"})
            self.assertFalse(missing.success)
            self.assertEqual(missing.error, "Please fill in all required fields")
            negative = await self.vm.create_item({"name": "N", "sku": "N-1", "quantity": 1, "price": "-1"})
            self.assertEqual(negative.error, "Price must not be negative")
            dup = await self.vm.create_item({"name": "Dup", "sku": "APPLE-MBP14-001", "quantity": 1, "price": "1"})
            self.assertEqual(dup.error, "An item with SKU APPLE-MBP14-001 already exists")
            unknown = await self.vm.update_item("nope", {"quantity": 1})
            self.assertEqual(unknown.error, "Item not found")
            sku_clash = await self.vm.update_item("demo-1", {"sku": "furn-chair-002"})
            self.assertEqual(sku_clash.error, "An item with SKU furn-chair-002 already exists")

        asyncio.run(run())
        self.assertEqual(len(self.vm.rows), 3)
        self.assertEqual(len(self.notifier.errors), 5)
        self.assertEqual(self.vm.find("demo-1").sku, "APPLE-MBP14-001")

    def test_null_patch_is_rejected_and_store_untouched(self):
        async def run():
            result = await self.vm.update_item("demo-1", {"quantity": None})
            self.assertFalse(result.success)
            self.assertIn("quantity cannot be null", result.error)
            stored = await self.store.select("inventory_items", filters={"id": "demo-1"})
            self.assertEqual(stored[0]["quantity"], 25)
            await self.vm.load()

        asyncio.run(run())
        self.assertFalse(self.vm.using_demo)
        self.assertEqual(self.vm.find("demo-1").quantity, 25)

    def test_sku_can_change_to_an_unused_value(self):
        async def run():
            same = await self.vm.update_item("demo-1", {"sku": "apple-mbp14-001"})
            self.assertTrue(same.success)
            renamed = await self.vm.update_item("demo-1", {"sku": " APPLE-MBP14-002 "})
            self.assertTrue(renamed.success)

        asyncio.run(run())
        self.assertEqual(self.vm.find("demo-1").sku, "APPLE-MBP14-002")

    def test_rejected_write_reports_store_message(self):
        self.store.reject_writes = True
        result = asyncio.run(self.vm.update_item("demo-1", {"quantity": 3}, actor=ADMIN_USER_ID))
        self.assertFalse(result.success)
        self.assertEqual(result.error, "permission denied for table inventory_items")
        self.assertEqual(self.notifier.errors, ["permission denied for table inventory_items"])
        self.assertEqual(self.vm.find("demo-1").quantity, 25)


class TestAggregates(unittest.TestCase):
    def setUp(self):
        self.vm = InventoryViewModel(_seeded())
        asyncio.run(self.vm.start())

    def test_low_stock_and_total_value(self):
        self.assertEqual([], [i.id for i in self.vm.low_stock_items()])
        asyncio.run(self.vm.update_item("demo-2", {"quantity": 10}))
        self.assertEqual(["demo-2"], [i.id for i in self.vm.low_stock_items()])
        expected = Decimal("25") * Decimal("1999.99") + 10 * Decimal("299.99") + 150 * Decimal("49.99")
        self.assertEqual(self.vm.total_value(), expected)

    def test_zero_quantity_item_leaves_total_value_unchanged(self):
        before = self.vm.total_value()
        result = asyncio.run(self.vm.create_item({"name": "Spare", "sku": "SPR-0", "quantity": 0, "price": "999.99"}))
        self.assertTrue(result.success)
        self.assertEqual(self.vm.total_value(), before)
        self.assertEqual(self.vm.low_stock_items(), [i for i in self.vm.rows if i.quantity <= i.min_quantity])

    def test_category_breakdown_and_top_products(self):
        breakdown = {c.name: c for c in self.vm.category_breakdown()}
        self.assertEqual(breakdown["Electronics"].count, 25)
        self.assertEqual(breakdown["Electronics"].value, Decimal("49999.75"))
        top = self.vm.top_products(2)
        self.assertEqual([p.name for p in top], ['MacBook Pro 14"', "Wireless Mouse"])

    def test_search(self):
        self.assertEqual([i.id for i in self.vm.search("mouse")], ["demo-3"])
        self.assertEqual([i.id for i in self.vm.search("furn")], ["demo-2"])
        self.assertEqual([i.id for i in self.vm.search("", "Electronics")], ["demo-1"])
        self.assertEqual(len(self.vm.search("", "all")), 3)


if __name__ == "__main__":
    unittest.main()
