"""Tests for SqlStore on a temporary SQLite file: seeding, CRUD, embeds, counts and change events."""

import asyncio
import sys
import tempfile
import unittest
from datetime import datetime
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from logistx.dashboard import Dashboard
from logistx.store import Embed, StoreError
from logistx.store.sql import SqlStore
from logistx.viewmodels.orders import ORDER_ITEM_EMBED


class TestSqlStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.url = f"sqlite:///{Path(self._tmp.name) / 'logistx.db'}"
        self.store = SqlStore(self.url, seed=True)

    def tearDown(self):
        asyncio.run(self.store.aclose())
        self._tmp.cleanup()

    def test_seed_counts_and_idempotence(self):
        async def run():
            self.assertEqual(await self.store.count("inventory_items"), 3)
            self.assertEqual(await self.store.count("categories"), 6)
            self.assertEqual(await self.store.count("profiles"), 2)
            self.assertEqual(await self.store.count("orders", filters={"status": "pending"}), 1)

        asyncio.run(run())
        again = SqlStore(self.url, seed=True)
        self.assertEqual(asyncio.run(again.count("categories")), 6)
        asyncio.run(again.aclose())

    def test_select_embeds_decimals_and_aware_datetimes(self):
        async def run():
            rows = await self.store.select(
                "inventory_items",
                embed=(Embed("category", "categories", ("name",)), Embed("supplier", "suppliers", ("name",))),
                order_by="price",
                descending=True,
            )
            self.assertEqual([r["sku"] for r in rows][0], "APPLE-MBP14-001")
            self.assertEqual(rows[0]["category"], {"name": "Electronics"})
            self.assertEqual(rows[0]["supplier"], {"name": "Apple Inc."})
            self.assertIsInstance(rows[0]["price"], Decimal)
            self.assertEqual(rows[0]["price"], Decimal("1999.99"))
            self.assertIsInstance(rows[0]["created_at"], datetime)
            self.assertIsNotNone(rows[0]["created_at"].tzinfo)

            lines = await self.store.select("order_items", filters={"order_id": "demo-order-1"}, embed=(ORDER_ITEM_EMBED,))
            self.assertEqual(lines[0]["inventory_item"]["category"], {"name": "Electronics"})

            limited = await self.store.select("categories", order_by="name", limit=2)
            self.assertEqual([r["name"] for r in limited], ["Accessories", "Appliances"])

        asyncio.run(run())

    def test_writes_publish_events(self):
        events = []

        async def handler(event):
            events.append(event)

        self.store.subscribe("suppliers", handler)

        async def run():
            row = (await self.store.insert("suppliers", {"name": "Dell", "contact_email": "sales@dell.com"}))[0]
            self.assertEqual(len(row["id"]), 36)
            updated = await self.store.update("suppliers", {"contact_phone": "+1-800"}, filters={"id": row["id"]})
            self.assertEqual(updated[0]["contact_phone"], "+1-800")
            self.assertGreaterEqual(updated[0]["updated_at"], row["updated_at"])
            removed = await self.store.delete("suppliers", filters={"id": row["id"]})
            self.assertEqual(removed[0]["name"], "Dell")
            self.assertEqual(await self.store.count("suppliers"), 3)

        asyncio.run(run())
        self.assertEqual([e.type for e in events], ["INSERT", "UPDATE", "DELETE"])
        self.assertIsNone(events[0].old_record)
        self.assertEqual(events[1].old_record["contact_phone"], None)

    def test_errors(self):
        with self.assertRaises(StoreError) as ctx:
            asyncio.run(self.store.select("inventory_items", filters={"colour": "red"}))
        self.assertEqual(ctx.exception.status_code, 400)
        with self.assertRaises(StoreError) as ctx:
            asyncio.run(self.store.insert("categories", {"id": "demo-cat-1", "name": "Duplicate"}))
        self.assertEqual(ctx.exception.status_code, 409)
        with self.assertRaises(ValueError):
            asyncio.run(self.store.count("nope"))

    def test_dashboard_over_sql(self):
        dashboard = Dashboard(self.store)

        async def run():
            await dashboard.start()
            self.assertFalse(dashboard.using_demo)
            result = await dashboard.inventory.update_item("demo-3", {"quantity": 140}, actor="00000000-0000-0000-0000-000000000001")
            self.assertTrue(result.success, result.error)
            status = await dashboard.status()
            self.assertTrue(status.connected)
            self.assertEqual(status.items, 3)

        asyncio.run(run())
        self.assertEqual(dashboard.inventory.find("demo-3").quantity, 140)
        tx = dashboard.transactions.rows[0]
        self.assertEqual(tx.transaction_type, "remove")
        self.assertEqual(tx.user.name, "System Administrator")
        dashboard.close()


if __name__ == "__main__":
    unittest.main()
