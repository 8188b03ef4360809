"""Tests for the in-memory store: CRUD, filters, embedded joins and change events."""

import asyncio
import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from logistx.store import ChangeFeed, Embed, MemoryStore, StoreError
from logistx.store.schema import render_select

CATEGORY = Embed("category", "categories", ("name",))
ORDER_LINES = Embed(
    "order_items",
    "order_items",
    (),
    (Embed("inventory_item", "inventory_items", ("name", "sku"), (CATEGORY,)),),
)


class TestMemoryStore(unittest.TestCase):
    def test_insert_generates_id_and_timestamps(self):
        store = MemoryStore()

        async def run():
            rows = await store.insert("suppliers", {"name": "Acme"})
            self.assertEqual(len(rows), 1)
            self.assertTrue(rows[0]["id"])
            self.assertIsNotNone(rows[0]["created_at"])
            self.assertIsNotNone(rows[0]["updated_at"])
            self.assertEqual(await store.count("suppliers"), 1)

        asyncio.run(run())

    def test_duplicate_id_rejected(self):
        store = MemoryStore({"categories": [{"id": "c1", "name": "A"}]})
        with self.assertRaises(StoreError):
            asyncio.run(store.insert("categories", {"id": "c1", "name": "B"}))

    def test_unknown_table(self):
        with self.assertRaises(ValueError):
            asyncio.run(MemoryStore().select("nope"))

    def test_rows_are_copies(self):
        store = MemoryStore({"categories": [{"id": "c1", "name": "A"}]})
        rows = asyncio.run(store.select("categories"))
        rows[0]["name"] = "changed"
        self.assertEqual(asyncio.run(store.select("categories"))[0]["name"], "A")

    def test_filter_order_limit(self):
        store = MemoryStore(
            {
                "inventory_items": [
                    {"id": "a", "name": "A", "sku": "A", "quantity": 3, "price": Decimal("1")},
                    {"id": "b", "name": "B", "sku": "B", "quantity": 1, "price": Decimal("1")},
                    {"id": "c", "name": "C", "sku": "C", "quantity": 2, "price": Decimal("2")},
                ]
            }
        )

        async def run():
            rows = await store.select("inventory_items", order_by="quantity")
            self.assertEqual([r["id"] for r in rows], ["b", "c", "a"])
            rows = await store.select("inventory_items", order_by="quantity", descending=True, limit=2)
            self.assertEqual([r["id"] for r in rows], ["a", "c"])
            rows = await store.select("inventory_items", filters={"price": Decimal("1")})
            self.assertEqual({r["id"] for r in rows}, {"a", "b"})

        asyncio.run(run())

    def test_many_to_one_and_nested_embeds(self):
        store = MemoryStore.with_demo_data()

        async def run():
            items = await store.select("inventory_items", filters={"id": "demo-1"}, embed=(CATEGORY,))
            self.assertEqual(items[0]["category"], {"name": "Electronics"})
            orders = await store.select("orders", embed=(ORDER_LINES,), order_by="order_number")
            first, second = orders
            self.assertEqual(len(first["order_items"]), 1)
            line = first["order_items"][0]
            self.assertEqual(line["inventory_item"]["sku"], "APPLE-MBP14-001")
            self.assertEqual(line["inventory_item"]["category"], {"name": "Electronics"})
            self.assertEqual(second["order_items"], [])

        asyncio.run(run())

    def test_missing_reference_embeds_none(self):
        store = MemoryStore({"inventory_items": [{"id": "x", "name": "X", "sku": "X", "category_id": None}]})
        rows = asyncio.run(store.select("inventory_items", embed=(CATEGORY,)))
        self.assertIsNone(rows[0]["category"])

    def test_render_select(self):
        self.assertEqual(render_select((CATEGORY,)), "*,category:categories(name)")
        self.assertEqual(
            render_select((ORDER_LINES,)),
            "*,order_items(*,inventory_item:inventory_items(name,sku,category:categories(name)))",
        )

    def test_update_and_delete_publish_events(self):
        feed = ChangeFeed()
        store = MemoryStore({"categories": [{"id": "c1", "name": "A"}]}, feed=feed)
        events = []

        async def handler(event):
            events.append(event)

        sub = store.subscribe("categories", handler)

        async def run():
            updated = await store.update("categories", {"name": "B"}, filters={"id": "c1"})
            self.assertEqual(updated[0]["name"], "B")
            removed = await store.delete("categories", filters={"id": "c1"})
            self.assertEqual(len(removed), 1)
            await store.insert("suppliers", {"name": "not watched"})

        asyncio.run(run())
        self.assertEqual([e.type for e in events], ["UPDATE", "DELETE"])
        self.assertEqual(events[0].old_record["name"], "A")
        self.assertEqual(events[0].record["name"], "B")
        self.assertEqual(events[1].old_record["id"], "c1")

        sub.unsubscribe()
        sub.unsubscribe()
        self.assertEqual(feed.subscriber_count("categories"), 0)

    def test_update_bumps_updated_at(self):
        store = MemoryStore()

        async def run():
            row = (await store.insert("suppliers", {"name": "Acme"}))[0]
            await asyncio.sleep(0.001)
            updated = (await store.update("suppliers", {"name": "Acme 2"}, filters={"id": row["id"]}))[0]
            self.assertGreater(updated["updated_at"], row["updated_at"])
            self.assertEqual(updated["created_at"], row["created_at"])

        asyncio.run(run())

    def test_failing_handler_does_not_break_writes(self):
        store = MemoryStore()
        seen = []

        async def bad(event):
            raise RuntimeError("handler failed")

        async def good(event):
            seen.append(event.type)

        store.subscribe("categories", bad)
        store.subscribe("categories", good)
        rows = asyncio.run(store.insert("categories", {"name": "A"}))
        self.assertEqual(len(rows), 1)
        self.assertEqual(seen, ["INSERT"])


if __name__ == "__main__":
    unittest.main()
