"""Tests for entity, payload and result models."""

import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from logistx.models import (
    CategoryPatch,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemPatch,
    OperationResult,
    Order,
    OrderCreate,
    SupplierPatch,
    UserProfilePatch,
)


def _item(**overrides) -> InventoryItem:
    values = {"id": "i1", "name": "Widget", "sku": "W-1", "quantity": 5, "min_quantity": 5, "price": "2.50"}
    values.update(overrides)
    return InventoryItem.model_validate(values)


class TestInventoryItem(unittest.TestCase):
    def test_low_stock_is_inclusive_of_threshold(self):
        self.assertTrue(_item(quantity=5, min_quantity=5).is_low_stock)
        self.assertTrue(_item(quantity=0, min_quantity=5).is_low_stock)
        self.assertFalse(_item(quantity=6, min_quantity=5).is_low_stock)

    def test_line_value_is_exact_decimal(self):
        item = _item(quantity=3, price="0.10")
        self.assertEqual(item.line_value, Decimal("0.30"))

    def test_embedded_names(self):
        item = _item(category={"name": "Tools"}, supplier=None)
        self.assertEqual(item.category_name, "Tools")
        self.assertIsNone(item.supplier_name)

    def test_negative_quantity_is_not_clamped(self):
        self.assertEqual(_item(quantity=-4).quantity, -4)

    def test_unknown_columns_ignored(self):
        item = _item(extra_column="x")
        self.assertFalse(hasattr(item, "extra_column"))


class TestPayloads(unittest.TestCase):
    def test_patch_rejects_explicit_null_for_required_columns(self):
        for field in ("name", "sku", "quantity", "min_quantity", "price"):
            with self.assertRaises(ValidationError):
                InventoryItemPatch.model_validate({field: None})
        with self.assertRaises(ValidationError):
            CategoryPatch.model_validate({"name": None})
        with self.assertRaises(ValidationError):
            SupplierPatch.model_validate({"name": None})
        with self.assertRaises(ValidationError):
            UserProfilePatch.model_validate({"role": None})

    def test_patch_accepts_sku(self):
        self.assertEqual(InventoryItemPatch.model_validate({"sku": "NEW-1"}).values(), {"sku": "NEW-1"})

    def test_values_only_include_set_fields(self):
        patch = InventoryItemPatch(quantity=3)
        self.assertEqual(patch.values(), {"quantity": 3})
        self.assertEqual(InventoryItemPatch(description=None).values(), {"description": None})

    def test_create_defaults_leave_required_fields_unset(self):
        data = InventoryItemCreate()
        self.assertEqual(data.name, "")
        self.assertIsNone(data.quantity)
        self.assertIsNone(data.price)

    def test_order_create_lines(self):
        data = OrderCreate.model_validate(
            {
                "customer_name": "A",
                "customer_email": "a@example.com",
                "items": [{"inventory_item_id": "i1", "quantity": 2, "unit_price": "49.99"}],
            }
        )
        self.assertEqual(data.items[0].unit_price, Decimal("49.99"))


class TestResults(unittest.TestCase):
    def test_ok_and_fail(self):
        ok = OperationResult.ok("done", data={"id": "1"})
        self.assertTrue(ok.success)
        self.assertEqual(ok.message, "done")
        self.assertIsNone(ok.error)
        fail = OperationResult.fail("boom")
        self.assertFalse(fail.success)
        self.assertEqual(fail.error, "boom")

    def test_order_defaults(self):
        order = Order.model_validate(
            {
                "id": "o1",
                "order_number": "ORD250101001",
                "customer_name": "A",
                "customer_email": "a@example.com",
                "order_date": "2025-01-01T10:00:00+00:00",
            }
        )
        self.assertEqual(order.status, "pending")
        self.assertEqual(order.order_items, [])


if __name__ == "__main__":
    unittest.main()
