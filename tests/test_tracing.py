"""Tests for tracing helpers when tracing is disabled (the default)."""

import sys
import unittest
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from logistx.utils import tracing
from logistx.utils.logger import bind_context, clear_context, get_logger


class TestTracingDisabled(unittest.TestCase):
    def test_init_is_noop_and_spans_still_work(self):
        tracing.init_tracing()
        self.assertIsNone(tracing._provider)
        with tracing.get_tracer().start_as_current_span("inventory.load", attributes={"table": "inventory_items"}) as span:
            span.set_attribute("rows", 3)
        tracing.shutdown_tracing()
        tracing.shutdown_tracing()

    def test_traces_url(self):
        self.assertEqual(tracing._traces_url("http://collector:4318"), "http://collector:4318/v1/traces")
        self.assertEqual(tracing._traces_url("http://collector:4318/v1/traces/"), "http://collector:4318/v1/traces")


class TestLogger(unittest.TestCase):
    def test_bound_logger_accepts_decimal_fields(self):
        bind_context(command="test")
        try:
            log = get_logger("logistx.tests", entity="orders")
            log.info("orders.create.ok", total_amount=Decimal("99.98"))
        finally:
            clear_context()


if __name__ == "__main__":
    unittest.main()
