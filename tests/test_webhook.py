"""Tests for the webhook app: change notifications, secret check, health, status and analytics."""

import asyncio
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from logistx.dashboard import Dashboard
from logistx.demo_data import demo_tables
from logistx.store import MemoryStore
from logistx.webhook import create_app
from logistx.webhook.models import parse_notifications


def _notification(quantity: int) -> dict:
    return {
        "type": "UPDATE",
        "table": "inventory_items",
        "schema": "public",
        "record": {"id": "demo-1", "quantity": quantity},
        "old_record": {"id": "demo-1", "quantity": 25},
    }


class TestParseNotifications(unittest.TestCase):
    def test_shapes(self):
        single = parse_notifications(_notification(1))
        self.assertEqual(len(single), 1)
        self.assertEqual(single[0].schema_, "public")
        self.assertEqual(len(parse_notifications([_notification(1), _notification(2)])), 2)
        batch = parse_notifications({"value": [_notification(3)]})
        event = batch[0].to_event()
        self.assertEqual(event.type, "UPDATE")
        self.assertEqual(event.record["quantity"], 3)


class TestWebhookApp(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore(demo_tables())
        self.dashboard = Dashboard(self.store)

    def test_notification_reloads_dashboard(self):
        app = create_app(self.store, self.dashboard, secret="")
        with TestClient(app) as client:
            self.assertTrue(self.dashboard.loaded)
            self.assertEqual(client.get("/analytics/low-stock").json()["count"], 0)

            # change the row without publishing, as a write made by another client would
            with patch.object(self.store.feed, "publish", AsyncMock()):
                asyncio.run(self.store.update("inventory_items", {"quantity": 2}, filters={"id": "demo-1"}))
            self.assertEqual(client.get("/analytics/low-stock").json()["count"], 0)

            response = client.post("/webhook/changes", json=_notification(2))
            self.assertEqual(response.status_code, 202)
            self.assertEqual(response.json(), {"status": "accepted"})
            low = client.get("/analytics/low-stock").json()
            self.assertEqual(low["count"], 1)
            self.assertEqual(low["items"][0]["shortage"], 3)

        self.assertFalse(self.dashboard.loaded)

    def test_secret_required_when_configured(self):
        app = create_app(self.store, self.dashboard, secret="s3cret")
        with TestClient(app) as client:
            self.assertEqual(client.post("/webhook/changes", json=_notification(1)).status_code, 401)
            bad = client.post("/webhook/changes", json=_notification(1), headers={"x-webhook-secret": "nope"})
            self.assertEqual(bad.status_code, 401)
            ok = client.post("/webhook/changes", json=_notification(1), headers={"x-webhook-secret": "s3cret"})
            self.assertEqual(ok.status_code, 202)

    def test_malformed_and_unknown_tables_are_accepted(self):
        app = create_app(self.store, self.dashboard, secret="")
        with TestClient(app) as client:
            garbage = client.post("/webhook/changes", content=b"not json", headers={"content-type": "application/json"})
            self.assertEqual(garbage.status_code, 202)
            unknown = client.post("/webhook/changes", json={"type": "INSERT", "table": "audit_log", "record": {}})
            self.assertEqual(unknown.status_code, 202)

    def test_health_status_and_analytics(self):
        app = create_app(self.store, self.dashboard, secret="")
        with TestClient(app) as client:
            self.assertEqual(client.get("/health").json(), {"status": "ok"})
            status = client.get("/status").json()
            self.assertTrue(status["connected"])
            self.assertEqual(status["items"], 3)
            summary = client.get("/analytics/summary").json()
            self.assertEqual(summary["total_items"], 3)
            self.assertEqual(summary["orders"]["total"], 2)
            recent = client.get("/analytics/transactions/recent", params={"limit": 1}).json()
            self.assertEqual(len(recent["transactions"]), 1)
            self.assertEqual(client.get("/analytics/transactions/recent", params={"limit": 0}).status_code, 422)

    def test_analytics_unavailable_without_dashboard(self):
        with TestClient(create_app(self.store, secret="")) as client:
            self.assertEqual(client.get("/analytics/summary").status_code, 503)
            self.assertEqual(client.get("/health").status_code, 200)


if __name__ == "__main__":
    unittest.main()
