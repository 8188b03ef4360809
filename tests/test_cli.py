"""Tests for the CLI commands, run against an in-memory store."""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from typer.testing import CliRunner

from logistx.cli import app
from logistx.demo_data import demo_tables
from logistx.store import MemoryStore


def _demo_store(backend=None, *, seed=False):
    return MemoryStore(demo_tables())


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_summary(self):
        with patch("logistx.cli.shared.create_store", _demo_store):
            result = self.runner.invoke(app, ["summary", "--backend", "memory"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Total items", result.output)
        self.assertIn("No low-stock items.", result.output)

    def test_status(self):
        with patch("logistx.cli.status_mode.create_store", _demo_store):
            result = self.runner.invoke(app, ["status"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Connected", result.output)

    def test_export_writes_file(self):
        with tempfile.TemporaryDirectory() as tmp, patch("logistx.cli.shared.create_store", _demo_store):
            result = self.runner.invoke(app, ["export", "-r", "low-stock", "-f", "csv", "-o", tmp])
            self.assertEqual(result.exit_code, 0, result.output)
            written = list(Path(tmp).glob("low-stock-report-*.csv"))
            self.assertEqual(len(written), 1)
            self.assertTrue(written[0].read_text(encoding="utf-8").startswith("Product Name,SKU"))

    def test_export_rejects_unknown_report_and_format(self):
        self.assertEqual(self.runner.invoke(app, ["export", "-r", "profit"]).exit_code, 1)
        self.assertEqual(self.runner.invoke(app, ["export", "-f", "docx"]).exit_code, 1)

    def test_seed_memory_and_refuse_rest(self):
        result = self.runner.invoke(app, ["seed", "--backend", "memory"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("3 items", result.output)
        self.assertEqual(self.runner.invoke(app, ["seed", "--backend", "rest"]).exit_code, 1)


if __name__ == "__main__":
    unittest.main()
