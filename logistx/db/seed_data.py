"""Seed the database with the demo dataset. FK order: categories, suppliers, profiles, items, orders, order items, transactions."""

from sqlalchemy.orm import Session

from logistx.db.models import MODELS_BY_TABLE
from logistx.demo_data import demo_tables
from logistx.utils.logger import get_logger

logger = get_logger("logistx.db.seed_data")

_SEED_ORDER = (
    "categories",
    "suppliers",
    "profiles",
    "inventory_items",
    "orders",
    "order_items",
    "inventory_transactions",
)


def seed_demo_data(session: Session) -> dict[str, int]:
    """Insert every demo row; returns rows inserted per table. Caller commits."""
    tables = demo_tables()
    counts: dict[str, int] = {}
    for table in _SEED_ORDER:
        model = MODELS_BY_TABLE[table]
        rows = tables.get(table, [])
        for row in rows:
            session.add(model(**row))
        session.flush()
        counts[table] = len(rows)
    logger.info("db.seeded", **counts)
    return counts
