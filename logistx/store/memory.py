"""In-process store: tables held in memory, change events published after each write."""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any

from logistx.store.errors import StoreError
from logistx.store.feed import ChangeEvent, ChangeFeed, ChangeHandler, Subscription
from logistx.store.schema import TABLES, Embed, attach_embeds, check_table
from logistx.utils.logger import get_logger

logger = get_logger("logistx.store.memory")

Row = dict[str, Any]


def _matches(row: Row, filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(row.get(k) == v for k, v in filters.items())


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts last in ascending order
    return (1, "") if value is None else (0, value)


class MemoryStore:
    """Store backed by python lists. Rows are deep-copied in and out."""

    def __init__(self, tables: dict[str, list[Row]] | None = None, feed: ChangeFeed | None = None):
        self.feed = feed or ChangeFeed()
        self._tables: dict[str, list[Row]] = {name: [] for name in TABLES}
        for name, rows in (tables or {}).items():
            check_table(name)
            self._tables[name] = [copy.deepcopy(r) for r in rows]
        logger.debug(
            "memory_store.init",
            rows={name: len(rows) for name, rows in self._tables.items() if rows},
        )

    @classmethod
    def with_demo_data(cls) -> "MemoryStore":
        from logistx.demo_data import demo_tables

        return cls(tables=demo_tables())

    def _lookup(self, table: str, column: str, values: set[Any]) -> list[Row]:
        return [copy.deepcopy(r) for r in self._tables[table] if r.get(column) in values]

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        embed: tuple[Embed, ...] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        check_table(table)
        rows = [copy.deepcopy(r) for r in self._tables[table] if _matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: _sort_key(r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return attach_embeds(rows, table, embed, self._lookup)

    async def count(self, table: str, *, filters: dict[str, Any] | None = None) -> int:
        check_table(table)
        return sum(1 for r in self._tables[table] if _matches(r, filters))

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        check_table(table)
        batch = [rows] if isinstance(rows, dict) else list(rows)
        now = datetime.now(timezone.utc)
        stored: list[Row] = []
        for values in batch:
            row = copy.deepcopy(values)
            row.setdefault("id", str(uuid.uuid4()))
            if any(r.get("id") == row["id"] for r in self._tables[table]):
                raise StoreError(f'duplicate key value violates unique constraint "{table}_pkey"', table=table)
            for col in TABLES[table]:
                if row.get(col) is None:
                    row[col] = now
            stored.append(row)
        self._tables[table].extend(stored)
        logger.debug("memory_store.insert", table=table, count=len(stored))
        for row in stored:
            await self.feed.publish(ChangeEvent(type="INSERT", table=table, record=copy.deepcopy(row)))
        return [copy.deepcopy(r) for r in stored]

    async def update(self, table: str, values: Row, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        now = datetime.now(timezone.utc)
        changed: list[tuple[Row, Row]] = []
        for row in self._tables[table]:
            if not _matches(row, filters):
                continue
            old = copy.deepcopy(row)
            row.update(copy.deepcopy(values))
            if "updated_at" in TABLES[table] and "updated_at" not in values:
                row["updated_at"] = now
            changed.append((old, copy.deepcopy(row)))
        logger.debug("memory_store.update", table=table, count=len(changed))
        for old, new in changed:
            await self.feed.publish(ChangeEvent(type="UPDATE", table=table, record=new, old_record=old))
        return [new for _, new in changed]

    async def delete(self, table: str, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        kept: list[Row] = []
        removed: list[Row] = []
        for row in self._tables[table]:
            (removed if _matches(row, filters) else kept).append(row)
        self._tables[table] = kept
        logger.debug("memory_store.delete", table=table, count=len(removed))
        for row in removed:
            await self.feed.publish(ChangeEvent(type="DELETE", table=table, old_record=copy.deepcopy(row)))
        return removed

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        check_table(table)
        return self.feed.subscribe(table, handler)

    async def aclose(self) -> None:
        return None
