"""SQL-backed store: SQLAlchemy ORM over DATABASE_URL, blocking work run in worker threads."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from logistx.db import init_db, make_engine, make_session_factory, session_scope
from logistx.db.models import MODELS_BY_TABLE
from logistx.store.errors import StoreError, StoreUnavailableError
from logistx.store.feed import ChangeEvent, ChangeFeed, ChangeHandler, Subscription
from logistx.store.schema import TABLES, Embed, attach_embeds, check_table
from logistx.utils.logger import get_logger

logger = get_logger("logistx.store.sql")

Row = dict[str, Any]
T = TypeVar("T")


def _value(value: Any) -> Any:
    # SQLite hands back naive datetimes; rows are always UTC-aware
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_row(obj: Any) -> Row:
    return {c.key: _value(getattr(obj, c.key)) for c in obj.__table__.columns}


def _column(model: Any, table: str, name: str) -> Any:
    if name not in model.__table__.columns:
        raise StoreError(f'column {table}.{name} does not exist', status_code=400, table=table)
    return getattr(model, name)


def _where(model: Any, table: str, filters: dict[str, Any] | None) -> list[Any]:
    return [_column(model, table, k) == v for k, v in (filters or {}).items()]


class SqlStore:
    """RemoteStore over a relational database. Change events are published after commit."""

    def __init__(self, database_url: str, feed: ChangeFeed | None = None, seed: bool = False):
        self.feed = feed or ChangeFeed()
        self.database_url = database_url
        self._engine = make_engine(database_url)
        init_db(self._engine, seed=seed)
        self._factory = make_session_factory(self._engine)
        logger.debug("sql_store.init", url=self._engine.url.render_as_string(hide_password=True))

    async def _run(self, table: str, fn: Callable[[Session], T]) -> T:
        def work() -> T:
            with session_scope(self._factory) as session:
                return fn(session)

        try:
            return await asyncio.to_thread(work)
        except StoreError:
            raise
        except IntegrityError as e:
            raise StoreError(str(e.orig), status_code=409, table=table) from e
        except OperationalError as e:
            raise StoreUnavailableError(str(e.orig), table=table) from e
        except SQLAlchemyError as e:
            raise StoreError(str(e), table=table) from e

    def _lookup(self, session: Session) -> Callable[[str, str, set[Any]], list[Row]]:
        def lookup(table: str, column: str, values: set[Any]) -> list[Row]:
            model = MODELS_BY_TABLE[table]
            q = select(model).where(_column(model, table, column).in_(values))
            return [_to_row(o) for o in session.scalars(q).all()]

        return lookup

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
        model = MODELS_BY_TABLE[table]

        def fn(session: Session) -> list[Row]:
            q = select(model).where(*_where(model, table, filters))
            if order_by:
                col = _column(model, table, order_by)
                q = q.order_by(col.desc().nulls_last() if descending else col.asc().nulls_last())
            if limit is not None:
                q = q.limit(limit)
            rows = [_to_row(o) for o in session.scalars(q).all()]
            return attach_embeds(rows, table, embed, self._lookup(session))

        return await self._run(table, fn)

    async def count(self, table: str, *, filters: dict[str, Any] | None = None) -> int:
        check_table(table)
        model = MODELS_BY_TABLE[table]

        def fn(session: Session) -> int:
            q = select(func.count()).select_from(model).where(*_where(model, table, filters))
            return int(session.scalar(q) or 0)

        return await self._run(table, fn)

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        check_table(table)
        model = MODELS_BY_TABLE[table]
        batch = [rows] if isinstance(rows, dict) else list(rows)

        def fn(session: Session) -> list[Row]:
            objs = []
            for values in batch:
                for key in values:
                    _column(model, table, key)
                obj = model(**values)
                session.add(obj)
                objs.append(obj)
            session.flush()
            return [_to_row(o) for o in objs]

        stored = await self._run(table, fn)
        logger.debug("sql_store.insert", table=table, count=len(stored))
        for row in stored:
            await self.feed.publish(ChangeEvent(type="INSERT", table=table, record=row))
        return stored

    async def update(self, table: str, values: Row, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        model = MODELS_BY_TABLE[table]
        for key in values:
            _column(model, table, key)
        stamp = "updated_at" in TABLES[table] and "updated_at" not in values

        def fn(session: Session) -> list[tuple[Row, Row]]:
            changed = []
            now = datetime.now(timezone.utc)
            for obj in session.scalars(select(model).where(*_where(model, table, filters))).all():
                old = _to_row(obj)
                for key, value in values.items():
                    setattr(obj, key, value)
                if stamp:
                    obj.updated_at = now
                session.flush()
                changed.append((old, _to_row(obj)))
            return changed

        changed = await self._run(table, fn)
        logger.debug("sql_store.update", table=table, count=len(changed))
        for old, new in changed:
            await self.feed.publish(ChangeEvent(type="UPDATE", table=table, record=new, old_record=old))
        return [new for _, new in changed]

    async def delete(self, table: str, *, filters: dict[str, Any]) -> list[Row]:
        check_table(table)
        model = MODELS_BY_TABLE[table]

        def fn(session: Session) -> list[Row]:
            removed = []
            for obj in session.scalars(select(model).where(*_where(model, table, filters))).all():
                removed.append(_to_row(obj))
                session.delete(obj)
            session.flush()
            return removed

        removed = await self._run(table, fn)
        logger.debug("sql_store.delete", table=table, count=len(removed))
        for row in removed:
            await self.feed.publish(ChangeEvent(type="DELETE", table=table, old_record=row))
        return removed

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        check_table(table)
        return self.feed.subscribe(table, handler)

    async def aclose(self) -> None:
        await asyncio.to_thread(self._engine.dispose)
