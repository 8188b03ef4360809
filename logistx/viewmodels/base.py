"""Entity view-model: cached rows for one table, write-through operations, demo fallback.

Every write goes to the remote store first; on success the whole list is re-fetched, so the
cache only ever holds what the store returned (or the demo dataset). Failures are converted to
an OperationResult plus an error notification and are never raised to the caller.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from logistx.config import LOAD_TIMEOUT_SECONDS
from logistx.models import OperationResult
from logistx.store import ChangeEvent, Embed, RemoteStore, Subscription
from logistx.utils.logger import get_logger
from logistx.utils.tracing import get_tracer
from logistx.viewmodels.notify import LogNotifier, Notifier

M = TypeVar("M", bound=BaseModel)
P = TypeVar("P", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def same_day(value: Optional[datetime], now: datetime) -> bool:
    """True when value falls on now's calendar day (in now's timezone)."""
    if value is None:
        return False
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if now.tzinfo is not None:
        value = value.astimezone(now.tzinfo)
    return value.date() == now.date()


class EntityViewModel(Generic[M]):
    """Cached, render-ready list of one entity's rows.

    Subclasses set `entity`, `table`, `model`, the embedded joins and `demo_rows()`.
    """

    entity: ClassVar[str]
    table: ClassVar[str]
    model: ClassVar[type[BaseModel]]
    embed: ClassVar[tuple[Embed, ...]] = ()
    order_by: ClassVar[str] = "created_at"
    descending: ClassVar[bool] = True
    # extra tables whose changes also trigger a re-fetch (e.g. embedded names)
    also_watch: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        store: RemoteStore,
        notifier: Notifier | None = None,
        *,
        load_timeout: float = LOAD_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.notifier: Notifier = notifier or LogNotifier()
        self.load_timeout = load_timeout
        self.rows: list[M] = []
        self.loading = True
        self.using_demo = False
        self.last_loaded_at: Optional[datetime] = None
        self._subscriptions: list[Subscription] = []
        self.log = get_logger(f"logistx.viewmodels.{self.entity}")

    def demo_rows(self) -> list[M]:
        raise NotImplementedError

    def find(self, row_id: str) -> Optional[M]:
        return next((r for r in self.rows if getattr(r, "id", None) == row_id), None)

    async def fetch(self) -> list[M]:
        rows = await self.store.select(
            self.table, embed=self.embed, order_by=self.order_by, descending=self.descending
        )
        return [self.model.model_validate(r) for r in rows]

    async def load(self, initial: bool = False) -> bool:
        """Replace the cache with a fresh fetch. Returns False when the fetch failed.

        The initial load is bounded by load_timeout. On the initial load, or while nothing has
        been loaded yet, a failure substitutes the demo dataset; later failures keep the cache.
        """
        tracer = get_tracer()
        with tracer.start_as_current_span(f"{self.entity}.load", attributes={"table": self.table, "initial": initial}):
            try:
                if initial:
                    rows = await asyncio.wait_for(self.fetch(), timeout=self.load_timeout)
                else:
                    rows = await self.fetch()
            except Exception as e:
                reason = "timeout" if isinstance(e, asyncio.TimeoutError) else (str(e) or type(e).__name__)
                if initial or self.last_loaded_at is None:
                    self.rows = self.demo_rows()
                    self.using_demo = True
                    self.log.warning(f"{self.entity}.load.fallback", reason=reason, rows=len(self.rows))
                else:
                    self.log.warning(f"{self.entity}.load.failed", reason=reason, cached=len(self.rows))
                self.loading = False
                return False
        self.rows = rows
        self.using_demo = False
        self.loading = False
        self.last_loaded_at = utcnow()
        self.log.debug(f"{self.entity}.load.ok", rows=len(rows))
        return True

    async def _on_change(self, event: ChangeEvent) -> None:
        self.log.debug(f"{self.entity}.change", table=event.table, type=event.type)
        await self.load()

    async def start(self) -> None:
        """Initial load (with timeout and demo fallback), then subscribe to change notifications."""
        self.loading = True
        await self.load(initial=True)
        if not self._subscriptions:
            for table in (self.table, *self.also_watch):
                self._subscriptions.append(self.store.subscribe(table, self._on_change))

    def close(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()

    def _invalid(self, operation: str, message: str) -> OperationResult:
        self.log.warning(f"{self.entity}.{operation}.invalid", error=message)
        self.notifier.error(message)
        return OperationResult.fail(message)

    async def _run(
        self,
        operation: str,
        action: Callable[[], Awaitable[OperationResult]],
        fallback_error: str,
        **attributes: Any,
    ) -> OperationResult:
        """Run a write inside a span; any exception becomes a failed result and an error notification."""
        tracer = get_tracer()
        with tracer.start_as_current_span(
            f"{self.entity}.{operation}", attributes={"table": self.table, **attributes}
        ) as span:
            try:
                result = await action()
            except Exception as e:
                message = str(e) or fallback_error
                span.record_exception(e)
                self.log.error(f"{self.entity}.{operation}.failed", error=message, error_type=type(e).__name__)
                self.notifier.error(message)
                return OperationResult.fail(message)
        if result.success and result.message:
            self.log.info(f"{self.entity}.{operation}.ok", **attributes)
            self.notifier.success(result.message)
        return result

    @staticmethod
    def _coerce(payload: BaseModel | dict[str, Any], model: type[P]) -> P:
        """Accept a payload model or a plain dict; raises pydantic.ValidationError on bad input."""
        if isinstance(payload, model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(exclude_unset=True)
        return model.model_validate(payload)


def validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or "input"
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"
