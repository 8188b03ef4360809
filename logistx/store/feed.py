"""Per-table change notification feed."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from logistx.utils.logger import get_logger

logger = get_logger("logistx.store.feed")

ChangeType = Literal["INSERT", "UPDATE", "DELETE"]


class ChangeEvent(BaseModel):
    """One row-level change on a table (hosted database change notification shape)."""

    type: ChangeType
    table: str
    schema_: str = Field("public", alias="schema")
    record: Optional[dict[str, Any]] = None
    old_record: Optional[dict[str, Any]] = None
    commit_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"populate_by_name": True, "extra": "ignore"}


ChangeHandler = Callable[[ChangeEvent], Awaitable[None]]


class Subscription:
    """Handle returned by ChangeFeed.subscribe; unsubscribe() is idempotent."""

    def __init__(self, feed: "ChangeFeed", table: str, handler: ChangeHandler):
        self._feed = feed
        self.table = table
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._feed._remove(self)
            self.active = False


class ChangeFeed:
    """Registry of async handlers per table. publish() awaits every handler of the event's table."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        sub = Subscription(self, table, handler)
        self._subscriptions.setdefault(table, []).append(sub)
        logger.debug("feed.subscribed", table=table, subscribers=len(self._subscriptions[table]))
        return sub

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscriptions.get(sub.table, [])
        if sub in subs:
            subs.remove(sub)
        logger.debug("feed.unsubscribed", table=sub.table, subscribers=len(subs))

    def subscriber_count(self, table: str) -> int:
        return len(self._subscriptions.get(table, []))

    async def publish(self, event: ChangeEvent) -> None:
        subs = list(self._subscriptions.get(event.table, []))
        if not subs:
            return
        logger.debug("feed.publish", table=event.table, type=event.type, subscribers=len(subs))
        results = await asyncio.gather(*(s.handler(event) for s in subs), return_exceptions=True)
        for sub, result in zip(subs, results):
            if isinstance(result, BaseException):
                logger.error(
                    "feed.handler_error",
                    table=event.table,
                    type=event.type,
                    handler=getattr(sub.handler, "__qualname__", repr(sub.handler)),
                    error=str(result),
                )
