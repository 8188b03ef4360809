"""Remote store protocol (hosted relational database interface)."""

from typing import Any, Protocol

from logistx.store.feed import ChangeFeed, ChangeHandler, Subscription
from logistx.store.schema import Embed

Row = dict[str, Any]


class RemoteStore(Protocol):
    """Async row CRUD scoped by table and equality filters, plus per-table change notifications."""

    feed: ChangeFeed

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
        """Return rows matching filters, with embedded related rows resolved."""
        ...

    async def count(self, table: str, *, filters: dict[str, Any] | None = None) -> int:
        """Return the number of rows matching filters."""
        ...

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        """Insert one or many rows; returns the stored rows (generated id and timestamps included)."""
        ...

    async def update(self, table: str, values: Row, *, filters: dict[str, Any]) -> list[Row]:
        """Update rows matching filters; returns the updated rows."""
        ...

    async def delete(self, table: str, *, filters: dict[str, Any]) -> list[Row]:
        """Delete rows matching filters; returns the deleted rows."""
        ...

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        """Register handler for INSERT/UPDATE/DELETE events on table."""
        ...

    async def aclose(self) -> None:
        """Release connections."""
        ...
