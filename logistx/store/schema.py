"""Table registry, foreign keys and embedded-join resolution shared by the store backends."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

CATEGORIES = "categories"
SUPPLIERS = "suppliers"
INVENTORY_ITEMS = "inventory_items"
INVENTORY_TRANSACTIONS = "inventory_transactions"
ORDERS = "orders"
ORDER_ITEMS = "order_items"
PROFILES = "profiles"

# table -> timestamp columns the store maintains
TABLES: dict[str, tuple[str, ...]] = {
    CATEGORIES: ("created_at",),
    SUPPLIERS: ("created_at", "updated_at"),
    INVENTORY_ITEMS: ("created_at", "updated_at"),
    INVENTORY_TRANSACTIONS: ("created_at",),
    ORDERS: ("created_at", "updated_at"),
    ORDER_ITEMS: ("created_at",),
    PROFILES: ("created_at", "updated_at"),
}


@dataclass(frozen=True)
class ForeignKey:
    table: str
    column: str
    ref_table: str
    ref_column: str = "id"


FOREIGN_KEYS: tuple[ForeignKey, ...] = (
    ForeignKey(INVENTORY_ITEMS, "category_id", CATEGORIES),
    ForeignKey(INVENTORY_ITEMS, "supplier_id", SUPPLIERS),
    ForeignKey(ORDER_ITEMS, "order_id", ORDERS),
    ForeignKey(ORDER_ITEMS, "inventory_item_id", INVENTORY_ITEMS),
    ForeignKey(INVENTORY_TRANSACTIONS, "item_id", INVENTORY_ITEMS),
    ForeignKey(INVENTORY_TRANSACTIONS, "user_id", PROFILES, "user_id"),
)


@dataclass(frozen=True)
class Embed:
    """Join a related table into each row under `alias` (`alias:table(columns)`).

    Many-to-one relations embed a dict (or None); one-to-many relations embed a list.
    An empty `columns` tuple selects every column.
    """

    alias: str
    table: str
    columns: tuple[str, ...] = ()
    embeds: tuple["Embed", ...] = field(default_factory=tuple)

    def render(self) -> str:
        """Render as the hosted store's select syntax, e.g. `category:categories(name)`."""
        parts = list(self.columns) or ["*"]
        parts.extend(e.render() for e in self.embeds)
        prefix = "" if self.alias == self.table else f"{self.alias}:"
        return f"{prefix}{self.table}({','.join(parts)})"


def render_select(embeds: Iterable[Embed]) -> str:
    return ",".join(["*", *(e.render() for e in embeds)])


def check_table(table: str) -> None:
    if table not in TABLES:
        raise ValueError(f"Unknown table: {table!r}. Known: {sorted(TABLES)}")


def find_relation(table: str, target: str) -> tuple[ForeignKey, bool]:
    """Return (foreign key, is_many) joining table to target."""
    for fk in FOREIGN_KEYS:
        if fk.table == table and fk.ref_table == target:
            return fk, False
    for fk in FOREIGN_KEYS:
        if fk.table == target and fk.ref_table == table:
            return fk, True
    raise ValueError(f"No relationship between {table!r} and {target!r}")


# lookup(table, column, values) -> rows of `table` whose `column` is in `values`
Lookup = Callable[[str, str, set[Any]], list[dict[str, Any]]]


def _project(row: dict[str, Any], embed: Embed) -> dict[str, Any]:
    if not embed.columns:
        return row
    out = {c: row.get(c) for c in embed.columns}
    for nested in embed.embeds:
        out[nested.alias] = row.get(nested.alias)
    return out


def attach_embeds(
    rows: list[dict[str, Any]],
    table: str,
    embeds: Iterable[Embed],
    lookup: Lookup,
) -> list[dict[str, Any]]:
    """Resolve embeds in place on rows (and recursively on the embedded rows)."""
    for embed in embeds:
        fk, many = find_relation(table, embed.table)
        if many:
            keys = {r.get(fk.ref_column) for r in rows if r.get(fk.ref_column) is not None}
            children = lookup(embed.table, fk.column, keys) if keys else []
            attach_embeds(children, embed.table, embed.embeds, lookup)
            grouped: dict[Any, list[dict[str, Any]]] = {}
            for child in children:
                grouped.setdefault(child.get(fk.column), []).append(_project(child, embed))
            for r in rows:
                r[embed.alias] = grouped.get(r.get(fk.ref_column), [])
        else:
            keys = {r.get(fk.column) for r in rows if r.get(fk.column) is not None}
            targets = lookup(embed.table, fk.ref_column, keys) if keys else []
            attach_embeds(targets, embed.table, embed.embeds, lookup)
            by_key = {t.get(fk.ref_column): _project(t, embed) for t in targets}
            for r in rows:
                r[embed.alias] = by_key.get(r.get(fk.column))
    return rows
