"""Inventory transaction log: append-only audit rows and their derived counts."""

from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError

from logistx.config import RECENT_TRANSACTIONS_LIMIT
from logistx.demo_data import demo_transactions
from logistx.models import InventoryTransaction, OperationResult, TransactionCreate, TransactionStats
from logistx.store import Embed, RemoteStore
from logistx.store.schema import INVENTORY_ITEMS, INVENTORY_TRANSACTIONS, PROFILES
from logistx.utils.logger import get_logger
from logistx.viewmodels.base import EntityViewModel, same_day, utcnow, validation_message

logger = get_logger("logistx.viewmodels.transactions")


async def record_transaction(
    store: RemoteStore,
    *,
    actor: Optional[str],
    item_id: str,
    transaction_type: str,
    quantity_change: int,
    previous_quantity: int,
    new_quantity: int,
    notes: str,
) -> Optional[dict[str, Any]]:
    """Append one audit row attributed to actor. Without an actor nothing is written."""
    if not actor:
        logger.debug("transactions.skipped_no_actor", item_id=item_id, transaction_type=transaction_type)
        return None
    rows = await store.insert(
        INVENTORY_TRANSACTIONS,
        {
            "item_id": item_id,
            "user_id": actor,
            "transaction_type": transaction_type,
            "quantity_change": abs(quantity_change),
            "previous_quantity": previous_quantity,
            "new_quantity": new_quantity,
            "notes": notes,
        },
    )
    return rows[0] if rows else None


class TransactionViewModel(EntityViewModel[InventoryTransaction]):
    entity = "transactions"
    table = INVENTORY_TRANSACTIONS
    model = InventoryTransaction
    embed = (
        Embed("item", INVENTORY_ITEMS, ("name", "sku")),
        Embed("user", PROFILES, ("name", "email")),
    )

    def demo_rows(self) -> list[InventoryTransaction]:
        return demo_transactions()

    async def add_transaction(
        self, payload: TransactionCreate | dict[str, Any], *, actor: Optional[str] = None
    ) -> OperationResult:
        """Append an audit row. user_id defaults to actor."""
        try:
            data = self._coerce(payload, TransactionCreate)
        except ValidationError as e:
            return self._invalid("add", validation_message(e))
        if not data.item_id:
            return self._invalid("add", "Transaction requires an item")
        values = data.values()
        if actor and not values.get("user_id"):
            values["user_id"] = actor
        values["quantity_change"] = abs(values.get("quantity_change", 0))

        async def action() -> OperationResult:
            rows = await self.store.insert(self.table, values)
            await self.load()
            return OperationResult(success=True, data=rows[0] if rows else None)

        return await self._run("add", action, "Failed to add transaction", item_id=data.item_id)

    def recent_transactions(self, limit: int = RECENT_TRANSACTIONS_LIMIT) -> list[InventoryTransaction]:
        return self.rows[:limit]

    def today_transactions(self, now: Optional[datetime] = None) -> list[InventoryTransaction]:
        now = now or utcnow()
        return [t for t in self.rows if same_day(t.created_at, now)]

    def transaction_stats(self, now: Optional[datetime] = None) -> TransactionStats:
        kinds = [t.transaction_type for t in self.rows]
        return TransactionStats(
            total=len(self.rows),
            today=len(self.today_transactions(now)),
            adds=kinds.count("add"),
            removes=kinds.count("remove"),
            adjustments=kinds.count("adjust"),
        )

    def type_mix(self) -> dict[str, int]:
        """Counts of add / remove / adjust, everything else under "other"."""
        mix = {"add": 0, "remove": 0, "adjust": 0, "other": 0}
        for t in self.rows:
            key = t.transaction_type if t.transaction_type in mix else "other"
            mix[key] += 1
        return mix
