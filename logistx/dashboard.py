"""Dashboard: owns every view-model, starts them together and derives the cross-entity summary."""

import asyncio
from datetime import datetime
from typing import Optional

from logistx.models import AnalyticsSummary, DatabaseStatus
from logistx.store import RemoteStore
from logistx.store.schema import CATEGORIES, INVENTORY_ITEMS, PROFILES, SUPPLIERS
from logistx.utils.logger import get_logger
from logistx.viewmodels import (
    CategoryViewModel,
    InventoryViewModel,
    LogNotifier,
    Notifier,
    OrderViewModel,
    SupplierViewModel,
    TransactionViewModel,
    UserViewModel,
)

logger = get_logger("logistx.dashboard")


class Dashboard:
    def __init__(self, store: RemoteStore, notifier: Notifier | None = None, **vm_options):
        self.store = store
        self.notifier = notifier or LogNotifier()
        self.inventory = InventoryViewModel(store, self.notifier, **vm_options)
        self.categories = CategoryViewModel(store, self.notifier, **vm_options)
        self.suppliers = SupplierViewModel(store, self.notifier, **vm_options)
        self.orders = OrderViewModel(store, self.notifier, inventory=self.inventory, **vm_options)
        self.transactions = TransactionViewModel(store, self.notifier, **vm_options)
        self.users = UserViewModel(store, self.notifier, **vm_options)
        self.loaded = False

    @property
    def view_models(self):
        return (self.inventory, self.categories, self.suppliers, self.orders, self.transactions, self.users)

    @property
    def using_demo(self) -> bool:
        return any(vm.using_demo for vm in self.view_models)

    async def start(self) -> None:
        """Initial load of every view-model concurrently, then mark loaded."""
        await asyncio.gather(*(vm.start() for vm in self.view_models))
        self.loaded = True
        logger.info(
            "dashboard.started",
            using_demo=[vm.entity for vm in self.view_models if vm.using_demo],
            items=len(self.inventory.rows),
            orders=len(self.orders.rows),
        )

    def close(self) -> None:
        for vm in self.view_models:
            vm.close()
        self.loaded = False

    def summary(self, now: Optional[datetime] = None) -> AnalyticsSummary:
        inv = self.inventory
        return AnalyticsSummary(
            total_items=len(inv.rows),
            low_stock_count=len(inv.low_stock_items()),
            total_value=inv.total_value(),
            categories=inv.category_breakdown(),
            top_products=inv.top_products(),
            orders=self.orders.order_stats(now),
            transactions=self.transactions.transaction_stats(now),
            users=self.users.user_stats(),
            transaction_mix=self.transactions.type_mix(),
            using_demo=self.using_demo,
        )

    async def status(self) -> DatabaseStatus:
        return await store_status(self.store)


async def store_status(store: RemoteStore) -> DatabaseStatus:
    """Row counts straight from the store; connected=False with the error when any count fails."""
    try:
        items, categories, suppliers, users = await asyncio.gather(
            store.count(INVENTORY_ITEMS),
            store.count(CATEGORIES),
            store.count(SUPPLIERS),
            store.count(PROFILES),
        )
    except Exception as e:
        logger.error("dashboard.status.failed", error=str(e))
        return DatabaseStatus(connected=False, error=str(e) or type(e).__name__)
    return DatabaseStatus(connected=True, items=items, categories=categories, suppliers=suppliers, users=users)
