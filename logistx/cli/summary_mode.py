"""Summary: start the dashboard and print KPIs, category breakdown and low-stock items."""

import asyncio
from typing import Optional

import typer
from rich.table import Table

from logistx.utils.logger import bind_context, clear_context

from .shared import backend_option, console, logger, money, running_dashboard


async def _summary(backend: Optional[str]) -> None:
    async with running_dashboard(backend) as dashboard:
        s = dashboard.summary()
        low = dashboard.inventory.low_stock_items()

    kpis = Table(title="LogistX summary")
    kpis.add_column("Metric", style="cyan")
    kpis.add_column("Value", justify="right")
    kpis.add_row("Total items", str(s.total_items))
    kpis.add_row("Low stock items", str(s.low_stock_count))
    kpis.add_row("Inventory value", money(s.total_value))
    kpis.add_row("Orders (today)", f"{s.orders.total} ({s.orders.today})")
    kpis.add_row("Pending orders", str(s.orders.pending))
    kpis.add_row("Revenue", money(s.orders.total_revenue))
    kpis.add_row("Transactions (today)", f"{s.transactions.total} ({s.transactions.today})")
    kpis.add_row("Users (admin/staff)", f"{s.users.total} ({s.users.admins}/{s.users.staff})")
    console.print(kpis)

    if s.categories:
        cats = Table(title="Inventory by category")
        cats.add_column("Category", style="cyan")
        cats.add_column("Units", justify="right")
        cats.add_column("Value", justify="right")
        for c in s.categories:
            cats.add_row(c.name, str(c.count), money(c.value))
        console.print(cats)

    if low:
        table = Table(title="Low stock")
        table.add_column("Item", style="cyan")
        table.add_column("SKU")
        table.add_column("Qty", justify="right")
        table.add_column("Min", justify="right")
        for item in low:
            table.add_row(item.name, item.sku, str(item.quantity), str(item.min_quantity))
        console.print(table)
    else:
        console.print("[green]No low-stock items.[/green]")


def summary(backend: Optional[str] = backend_option()) -> None:
    """Load every entity and print the dashboard summary."""
    log = logger.bind(command="summary", backend=backend)
    log.info("summary.start")
    bind_context(command="summary")
    try:
        asyncio.run(_summary(backend))
    except Exception as e:
        console.print(f"[red]Summary failed: {e}[/red]")
        log.exception("summary.error")
        raise typer.Exit(1)
    finally:
        clear_context()
