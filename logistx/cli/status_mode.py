"""Status: per-table row counts as reported by the store."""

import asyncio
from typing import Optional

import typer
from rich.table import Table

from logistx.dashboard import store_status
from logistx.models import DatabaseStatus
from logistx.store import create_store

from .shared import backend_option, console, logger


async def _status(backend: Optional[str]) -> DatabaseStatus:
    store = create_store(backend)
    try:
        return await store_status(store)
    finally:
        await store.aclose()


def status(backend: Optional[str] = backend_option()) -> None:
    """Check the store connection and print row counts."""
    log = logger.bind(command="status", backend=backend)
    try:
        result = asyncio.run(_status(backend))
    except Exception as e:
        console.print(f"[red]Could not open store: {e}[/red]")
        log.exception("status.error")
        raise typer.Exit(1)
    if not result.connected:
        console.print(f"[red]Disconnected: {result.error}[/red]")
        log.warning("status.disconnected", error=result.error)
        raise typer.Exit(1)
    table = Table(title="Database status")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_row("Inventory items", str(result.items))
    table.add_row("Categories", str(result.categories))
    table.add_row("Suppliers", str(result.suppliers))
    table.add_row("Users", str(result.users))
    console.print("[green]Connected[/green]")
    console.print(table)
    log.info("status.ok", **result.model_dump(exclude={"connected", "error"}))
