"""Seed: create the SQL tables and insert the demo dataset when the catalog is empty."""

import asyncio
from typing import Optional

import typer

from logistx.dashboard import store_status
from logistx.store import create_store

from .shared import backend_option, console, logger


async def _seed(backend: Optional[str]):
    store = create_store(backend, seed=True)
    try:
        return await store_status(store)
    finally:
        await store.aclose()


def seed(backend: Optional[str] = backend_option()) -> None:
    """Create tables and load the demo dataset (no-op when data already exists)."""
    log = logger.bind(command="seed", backend=backend)
    if (backend or "").lower() == "rest":
        console.print("[red]The hosted store owns its schema; seed supports the sql and memory backends.[/red]")
        raise typer.Exit(1)
    try:
        result = asyncio.run(_seed(backend))
    except Exception as e:
        console.print(f"[red]Seed failed: {e}[/red]")
        log.exception("seed.error")
        raise typer.Exit(1)
    if not result.connected:
        console.print(f"[red]Seed failed: {result.error}[/red]")
        raise typer.Exit(1)
    console.print(
        f"[green]Ready: {result.items} items, {result.categories} categories, "
        f"{result.suppliers} suppliers, {result.users} users.[/green]"
    )
    log.info("seed.complete", items=result.items, categories=result.categories)
