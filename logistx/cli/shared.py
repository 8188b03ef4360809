"""Shared CLI helpers: console, logger, backend option, dashboard lifecycle, money formatting."""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Optional

import typer
from rich.console import Console

from logistx.config import CURRENCY_SYMBOL
from logistx.dashboard import Dashboard
from logistx.store import BACKENDS, create_store
from logistx.utils.logger import get_logger
from logistx.viewmodels import CollectingNotifier

console = Console()
logger = get_logger("logistx.cli")


def backend_option() -> Optional[str]:
    return typer.Option(
        None,
        "--backend",
        "-b",
        help=f"Store backend ({' | '.join(BACKENDS)}); defaults to STORE_BACKEND",
    )


def money(value: Decimal) -> str:
    return f"{CURRENCY_SYMBOL}{value:,.2f}"


@asynccontextmanager
async def running_dashboard(backend: Optional[str]) -> AsyncIterator[Dashboard]:
    """Create the store, start a dashboard on it, and tear both down on exit."""
    store = create_store(backend)
    dashboard = Dashboard(store, CollectingNotifier())
    try:
        await dashboard.start()
        if dashboard.using_demo:
            console.print("[yellow]Store unreachable or slow for some tables: showing demo data.[/yellow]")
        yield dashboard
    finally:
        dashboard.close()
        await store.aclose()
