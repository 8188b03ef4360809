"""Webhook mode: run the FastAPI receiver for hosted-database change notifications."""

import sys
from typing import Optional

import typer
import uvicorn

from logistx.config import WEBHOOK_PORT, WEBHOOK_SECRET
from logistx.dashboard import Dashboard
from logistx.store import create_store
from logistx.webhook.server import create_app

from .shared import backend_option, console, logger


def webhook(
    port: int = typer.Option(WEBHOOK_PORT, "--port", "-p", help="Port for the webhook server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    backend: Optional[str] = backend_option(),
) -> None:
    """Start the change-notification listener with a live dashboard."""
    log = logger.bind(command="webhook", port=port, backend=backend)
    log.info("webhook.start")
    try:
        store = create_store(backend)
    except Exception as e:
        console.print(f"[red]Could not open store: {e}[/red]")
        log.exception("webhook.store_error")
        raise typer.Exit(1)
    if not WEBHOOK_SECRET:
        console.print("[yellow]WEBHOOK_SECRET is not set: change notifications are accepted unauthenticated.[/yellow]")
        log.warning("webhook.no_secret")

    app = create_app(store, Dashboard(store))
    console.print(f"[green]Starting webhook server on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: POST /webhook/changes, GET /health, GET /status, GET /analytics/summary[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info", timeout_graceful_shutdown=15)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
