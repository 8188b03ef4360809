"""CLI commands: one module per command (summary, status, export, seed, webhook)."""

from typer import Typer

from logistx.cli import export_mode, seed_mode, status_mode, summary_mode, webhook_mode
from logistx.utils.tracing import init_tracing

init_tracing()

app = Typer(help="LogistX inventory and order management")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(summary_mode.summary)
    app.command()(status_mode.status)
    app.command()(export_mode.export)
    app.command()(seed_mode.seed)
    app.command()(webhook_mode.webhook)


register_commands()
