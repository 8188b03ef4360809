"""Export: build a report from the dashboard and write it as CSV, PDF, TXT or XLSX."""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from logistx.config import EXPORT_DIR
from logistx.export import REPORT_TYPES, build_report, export_report, normalize_format, write_artifact

from .shared import backend_option, console, logger, running_dashboard


async def _export(report: str, fmt: str, output: Path, backend, date_from, date_to) -> Optional[Path]:
    async with running_dashboard(backend) as dashboard:
        table = build_report(report, dashboard, date_from=date_from, date_to=date_to)
    artifact = export_report(table, fmt, report_type=report)
    if artifact is None:
        return None
    return write_artifact(artifact, output)


def export(
    report: str = typer.Option("inventory", "--report", "-r", help=f"Report type: {', '.join(REPORT_TYPES)}"),
    fmt: str = typer.Option("csv", "--format", "-f", help="csv | pdf | txt | xlsx"),
    output: Path = typer.Option(EXPORT_DIR, "--output", "-o", help="Output directory"),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=["%Y-%m-%d"], help="First day (transactions/orders)"),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=["%Y-%m-%d"], help="Last day (transactions/orders)"),
    backend: Optional[str] = backend_option(),
) -> None:
    """Export a report file."""
    log = logger.bind(command="export", report=report, format=fmt)
    if report not in REPORT_TYPES:
        console.print(f"[red]Unknown report {report!r}. Choose from: {', '.join(REPORT_TYPES)}[/red]")
        raise typer.Exit(1)
    try:
        fmt = normalize_format(fmt)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    log.info("export.start")
    try:
        path = asyncio.run(
            _export(
                report,
                fmt,
                output,
                backend,
                date_from.date() if date_from else None,
                date_to.date() if date_to else None,
            )
        )
    except Exception as e:
        console.print(f"[red]Export failed: {e}[/red]")
        log.exception("export.error")
        raise typer.Exit(1)
    if path is None:
        console.print("[red]Export failed; see log for details.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Wrote {path}[/green]")
    log.info("export.complete", path=str(path))
