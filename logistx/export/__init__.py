"""Report export: typed report tables rendered to CSV, TXT, PDF or XLSX artifacts."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from logistx.config import CURRENCY_SYMBOL, EXPORT_DIR
from logistx.export.formats import render_csv, render_pdf, render_txt, render_xlsx
from logistx.export.reports import REPORT_TYPES, Column, ReportTable, build_report, format_value
from logistx.utils.logger import get_logger

logger = get_logger("logistx.export")

FORMATS = {
    "csv": ("csv", "text/csv"),
    "txt": ("txt", "text/plain"),
    "pdf": ("pdf", "application/pdf"),
    "xlsx": ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
}
FORMAT_ALIASES = {"excel": "xlsx", "text": "txt"}


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    content: bytes


def normalize_format(fmt: str) -> str:
    key = fmt.strip().lower()
    key = FORMAT_ALIASES.get(key, key)
    if key not in FORMATS:
        raise ValueError(f"Unknown export format: {fmt!r}. Use one of {', '.join(FORMATS)}")
    return key


def export_filename(report_type: str, fmt: str, today: date) -> str:
    """`<type>-report-<date>.<ext>`; `inventory-export.<ext>` and `analytics-<date>.<ext>` are named as-is."""
    ext = FORMATS[normalize_format(fmt)][0]
    if report_type == "inventory-export":
        return f"inventory-export.{ext}"
    if report_type == "analytics":
        return f"analytics-{today.isoformat()}.{ext}"
    return f"{report_type}-report-{today.isoformat()}.{ext}"


def export_report(
    table: ReportTable,
    fmt: str,
    *,
    report_type: str,
    today: Optional[date] = None,
    currency: str = CURRENCY_SYMBOL,
) -> Optional[ExportArtifact]:
    """Render table in fmt. Any rendering failure is logged and yields None (no partial artifact)."""
    today = today or date.today()
    try:
        key = normalize_format(fmt)
        if key == "csv":
            content = render_csv(table, currency)
        elif key == "txt":
            content = render_txt(table, today, currency)
        elif key == "pdf":
            content = render_pdf(table, today, currency)
        else:
            content = render_xlsx(table, currency)
        artifact = ExportArtifact(export_filename(report_type, key, today), FORMATS[key][1], content)
    except Exception as e:
        logger.exception("export.failed", report_type=report_type, format=fmt, error=str(e))
        return None
    logger.info(
        "export.rendered",
        report_type=report_type,
        format=key,
        rows=len(table.rows),
        bytes=len(artifact.content),
    )
    return artifact


def write_artifact(artifact: ExportArtifact, directory: Optional[Path] = None) -> Path:
    """Write the artifact under directory (default EXPORT_DIR); returns the file path."""
    out_dir = Path(directory or EXPORT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / artifact.filename
    path.write_bytes(artifact.content)
    logger.info("export.written", path=str(path), bytes=len(artifact.content))
    return path


__all__ = [
    "Column",
    "ExportArtifact",
    "FORMATS",
    "REPORT_TYPES",
    "ReportTable",
    "build_report",
    "export_filename",
    "export_report",
    "format_value",
    "normalize_format",
    "write_artifact",
]
