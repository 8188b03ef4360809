"""Renderers: ReportTable -> bytes for CSV, TXT, PDF (reportlab) and XLSX (openpyxl)."""

import csv
import io
from datetime import date
from decimal import Decimal

from openpyxl import Workbook
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from logistx.config import CURRENCY_SYMBOL, PDF_CELL_CHARS, PDF_MAX_ROWS
from logistx.export.reports import ReportTable, as_date

EMPTY_MESSAGE = "No data available for the selected criteria."


def _pdf_text(text: str) -> str:
    # standard Type 1 fonts only cover cp1252
    return text.encode("cp1252", "replace").decode("cp1252")


def render_csv(table: ReportTable, currency: str = CURRENCY_SYMBOL) -> bytes:
    """Header row plus formatted rows; fields with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(table.labels)
    writer.writerows(table.formatted_rows(currency))
    return buf.getvalue().encode("utf-8")


def render_txt(table: ReportTable, today: date, currency: str = CURRENCY_SYMBOL) -> bytes:
    lines = [table.title, f"Generated on: {today.isoformat()}", *table.subtitle, ""]
    if table.rows:
        lines.append("\t".join(table.labels))
        lines.extend("\t".join(row) for row in table.formatted_rows(currency))
    else:
        lines.append(EMPTY_MESSAGE)
    return ("\n".join(lines) + "\n").encode("utf-8")


def render_pdf(
    table: ReportTable,
    today: date,
    currency: str = CURRENCY_SYMBOL,
    max_rows: int = PDF_MAX_ROWS,
    cell_chars: int = PDF_CELL_CHARS,
) -> bytes:
    """Single table on A4: equal column widths over 180mm, first max_rows rows, truncated cells."""
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle(table.title)
    _, height = A4
    left = 20 * mm

    def y(from_top_mm: float) -> float:
        return height - from_top_mm * mm

    def fit(pos: float) -> float:
        if pos <= 280:
            return pos
        pdf.showPage()
        pdf.setFont("Helvetica", 8)
        return 20.0

    pdf.setFont("Helvetica", 20)
    pdf.drawString(left, y(20), _pdf_text(table.title))
    pdf.setFont("Helvetica", 10)
    pdf.drawString(left, y(30), f"Generated on: {today.isoformat()}")
    for i, line in enumerate(table.subtitle):
        pdf.drawString(left, y(35 + 5 * i), _pdf_text(line))

    pos = 50.0
    pdf.setFont("Helvetica", 8)
    if table.columns:
        col_width = 180 * mm / len(table.columns)
        for i, label in enumerate(table.labels):
            pdf.drawString(left + i * col_width, y(pos), _pdf_text(label))
        pos += 10
        for row in table.formatted_rows(currency)[:max_rows]:
            pos = fit(pos)
            for i, cell in enumerate(row):
                pdf.drawString(left + i * col_width, y(pos), _pdf_text(cell[:cell_chars]))
            pos += 8
    if len(table.rows) > max_rows:
        pos = fit(pos + 10)
        pdf.drawString(left, y(pos), f"... and {len(table.rows) - max_rows} more items")
    pdf.showPage()
    pdf.save()
    return buf.getvalue()


def render_xlsx(table: ReportTable, currency: str = CURRENCY_SYMBOL) -> bytes:
    """One sheet named "Report"; numbers, money and dates are written as typed cells."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Report"
    ws.append(table.labels)
    money_format = f'"{currency}"#,##0.00'
    for row in table.rows:
        ws.append([_xlsx_value(value, col.kind) for value, col in zip(row, table.columns)])
        for cell, col in zip(ws[ws.max_row], table.columns):
            if col.kind == "money":
                cell.number_format = money_format
            elif col.kind == "percent":
                cell.number_format = "0.0%"
            elif col.kind == "date":
                cell.number_format = "yyyy-mm-dd"
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _xlsx_value(value, kind: str):
    if value is None:
        return None
    if kind == "money":
        return Decimal(value)
    if kind == "percent":
        return Decimal(value) / 100
    if kind == "date":
        # Excel cells carry no timezone
        return as_date(value)
    if kind == "int":
        return int(value)
    return str(value)
