"""Renderizado de reportes a Excel (XlsxWriter) y PDF (ReportLab).

Reciben `services.reports.Report` y devuelven un BytesIO listo para
`send_file`. Los montos se escriben como número con formato de quetzales,
no como texto.
"""

from __future__ import annotations

import io
import logging
from datetime import date, datetime
from typing import Iterable, Optional

import xlsxwriter
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from services.calculations import to_money
from services.reports import Col, Report

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"

CURRENCY_SYMBOL = "Q"
EXCEL_MONEY_FORMAT = '"Q"#,##0.00'
EXCEL_DATE_FORMAT = "dd/mm/yyyy"

# Colores
HEADER_BG = "#D3D3D3"
TOTALS_BG = "#FFD966"
ALERT_BG = "#FF0000"
ALERT_FG = "#FFFFFF"


def format_currency(value) -> str:
    """1234.5 -> 'Q 1,234.50'; -50 -> '-Q 50.00'."""
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {abs(amount):,.2f}"


def format_flag(value) -> str:
    return "SÍ" if value else "NO"


def format_date(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    return "" if value is None else str(value)


def period_label(date_from: Optional[date], date_to: Optional[date]) -> str:
    if date_from and date_to:
        return f"Del {format_date(date_from)} al {format_date(date_to)}"
    if date_from:
        return f"Desde {format_date(date_from)}"
    if date_to:
        return f"Hasta {format_date(date_to)}"
    return "Todas las fechas"


def export_filename(prefix: str, ext: str, date_from: Optional[date] = None, date_to: Optional[date] = None) -> str:
    parts = [prefix]
    if date_from:
        parts.append(date_from.isoformat())
    if date_to:
        parts.append(date_to.isoformat())
    return "_".join(parts) + f".{ext}"


# =========================
# Excel
# =========================
class _Formats:
    def __init__(self, wb):
        self.header = wb.add_format(
            {"bold": True, "bg_color": HEADER_BG, "border": 1, "align": "center", "valign": "vcenter", "text_wrap": True}
        )
        self.text = wb.add_format({"border": 1})
        self.money = wb.add_format({"num_format": EXCEL_MONEY_FORMAT, "border": 1})
        self.date = wb.add_format({"num_format": EXCEL_DATE_FORMAT, "border": 1})
        self.int = wb.add_format({"border": 1, "align": "right"})
        self.flag = wb.add_format({"border": 1, "align": "center"})
        self.money_alert = wb.add_format(
            {"num_format": EXCEL_MONEY_FORMAT, "border": 1, "bg_color": ALERT_BG, "font_color": ALERT_FG, "bold": True}
        )
        self.flag_alert = wb.add_format(
            {"border": 1, "align": "center", "bg_color": ALERT_BG, "font_color": ALERT_FG, "bold": True}
        )
        self.total_text = wb.add_format({"bold": True, "bg_color": TOTALS_BG, "border": 1})
        self.total_money = wb.add_format(
            {"bold": True, "bg_color": TOTALS_BG, "border": 1, "num_format": EXCEL_MONEY_FORMAT}
        )
        self.total_int = wb.add_format({"bold": True, "bg_color": TOTALS_BG, "border": 1, "align": "right"})


def _write_cell(ws, row: int, col: int, column, value, fmt: _Formats) -> None:
    kind = column.kind
    if kind == Col.MONEY:
        amount = to_money(value)
        cell_fmt = fmt.money_alert if column.key == "faltante" and amount < 0 else fmt.money
        ws.write_number(row, col, float(amount), cell_fmt)
    elif kind == Col.DATE:
        if isinstance(value, (date, datetime)):
            ws.write_datetime(row, col, datetime(value.year, value.month, value.day), fmt.date)
        else:
            ws.write_string(row, col, format_date(value), fmt.text)
    elif kind == Col.FLAG:
        # Solo "tiene faltante" se pinta en rojo; "especial" es informativo
        alert = bool(value) and column.key == "tiene_faltante"
        ws.write_string(row, col, format_flag(value), fmt.flag_alert if alert else fmt.flag)
    elif kind == Col.INT:
        ws.write_number(row, col, int(value or 0), fmt.int)
    else:
        ws.write_string(row, col, "" if value is None else str(value), fmt.text)


def _write_totals(ws, row: int, report: Report, fmt: _Formats) -> None:
    totals = report.totals or {}
    for col, column in enumerate(report.columns):
        value = totals.get(column.key)
        if column.kind == Col.MONEY and value is not None:
            ws.write_number(row, col, float(to_money(value)), fmt.total_money)
        elif column.kind == Col.INT and value is not None:
            ws.write_number(row, col, int(value), fmt.total_int)
        elif column.kind == Col.FLAG and value is not None:
            ws.write_string(row, col, format_flag(value), fmt.total_text)
        elif column.kind == Col.TEXT and value is not None:
            ws.write_string(row, col, str(value), fmt.total_text)
        else:
            ws.write_blank(row, col, None, fmt.total_text)


def _write_sheet(wb, report: Report, fmt: _Formats, sheet_name: Optional[str] = None) -> None:
    # Excel limita el nombre de hoja a 31 caracteres
    ws = wb.add_worksheet((sheet_name or report.title)[:31])

    for col, column in enumerate(report.columns):
        ws.set_column(col, col, column.width)
        ws.write_string(0, col, column.header, fmt.header)
    ws.set_row(0, 30)
    ws.freeze_panes(1, 0)

    row = 1
    for data in report.rows:
        for col, column in enumerate(report.columns):
            _write_cell(ws, row, col, column, data.get(column.key), fmt)
        row += 1

    if report.totals is not None:
        _write_totals(ws, row, report, fmt)

    if report.rows:
        ws.autofilter(0, 0, len(report.rows), len(report.columns) - 1)


def build_workbook(reports: Iterable[Report]) -> io.BytesIO:
    """Una hoja por reporte. Devuelve el .xlsx en memoria."""
    output = io.BytesIO()
    wb = xlsxwriter.Workbook(output, {"in_memory": True})
    fmt = _Formats(wb)

    count = 0
    for report in reports:
        _write_sheet(wb, report, fmt)
        count += 1
    if count == 0:
        wb.add_worksheet("Reporte")

    wb.close()
    output.seek(0)
    logger.debug("build_workbook: %d hojas, %d bytes", count, output.getbuffer().nbytes)
    return output


def report_to_xlsx(report: Report) -> io.BytesIO:
    return build_workbook([report])


# =========================
# PDF
# =========================
def _pdf_cell(column, value) -> str:
    if column.kind == Col.MONEY:
        return format_currency(value)
    if column.kind == Col.DATE:
        return format_date(value)
    if column.kind == Col.FLAG:
        return format_flag(value)
    if column.kind == Col.INT:
        return str(int(value or 0))
    return "" if value is None else str(value)


def report_to_pdf(
    report: Report,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    generated_at: Optional[datetime] = None,
) -> io.BytesIO:
    """Tabla del reporte en carta horizontal, con fila de totales gris."""
    output = io.BytesIO()
    generated_at = generated_at or datetime.now()

    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(letter),
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=report.title,
    )
    styles = getSampleStyleSheet()

    data = [[c.header for c in report.columns]]
    for row in report.rows:
        data.append([_pdf_cell(c, row.get(c.key)) for c in report.columns])
    has_totals = report.totals is not None
    if has_totals:
        data.append(
            [_pdf_cell(c, report.totals.get(c.key)) if report.totals.get(c.key) is not None else "" for c in report.columns]
        )

    table = Table(data, repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4A4A4A")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for i, column in enumerate(report.columns):
        if column.kind == Col.MONEY:
            style.append(("ALIGN", (i, 1), (i, -1), "RIGHT"))
    if has_totals:
        style += [
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#E0E0E0")),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ]
    table.setStyle(TableStyle(style))

    story = [
        Paragraph(report.title, styles["Title"]),
        Paragraph(period_label(date_from, date_to), styles["Normal"]),
        Spacer(1, 0.25 * inch),
        table,
        Spacer(1, 0.3 * inch),
        Paragraph(f"Generado: {generated_at.strftime('%d/%m/%Y %H:%M')}", styles["Italic"]),
    ]
    doc.build(story)

    output.seek(0)
    logger.debug("report_to_pdf: %s, %d filas", report.title, len(report.rows))
    return output