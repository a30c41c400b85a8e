from __future__ import annotations

from flask import Blueprint, current_app, jsonify, send_file

from models import db
from routes.params import arg_date, arg_int, date_range
from services import catalogs, exports, goals, records, reports
from services.errors import ValidationError

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reportes")


def _records_in_range(**filters):
    date_from, date_to = date_range()
    items = records.list_shift_records(
        db.session, date_from=date_from, date_to=date_to, branch_id=arg_int("sucursal_id"), **filters
    )
    return items, date_from, date_to


def _send_xlsx(buffer, prefix: str, date_from, date_to):
    return send_file(
        buffer,
        mimetype=exports.XLSX_MIMETYPE,
        as_attachment=True,
        download_name=exports.export_filename(prefix, "xlsx", date_from, date_to),
    )


# =========================
# Excel
# =========================
@reports_bp.get("/detalle")
def report_detail():
    items, date_from, date_to = _records_in_range()
    report = reports.detail_report(items)
    current_app.logger.info("Reporte detalle: %d registros (%s - %s)", len(report.rows), date_from, date_to)
    return _send_xlsx(exports.report_to_xlsx(report), "reporte-detalle", date_from, date_to)


@reports_bp.get("/resumen-diario")
def report_daily():
    items, date_from, date_to = _records_in_range()
    report = reports.daily_summary_report(items)
    current_app.logger.info("Reporte resumen diario: %d filas", len(report.rows))
    return _send_xlsx(exports.report_to_xlsx(report), "reporte-resumen-diario", date_from, date_to)


@reports_bp.get("/resumen-global")
def report_global():
    """Hoja por sucursal + hoja por día y sucursal, ambas con TOTAL GENERAL."""
    items, date_from, date_to = _records_in_range()
    sheets = [reports.branch_summary_report(items), reports.branch_daily_summary_report(items)]
    current_app.logger.info("Reporte resumen global: %d sucursales", len(sheets[0].rows))
    return _send_xlsx(exports.build_workbook(sheets), "reporte-resumen-global", date_from, date_to)


@reports_bp.get("/depositos-cuenta/excel")
def report_deposits_xlsx():
    items, date_from, date_to = _records_in_range(
        account_id=arg_int("cuenta_id"), account_not_null=True, deposit_gt_zero=True
    )
    report = reports.deposits_by_account_report(items)
    return _send_xlsx(exports.build_workbook(report.sheets), "reporte-depositos-cuenta", date_from, date_to)


# =========================
# JSON
# =========================
@reports_bp.get("/resumen-global-diario")
def report_global_daily_json():
    items, _, _ = _records_in_range()
    return jsonify(reports.branch_daily_summary_report(items).as_dict())


@reports_bp.get("/depositos-cuenta")
def report_deposits_json():
    items, _, _ = _records_in_range(account_id=arg_int("cuenta_id"), account_not_null=True, deposit_gt_zero=True)
    return jsonify(reports.deposits_by_account_report(items).as_dict())


@reports_bp.get("/dashboard-ventas")
def sales_dashboard():
    year = arg_int("anio", required=True)
    month = arg_int("mes", required=True)
    if not 1 <= month <= 12:
        raise ValidationError("El mes debe estar entre 1 y 12.")
    if not 1900 <= year <= 9999:
        raise ValidationError("Año inválido.")
    branch_id = arg_int("sucursal_id")
    cutoff = arg_date("fecha_corte")

    if branch_id is not None:
        branches = [catalogs.get_branch(db.session, branch_id)]
    else:
        branches = catalogs.list_branches(db.session, only_active=True)

    first, _ = goals.month_bounds(year, month)
    items = records.list_shift_records(
        db.session, date_from=first, date_to=goals.period_end(year, month, cutoff), branch_id=branch_id
    )
    goal_map = records.goals_by_branch(db.session, year, month, branch_id)

    dashboard = reports.sales_dashboard(year, month, branches, items, goal_map, cutoff)
    return jsonify(dashboard.as_dict())


# =========================
# PDF
# =========================
@reports_bp.get("/resumen-sucursal/pdf")
def report_branch_pdf():
    items, date_from, date_to = _records_in_range()
    report = reports.branch_pdf_report(items)
    buffer = exports.report_to_pdf(report, date_from, date_to)
    current_app.logger.info("PDF resumen por sucursal: %d sucursales", len(report.rows))
    return send_file(
        buffer,
        mimetype=exports.PDF_MIMETYPE,
        as_attachment=True,
        download_name=exports.export_filename("resumen-sucursal", "pdf", date_from, date_to),
    )
