"""Armado de reportes.

Cada función recibe registros ya filtrados (services.records) y devuelve filas
planas (dict columna -> valor) más una fila de totales. El formato (moneda,
Excel, PDF, JSON) lo decide quien renderiza (services.exports / routes).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from services import aggregation as agg
from services import goals as goal_calc
from services.calculations import ZERO, derive_for_record, to_money

logger = logging.getLogger(__name__)

TOTAL_LABEL = "TOTAL GENERAL"


class Col:
    """Tipos de columna (el renderer decide el formato)."""

    TEXT = "text"
    DATE = "date"
    MONEY = "money"
    FLAG = "flag"
    INT = "int"


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    kind: str = Col.TEXT
    width: int = 15


@dataclass
class Report:
    title: str
    columns: list[Column]
    rows: list[dict] = field(default_factory=list)
    totals: Optional[dict] = None

    @property
    def money_keys(self) -> list[str]:
        return [c.key for c in self.columns if c.kind == Col.MONEY]

    def as_dict(self) -> dict:
        return {"titulo": self.title, "filas": self.rows, "totales": self.totals}


def _sum_rows(rows: list[dict], keys: Iterable[str]) -> dict:
    totals = {k: ZERO for k in keys}
    for row in rows:
        for k in totals:
            totals[k] += to_money(row.get(k))
    return totals


# =========================
# Reporte 1: detalle por turno
# =========================
DETAIL_COLUMNS = [
    Column("fecha", "Fecha", Col.DATE, 12),
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("turno", "Turno", Col.TEXT, 15),
    Column("correlativo_inicial", "Correlativo Inicial", Col.TEXT, 15),
    Column("correlativo_final", "Correlativo Final", Col.TEXT, 15),
    Column("cuenta", "Cuenta", Col.TEXT, 25),
    Column("monto_depositado", "Monto Depositado", Col.MONEY, 18),
    Column("venta_tarjeta", "Venta Tarjeta", Col.MONEY, 15),
    Column("total_ventas", "Total Ventas", Col.MONEY, 15),
    Column("total_sistema", "Total Sistema", Col.MONEY, 15),
    Column("gastos", "Gastos", Col.MONEY, 12),
    Column("canjes", "Canjes", Col.MONEY, 12),
    Column("total_vendido", "Total Vendido", Col.MONEY, 15),
    Column("total_facturado", "Total Facturado", Col.MONEY, 17),
    Column("total_no_facturado", "Total No Facturado", Col.MONEY, 20),
    Column("total_meta", "Total Meta", Col.MONEY, 15),
    Column("faltante", "Faltante", Col.MONEY, 12),
    Column("tiene_faltante", "Tiene Faltante", Col.FLAG, 15),
    Column("observaciones", "Observaciones", Col.TEXT, 30),
]


def _detail_sort_key(r):
    shift = getattr(r, "shift_type", None)
    return (r.fecha, r.branch_id, shift.sort_order if shift is not None else 0, r.shift_type_id)


def detail_row(r) -> dict:
    d = derive_for_record(r)
    account = getattr(r, "account", None)
    return {
        "id": r.id,
        "fecha": r.fecha,
        "sucursal": r.branch.name if r.branch is not None else "",
        "turno": r.shift_type.name if r.shift_type is not None else "",
        "correlativo_inicial": r.correlativo_inicial or "",
        "correlativo_final": r.correlativo_final or "",
        "cuenta": account.label if account is not None else "",
        "monto_depositado": to_money(r.monto_depositado),
        "venta_tarjeta": to_money(r.venta_tarjeta),
        "total_ventas": d.total_ventas,
        "total_sistema": to_money(r.total_sistema),
        "gastos": to_money(r.gastos),
        "canjes": to_money(r.canjes),
        "total_vendido": d.total_vendido,
        "total_facturado": d.total_facturado,
        "total_no_facturado": d.total_no_facturado,
        "total_meta": d.total_meta,
        "faltante": d.faltante,
        "tiene_faltante": d.tiene_faltante,
        "observaciones": r.observaciones or "",
    }


def detail_report(records: Iterable) -> Report:
    rows = [detail_row(r) for r in sorted(records, key=_detail_sort_key)]
    report = Report("Detalle por Turno", DETAIL_COLUMNS, rows)

    totals = _sum_rows(rows, report.money_keys)
    # Faltante del total con la misma fórmula, sobre las sumas
    totals["faltante"] = totals["total_sistema"] - (
        totals["monto_depositado"] + totals["venta_tarjeta"] + totals["gastos"]
    )
    totals.update(fecha=None, sucursal=TOTAL_LABEL, tiene_faltante=totals["faltante"] < 0)
    report.totals = totals

    logger.debug("detail_report: %d filas", len(rows))
    return report


# =========================
# Reporte 2: resumen diario (fecha x sucursal)
# =========================
DAILY_COLUMNS = [
    Column("fecha", "Fecha", Col.DATE, 12),
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("total_depositado", "Total Depositado", Col.MONEY, 18),
    Column("total_tarjeta", "Total Tarjeta", Col.MONEY, 15),
    Column("total_ventas", "Total Ventas", Col.MONEY, 15),
    Column("total_sistema", "Total Sistema", Col.MONEY, 15),
    Column("total_gastos", "Total Gastos", Col.MONEY, 15),
    Column("total_canjes", "Total Canjes", Col.MONEY, 15),
    Column("total_facturado", "Total Facturado", Col.MONEY, 17),
    Column("total_no_facturado", "Total No Facturado", Col.MONEY, 20),
    Column("faltante", "Faltante", Col.MONEY, 12),
    Column("tiene_faltante", "Tiene Faltante", Col.FLAG, 15),
]

BRANCH_DAILY_COLUMNS = [
    Column("fecha", "Fecha", Col.DATE, 12),
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("total_depositado", "Total Depositado", Col.MONEY, 18),
    Column("total_tarjeta", "Total Tarjeta", Col.MONEY, 15),
    Column("total_sistema", "Total Sistema", Col.MONEY, 15),
    Column("total_facturado", "Total Facturado", Col.MONEY, 17),
    Column("total_no_facturado", "Total No Facturado", Col.MONEY, 20),
    Column("total_gastos", "Total Gastos", Col.MONEY, 15),
    Column("total_canjes", "Total Canjes", Col.MONEY, 15),
    Column("total_vendido", "Total Vendido", Col.MONEY, 15),
    Column("total_meta", "Total Meta", Col.MONEY, 15),
    Column("faltante", "Faltante", Col.MONEY, 12),
    Column("tiene_faltante", "Tiene Faltante", Col.FLAG, 15),
]


def _group_row(g: agg.Totals, **keys) -> dict:
    row = dict(keys)
    row.update(g.amounts())
    return row


def _totals_row(groups, **keys) -> dict:
    return _group_row(agg.grand_total(groups), **keys)


def daily_summary_report(records: Iterable) -> Report:
    groups = agg.group_by_day_and_branch(records)
    rows = [_group_row(g, fecha=g.fecha, sucursal_id=g.branch_id, sucursal=g.branch_name) for g in groups]
    totals = _totals_row(groups, fecha=None, sucursal_id=None, sucursal=TOTAL_LABEL)
    return Report("Resumen Diario", DAILY_COLUMNS, rows, totals)


# =========================
# Reporte 3: resumen global por sucursal
# =========================
BRANCH_COLUMNS = [
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("total_depositado", "Total Depositado", Col.MONEY, 18),
    Column("total_tarjeta", "Total Tarjeta", Col.MONEY, 15),
    Column("total_sistema", "Total Sistema", Col.MONEY, 15),
    Column("total_facturado", "Total Facturado", Col.MONEY, 17),
    Column("total_no_facturado", "Total No Facturado", Col.MONEY, 20),
    Column("total_gastos", "Total Gastos", Col.MONEY, 15),
    Column("total_canjes", "Total Canjes", Col.MONEY, 15),
    Column("total_vendido", "Total Vendido", Col.MONEY, 15),
    Column("total_meta", "Total Meta", Col.MONEY, 15),
]


def branch_summary_report(records: Iterable) -> Report:
    groups = agg.group_by_branch(records, order_by="name")
    rows = [
        _group_row(g, sucursal_id=g.branch_id, sucursal=g.branch_name, dias_con_ventas=g.dias_con_ventas)
        for g in groups
    ]
    totals = _totals_row(groups, sucursal_id=None, sucursal=TOTAL_LABEL)
    return Report("Resumen Global", BRANCH_COLUMNS, rows, totals)


def branch_daily_summary_report(records: Iterable) -> Report:
    """Variante del resumen global con detalle por día y sucursal."""
    groups = agg.group_by_day_and_branch(records)
    rows = [_group_row(g, fecha=g.fecha, sucursal_id=g.branch_id, sucursal=g.branch_name) for g in groups]
    totals = _totals_row(groups, fecha=None, sucursal_id=None, sucursal=TOTAL_LABEL)
    return Report("Resumen Global Diario", BRANCH_DAILY_COLUMNS, rows, totals)


# Resumen por sucursal (PDF): solo las columnas de cuadre
BRANCH_PDF_COLUMNS = [
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("total_depositado", "Total Depositado", Col.MONEY, 18),
    Column("total_tarjeta", "Total Tarjeta", Col.MONEY, 15),
    Column("total_sistema", "Total Sistema", Col.MONEY, 15),
    Column("total_facturado", "Total Facturado", Col.MONEY, 17),
]


def branch_pdf_report(records: Iterable) -> Report:
    base = branch_summary_report(records)
    return Report("Resumen por Sucursal", BRANCH_PDF_COLUMNS, base.rows, base.totals)


# =========================
# Depósitos por cuenta
# =========================
ACCOUNT_COLUMNS = [
    Column("cuenta", "Cuenta", Col.TEXT, 30),
    Column("banco", "Banco", Col.TEXT, 18),
    Column("es_especial", "Especial", Col.FLAG, 10),
    Column("total_depositado", "Total Depositado", Col.MONEY, 18),
    Column("cantidad_depositos", "# Depósitos", Col.INT, 12),
]

DEPOSIT_COLUMNS = [
    Column("fecha", "Fecha", Col.DATE, 12),
    Column("sucursal", "Sucursal", Col.TEXT, 20),
    Column("turno", "Turno", Col.TEXT, 15),
    Column("cuenta", "Cuenta", Col.TEXT, 30),
    Column("banco", "Banco", Col.TEXT, 18),
    Column("monto_depositado", "Monto Depositado", Col.MONEY, 18),
    Column("es_especial", "Especial", Col.FLAG, 10),
]


@dataclass
class DepositsReport:
    summary: Report
    detail: Report
    totals: dict

    def as_dict(self) -> dict:
        return {
            "resumen_por_cuenta": self.summary.rows,
            "detalle": self.detail.rows,
            "totales": self.totals,
        }

    @property
    def sheets(self) -> list[Report]:
        return [self.summary, self.detail]


def deposits_by_account_report(records: Iterable) -> DepositsReport:
    summary = agg.group_by_account(records)

    summary_rows = [
        {
            "cuenta_id": g.account_id,
            "cuenta_numero": g.number,
            "cuenta_nombre": g.name,
            "cuenta": f"{g.number} - {g.name}",
            "banco": g.bank,
            "es_especial": g.is_special,
            "total_depositado": g.total_depositado,
            "cantidad_depositos": g.cantidad_depositos,
        }
        for g in summary.groups
    ]

    detail_rows = []
    for r in sorted(summary.deposits, key=_detail_sort_key):
        detail_rows.append(
            {
                "id": r.id,
                "fecha": r.fecha,
                "sucursal_id": r.branch_id,
                "sucursal_nombre": r.branch.name if r.branch is not None else "",
                "sucursal": r.branch.name if r.branch is not None else "",
                "turno_nombre": r.shift_type.name if r.shift_type is not None else "",
                "turno": r.shift_type.name if r.shift_type is not None else "",
                "cuenta_id": r.account.id,
                "cuenta_numero": r.account.number,
                "cuenta_nombre": r.account.name,
                "cuenta": r.account.label,
                "banco": r.account.bank,
                "monto_depositado": to_money(r.monto_depositado),
                "es_especial": bool(r.account.is_special),
            }
        )

    totals = {
        "total_general": summary.total_general,
        "total_cuentas_normales": summary.total_cuentas_normales,
        "total_cuentas_especiales": summary.total_cuentas_especiales,
        "cantidad_depositos": sum(g.cantidad_depositos for g in summary.groups),
    }

    summary_totals = {
        "cuenta": TOTAL_LABEL,
        "total_depositado": summary.total_general,
        "cantidad_depositos": totals["cantidad_depositos"],
    }
    detail_totals = {"sucursal": TOTAL_LABEL, "monto_depositado": summary.total_general}

    return DepositsReport(
        summary=Report("Resumen por Cuenta", ACCOUNT_COLUMNS, summary_rows, summary_totals),
        detail=Report("Detalle de Depósitos", DEPOSIT_COLUMNS, detail_rows, detail_totals),
        totals=totals,
    )


# =========================
# Dashboard de metas
# =========================
@dataclass
class SalesDashboard:
    year: int
    month: int
    cutoff: Optional[date]
    projections: list[goal_calc.GoalProjection]
    totals: dict

    def as_dict(self) -> dict:
        return {
            "anio": self.year,
            "mes": self.month,
            "fecha_corte": self.cutoff,
            "sucursales": [p.as_dict() for p in self.projections],
            "totales": self.totals,
        }


def sales_dashboard(
    year: int,
    month: int,
    branches: Iterable,
    records: Iterable,
    goals: dict[int, Decimal],
    cutoff: Optional[date] = None,
) -> SalesDashboard:
    """Ventas (total_meta) vs meta mensual por sucursal.

    `records` debe venir filtrado al periodo (inicio de mes .. fecha de corte).
    """
    groups = agg.group_by_branch(records, order_by="id")
    projections = goal_calc.project_branches(year, month, branches, groups, goals, cutoff)
    return SalesDashboard(year, month, cutoff, projections, goal_calc.projection_totals(projections))
