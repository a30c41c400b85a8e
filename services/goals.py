"""Proyección de ventas contra la meta mensual.

Modelo lineal por días: lo vendido hasta la fecha de corte se divide entre los
días transcurridos y se multiplica por los días del mes. Las divisiones entre
cero devuelven 0 (nunca NaN/Infinity ni excepción).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from services.calculations import CENT, ZERO, to_money

PCT = Decimal("0.0001")

# (umbral mínimo, nivel, color del dashboard)
PERFORMANCE_LEVELS = (
    (Decimal("1.00"), "verde", "#10B981"),
    (Decimal("0.95"), "amarillo", "#F59E0B"),
    (Decimal("0.90"), "azul", "#3B82F6"),
)
BELOW_LEVEL = ("rojo", "#D83636")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def elapsed_days(year: int, month: int, cutoff: date | None = None) -> int:
    """Día del mes de la fecha de corte; fuera del mes (o sin corte) = mes completo."""
    first, last = month_bounds(year, month)
    if cutoff is not None and first <= cutoff <= last:
        return cutoff.day
    return last.day


def period_end(year: int, month: int, cutoff: date | None = None) -> date:
    """Último día que cuenta para lo vendido en el periodo."""
    first, last = month_bounds(year, month)
    if cutoff is not None and first <= cutoff <= last:
        return cutoff
    return last


def safe_ratio(numerator, denominator) -> Decimal:
    den = to_money(denominator)
    if den == 0:
        return Decimal("0")
    return (to_money(numerator) / den).quantize(PCT)


def performance_level(pct) -> tuple[str, str]:
    value = Decimal(str(pct or 0))
    for threshold, level, color in PERFORMANCE_LEVELS:
        if value >= threshold:
            return level, color
    return BELOW_LEVEL


@dataclass
class GoalProjection:
    branch_id: int | None
    branch_name: str
    year: int
    month: int
    meta: Decimal
    actual: Decimal
    dias_mes: int
    dias_transcurridos: int
    dias_con_ventas: int
    pct_actual: Decimal
    proyeccion: Decimal
    pct_proyectado: Decimal
    desvio: Decimal

    def as_dict(self) -> dict:
        nivel_actual, color_actual = performance_level(self.pct_actual)
        nivel_proyectado, color_proyectado = performance_level(self.pct_proyectado)
        return {
            "sucursal_id": self.branch_id,
            "sucursal_nombre": self.branch_name,
            "anio": self.year,
            "mes": self.month,
            "meta": self.meta,
            "total_ventas": self.actual,
            "dias_mes": self.dias_mes,
            "dias_transcurridos": self.dias_transcurridos,
            "dias_con_ventas": self.dias_con_ventas,
            "pct_actual": self.pct_actual,
            "proyeccion": self.proyeccion,
            "pct_proyectado": self.pct_proyectado,
            "desvio": self.desvio,
            "nivel_actual": nivel_actual,
            "color_actual": color_actual,
            "nivel_proyectado": nivel_proyectado,
            "color_proyectado": color_proyectado,
        }


def project_goal(
    actual,
    goal,
    year: int,
    month: int,
    cutoff: date | None = None,
    *,
    branch_id: int | None = None,
    branch_name: str = "",
    dias_con_ventas: int = 0,
) -> GoalProjection:
    actual = to_money(actual)
    goal = to_money(goal)
    dias_mes = days_in_month(year, month)
    dias = elapsed_days(year, month, cutoff)

    if dias > 0:
        proyeccion = ((actual / dias) * dias_mes).quantize(CENT)
    else:
        proyeccion = ZERO

    return GoalProjection(
        branch_id=branch_id,
        branch_name=branch_name,
        year=year,
        month=month,
        meta=goal,
        actual=actual,
        dias_mes=dias_mes,
        dias_transcurridos=dias,
        dias_con_ventas=dias_con_ventas,
        pct_actual=safe_ratio(actual, goal),
        proyeccion=proyeccion,
        pct_proyectado=safe_ratio(proyeccion, goal),
        desvio=(proyeccion - goal).quantize(CENT),
    )


def project_branches(
    year: int,
    month: int,
    branches: Iterable,
    groups: Iterable,
    goals: dict[int, Decimal],
    cutoff: date | None = None,
) -> list[GoalProjection]:
    """Una proyección por sucursal.

    `branches`: sucursales a mostrar (aunque no tengan meta ni ventas).
    `groups`: resultado de aggregation.group_by_branch sobre el periodo.
    `goals`: meta por id de sucursal; sin meta = 0.
    """
    by_branch = {g.branch_id: g for g in groups}
    result = []
    for b in sorted(branches, key=lambda x: (x.name.lower(), x.id)):
        g = by_branch.get(b.id)
        result.append(
            project_goal(
                g.total_meta if g else ZERO,
                goals.get(b.id, ZERO),
                year,
                month,
                cutoff,
                branch_id=b.id,
                branch_name=b.name,
                dias_con_ventas=g.dias_con_ventas if g else 0,
            )
        )
    return result


def projection_totals(projections: Iterable[GoalProjection]) -> dict:
    total_ventas = ZERO
    total_meta = ZERO
    total_proyeccion = ZERO
    for p in projections:
        total_ventas += p.actual
        total_meta += p.meta
        total_proyeccion += p.proyeccion

    pct = safe_ratio(total_ventas, total_meta)
    nivel, color = performance_level(pct)
    return {
        "total_ventas": total_ventas,
        "total_meta": total_meta,
        "total_proyeccion": total_proyeccion,
        "pct_alcanzado": pct,
        "pct_proyectado": safe_ratio(total_proyeccion, total_meta),
        "desvio": total_proyeccion - total_meta,
        "nivel": nivel,
        "color": color,
    }
