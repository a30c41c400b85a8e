from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from factories import fake_record
from services import aggregation as agg
from services import goals


def test_projection_with_cutoff_inside_month() -> None:
    """Mes de 30 días, corte día 10, vendido 10000, meta 40000."""
    p = goals.project_goal("10000", "40000", 2024, 4, date(2024, 4, 10))
    assert p.dias_mes == 30
    assert p.dias_transcurridos == 10
    assert p.proyeccion == Decimal("30000.00")
    assert p.pct_actual == Decimal("0.25")
    assert p.pct_proyectado == Decimal("0.75")
    assert p.desvio == Decimal("-10000.00")

    data = p.as_dict()
    assert data["nivel_actual"] == "rojo"
    assert data["color_proyectado"] == "#D83636"


def test_zero_goal_gives_zero_percentages() -> None:
    p = goals.project_goal("5000", "0", 2024, 4, date(2024, 4, 15))
    assert p.pct_actual == 0
    assert p.pct_proyectado == 0
    assert p.proyeccion == Decimal("10000.00")


@pytest.mark.parametrize("cutoff", [None, date(2024, 3, 31), date(2024, 5, 1)])
def test_cutoff_outside_month_uses_full_month(cutoff) -> None:
    assert goals.elapsed_days(2024, 4, cutoff) == 30
    assert goals.period_end(2024, 4, cutoff) == date(2024, 4, 30)


def test_leap_february() -> None:
    assert goals.days_in_month(2024, 2) == 29
    assert goals.days_in_month(2023, 2) == 28
    assert goals.month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


@pytest.mark.parametrize(
    "pct, level",
    [
        ("1.00", "verde"),
        ("1.35", "verde"),
        ("0.95", "amarillo"),
        ("0.9499", "azul"),
        ("0.90", "azul"),
        ("0.8999", "rojo"),
        ("0", "rojo"),
    ],
)
def test_performance_thresholds(pct, level) -> None:
    assert goals.performance_level(Decimal(pct))[0] == level


def test_safe_ratio_never_divides_by_zero() -> None:
    assert goals.safe_ratio("100", "0") == 0
    assert goals.safe_ratio("1", "3") == Decimal("0.3333")


def test_project_branches_includes_branches_without_sales() -> None:
    branches = [SimpleNamespace(id=1, name="Norte"), SimpleNamespace(id=2, name="Centro")]
    records = [
        fake_record(date(2024, 4, 1), 1, "Norte", total_sistema=600, canjes=100),
        fake_record(date(2024, 4, 2), 1, "Norte", total_sistema=500),
    ]
    groups = agg.group_by_branch(records, order_by="id")
    result = goals.project_branches(2024, 4, branches, groups, {1: Decimal("3000")}, date(2024, 4, 10))

    assert [p.branch_name for p in result] == ["Centro", "Norte"]
    centro, norte = result
    assert centro.actual == Decimal("0.00")
    assert centro.meta == Decimal("0.00")
    assert centro.pct_actual == 0
    assert norte.actual == Decimal("1000.00")
    assert norte.dias_con_ventas == 2
    assert norte.proyeccion == Decimal("3000.00")
    assert goals.performance_level(norte.pct_proyectado)[0] == "verde"


def test_projection_totals() -> None:
    p1 = goals.project_goal("1000", "2000", 2024, 4)
    p2 = goals.project_goal("500", "0", 2024, 4)
    totals = goals.projection_totals([p1, p2])
    assert totals["total_ventas"] == Decimal("1500.00")
    assert totals["total_meta"] == Decimal("2000.00")
    assert totals["pct_alcanzado"] == Decimal("0.75")
    assert totals["nivel"] == "rojo"
