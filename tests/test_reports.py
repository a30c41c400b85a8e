from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from factories import fake_account, fake_record
from services import reports


def _records():
    normal = fake_account(1, is_special=False)
    special = fake_account(2, is_special=True, number="3285010891", name="SELVIN GIAN TELLO", bank="BANRURAL")
    return [
        fake_record(date(2024, 3, 2), 2, "Norte", normal, monto_depositado=200, venta_tarjeta=0, total_sistema=180),
        fake_record(date(2024, 3, 1), 1, "Centro", special, monto_depositado=100, venta_tarjeta=50, total_sistema=200, gastos=10, canjes=5),
        fake_record(date(2024, 3, 1), 2, "Norte", None, monto_depositado=0, venta_tarjeta=30, total_sistema=30),
    ]


def test_detail_report_rows_and_totals() -> None:
    report = reports.detail_report(_records())
    assert [(r["fecha"], r["sucursal"]) for r in report.rows] == [
        (date(2024, 3, 1), "Centro"),
        (date(2024, 3, 1), "Norte"),
        (date(2024, 3, 2), "Norte"),
    ]
    centro = report.rows[0]
    assert centro["cuenta"] == "3285010891 - SELVIN GIAN TELLO"
    assert centro["total_no_facturado"] == Decimal("100.00")
    assert centro["faltante"] == Decimal("40.00")
    assert report.rows[1]["cuenta"] == ""

    totals = report.totals
    assert totals["sucursal"] == reports.TOTAL_LABEL
    assert totals["monto_depositado"] == Decimal("300.00")
    # 410 - (300 + 80 + 10)
    assert totals["faltante"] == Decimal("20.00")


def test_daily_summary_report_groups_by_day_and_branch() -> None:
    report = reports.daily_summary_report(_records())
    assert [(r["fecha"], r["sucursal"]) for r in report.rows] == [
        (date(2024, 3, 1), "Centro"),
        (date(2024, 3, 1), "Norte"),
        (date(2024, 3, 2), "Norte"),
    ]
    last = report.rows[-1]
    assert last["faltante"] == Decimal("-20.00")
    assert last["tiene_faltante"] is True
    assert report.totals["total_ventas"] == sum(r["total_ventas"] for r in report.rows)


def test_branch_summary_report_total_general() -> None:
    report = reports.branch_summary_report(_records())
    assert [r["sucursal"] for r in report.rows] == ["Centro", "Norte"]

    norte = report.rows[1]
    assert norte["total_depositado"] == Decimal("200.00")
    assert norte["total_vendido"] == Decimal("210.00")
    assert norte["dias_con_ventas"] == 2

    totals = report.totals
    assert totals["sucursal"] == "TOTAL GENERAL"
    for key in ("total_depositado", "total_tarjeta", "total_sistema", "total_no_facturado", "total_meta"):
        assert totals[key] == sum(r[key] for r in report.rows)


def test_branch_daily_variant_has_total_meta() -> None:
    report = reports.branch_daily_summary_report(_records())
    assert len(report.rows) == 3
    assert "total_meta" in report.money_keys
    assert report.totals["total_meta"] == Decimal("405.00")


def test_deposits_by_account_report() -> None:
    result = reports.deposits_by_account_report(_records())
    data = result.as_dict()

    assert [r["cuenta_numero"] for r in data["resumen_por_cuenta"]] == ["7100717710", "3285010891"]
    assert len(data["detalle"]) == 2
    assert data["detalle"][0]["es_especial"] is True
    assert data["totales"] == {
        "total_general": Decimal("300.00"),
        "total_cuentas_normales": Decimal("200.00"),
        "total_cuentas_especiales": Decimal("100.00"),
        "cantidad_depositos": 2,
    }
    assert [s.title for s in result.sheets] == ["Resumen por Cuenta", "Detalle de Depósitos"]


def test_sales_dashboard_uses_total_meta() -> None:
    branches = [SimpleNamespace(id=1, name="Centro"), SimpleNamespace(id=2, name="Norte")]
    records = [
        fake_record(date(2024, 4, 1), 1, "Centro", total_sistema=1100, canjes=100),
    ]
    dashboard = reports.sales_dashboard(
        2024, 4, branches, records, {1: Decimal("3000"), 2: Decimal("1000")}, date(2024, 4, 10)
    )
    data = dashboard.as_dict()

    centro, norte = data["sucursales"]
    assert centro["total_ventas"] == Decimal("1000.00")
    assert centro["proyeccion"] == Decimal("3000.00")
    assert centro["nivel_proyectado"] == "verde"
    assert norte["total_ventas"] == Decimal("0.00")
    assert data["totales"]["total_meta"] == Decimal("4000.00")
    assert data["fecha_corte"] == date(2024, 4, 10)


def test_empty_reports_still_have_totals() -> None:
    report = reports.branch_summary_report([])
    assert report.rows == []
    assert report.totals["total_meta"] == Decimal("0.00")
