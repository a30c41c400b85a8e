from datetime import date
from decimal import Decimal

from factories import fake_account, fake_record
from services import aggregation as agg


def _sample_records():
    normal = fake_account(1, is_special=False)
    special = fake_account(2, is_special=True, number="ALDO")
    return [
        fake_record(date(2024, 3, 2), 2, "Norte", normal, monto_depositado=100, venta_tarjeta=50, total_sistema=200, gastos=10, canjes=5),
        fake_record(date(2024, 3, 1), 1, "Centro", special, monto_depositado=300, venta_tarjeta=0, total_sistema=320, gastos=0, canjes=0),
        fake_record(date(2024, 3, 1), 1, "Centro", None, monto_depositado=80, venta_tarjeta=20, total_sistema=90, gastos=5, canjes=3),
        fake_record(date(2024, 3, 2), 1, "Centro", normal, monto_depositado=0, venta_tarjeta=40, total_sistema=40, gastos=0, canjes=0),
    ]


def test_group_by_branch_sums_components_first() -> None:
    groups = agg.group_by_branch(_sample_records())
    assert [g.branch_name for g in groups] == ["Centro", "Norte"]

    centro = groups[0]
    assert centro.total_depositado == Decimal("380.00")
    assert centro.total_sistema == Decimal("450.00")
    assert centro.total_gastos == Decimal("5.00")
    assert centro.total_canjes == Decimal("3.00")
    # total_vendido desde las sumas
    assert centro.total_vendido == centro.total_sistema - centro.total_gastos - centro.total_canjes
    assert centro.total_meta == Decimal("447.00")
    assert centro.dias_con_ventas == 2
    assert centro.registros == 3


def test_group_by_branch_order_by_id() -> None:
    records = [
        fake_record(branch_id=5, branch_name="Alfa"),
        fake_record(branch_id=3, branch_name="Zeta"),
    ]
    assert [g.branch_id for g in agg.group_by_branch(records, order_by="id")] == [3, 5]
    assert [g.branch_id for g in agg.group_by_branch(records)] == [5, 3]


def test_grand_total_matches_group_rows() -> None:
    groups = agg.group_by_branch(_sample_records())
    total = agg.grand_total(groups)
    for name in agg.SUMMED_FIELDS:
        assert getattr(total, name) == sum((getattr(g, name) for g in groups), Decimal("0.00"))
    assert total.total_meta == sum((g.total_meta for g in groups), Decimal("0.00"))
    assert total.registros == 4


def test_only_special_accounts_feed_no_facturado() -> None:
    """Depósitos: 200 a cuenta normal, 100 a cuenta especial, 50 sin cuenta."""
    normal = fake_account(1, is_special=False)
    special = fake_account(2, is_special=True)
    records = [
        fake_record(account=normal, monto_depositado=200),
        fake_record(account=special, monto_depositado=100),
        fake_record(account=None, monto_depositado=50),
    ]
    (group,) = agg.group_by_branch(records)
    assert group.total_no_facturado == Decimal("100.00")
    assert group.total_depositado == Decimal("350.00")


def test_group_by_day_and_branch_keys_and_order() -> None:
    groups = agg.group_by_day_and_branch(_sample_records())
    assert [g.key for g in groups] == [
        (date(2024, 3, 1), 1),
        (date(2024, 3, 2), 1),
        (date(2024, 3, 2), 2),
    ]
    first = groups[0]
    assert first.total_depositado == Decimal("380.00")
    # 410 - (380 + 20 + 5) = 5
    assert first.faltante == Decimal("5.00")
    assert first.tiene_faltante is False


def test_daily_group_shortage_from_sums() -> None:
    records = [
        fake_record(monto_depositado=100, total_sistema=150),
        fake_record(monto_depositado=60, total_sistema=0),
    ]
    (g,) = agg.group_by_day_and_branch(records)
    # 150 - 160 = -10
    assert g.faltante == Decimal("-10.00")
    assert g.tiene_faltante is True


def test_group_by_account_excludes_empty_deposits() -> None:
    normal = fake_account(1, is_special=False)
    special = fake_account(2, is_special=True, number="OFICINA")
    records = [
        fake_record(account=normal, monto_depositado=200),
        fake_record(account=special, monto_depositado=100),
        fake_record(account=special, monto_depositado=0),
        fake_record(account=None, monto_depositado=75),
    ]
    summary = agg.group_by_account(records)

    assert [g.account_id for g in summary.groups] == [1, 2]
    assert [g.cantidad_depositos for g in summary.groups] == [1, 1]
    assert len(summary.deposits) == 2
    assert summary.total_general == Decimal("300.00")
    assert summary.total_cuentas_normales == Decimal("200.00")
    assert summary.total_cuentas_especiales == Decimal("100.00")


def test_empty_input_gives_zero_totals() -> None:
    assert agg.group_by_branch([]) == []
    total = agg.grand_total([])
    assert total.total_meta == Decimal("0.00")
    assert total.faltante == Decimal("0.00")


def test_special_account_daily_group() -> None:
    """Mismo día y sucursal: 200 a cuenta normal, 100 a cuenta especial."""
    records = [
        fake_record(account=fake_account(1, is_special=False), monto_depositado=200),
        fake_record(account=fake_account(2, is_special=True), monto_depositado=100),
    ]
    (g,) = agg.group_by_day_and_branch(records)
    assert g.total_depositado == Decimal("300.00")
    assert g.total_no_facturado == Decimal("100.00")
