from decimal import Decimal

from services import calculations as calc


def test_reference_shift_values() -> None:
    """500 depositado, 300 tarjeta, 900 sistema, 50 gastos, 20 canjes."""
    d = calc.derive_totals(
        monto_depositado="500",
        venta_tarjeta="300",
        total_sistema="900",
        gastos="50",
        canjes="20",
    )
    assert d.total_ventas == Decimal("800.00")
    assert d.total_vendido == Decimal("830.00")
    assert d.total_facturado == Decimal("800.00")
    assert d.total_meta == Decimal("880.00")
    assert d.faltante == Decimal("50.00")
    assert d.tiene_faltante is False
    assert d.total_no_facturado == Decimal("0.00")


def test_faltante_ignores_canjes() -> None:
    base = calc.faltante("900", "500", "300", "50")
    for canjes in ("0", "20", "1000"):
        d = calc.derive_totals("500", "300", "900", "50", canjes)
        assert d.faltante == base


def test_negative_faltante_flags_shortage() -> None:
    d = calc.derive_totals(monto_depositado="400", venta_tarjeta="300", total_sistema="900", gastos="50")
    assert d.faltante == Decimal("-150.00")
    assert d.tiene_faltante is True
    assert calc.has_shortage(d.faltante)


def test_missing_inputs_count_as_zero() -> None:
    d = calc.derive_totals()
    assert d.as_dict() == {
        "total_ventas": Decimal("0.00"),
        "total_vendido": Decimal("0.00"),
        "total_facturado": Decimal("0.00"),
        "total_no_facturado": Decimal("0.00"),
        "total_meta": Decimal("0.00"),
        "faltante": Decimal("0.00"),
        "tiene_faltante": False,
    }


def test_special_account_deposit_is_not_invoiced() -> None:
    assert calc.no_facturado("250.5", True) == Decimal("250.50")
    assert calc.no_facturado("250.5", False) == Decimal("0.00")

    d = calc.derive_totals(monto_depositado="100", es_especial=True)
    assert d.total_no_facturado == Decimal("100.00")
    # Lo facturado no cambia por ser cuenta especial
    assert d.total_facturado == Decimal("100.00")


def test_to_money_coerces_bad_input() -> None:
    assert calc.to_money(None) == Decimal("0.00")
    assert calc.to_money("") == Decimal("0.00")
    assert calc.to_money("abc") == Decimal("0.00")
    assert calc.to_money("12,5") == Decimal("12.50")
    assert calc.to_money(3) == Decimal("3.00")


def test_persisted_excludes_faltante() -> None:
    d = calc.derive_totals("1", "2", "3", "0", "0")
    assert set(d.persisted()) == set(calc.DERIVED_FIELDS)
    assert "faltante" not in d.persisted()


def test_to_money_out_of_precision_is_zero() -> None:
    assert calc.to_money("1e30") == Decimal("0.00")
    assert calc.to_money(Decimal("-1e40")) == Decimal("0.00")
    d = calc.derive_totals(monto_depositado="1e30", total_sistema="100")
    assert d.faltante == Decimal("100.00")
