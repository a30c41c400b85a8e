"""Registros y cuentas en memoria para probar agregaciones sin base de datos."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace


def fake_record(
    fecha=date(2024, 3, 5),
    branch_id=1,
    branch_name="Centro",
    account=None,
    **amounts,
):
    """Registro en memoria para probar agregaciones sin base de datos."""
    values = {k: Decimal(str(amounts.get(k, "0"))) for k in
              ("monto_depositado", "venta_tarjeta", "total_sistema", "gastos", "canjes")}
    return SimpleNamespace(
        id=None,
        fecha=fecha,
        branch_id=branch_id,
        branch=SimpleNamespace(id=branch_id, name=branch_name),
        shift_type_id=1,
        shift_type=SimpleNamespace(id=1, name="Diurno AM", sort_order=1),
        account_id=account.id if account is not None else None,
        account=account,
        correlativo_inicial=None,
        correlativo_final=None,
        observaciones=None,
        **values,
    )


def fake_account(account_id=1, is_special=False, number="7100717710", name="Cuenta", bank="Banco"):
    return SimpleNamespace(
        id=account_id,
        number=number,
        name=name,
        bank=bank,
        is_special=is_special,
        label=f"{number} - {name}",
    )
