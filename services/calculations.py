"""Fórmulas de cuadre por turno.

Todas las funciones son puras y totales: reciben montos (Decimal, str, int,
float o None) y devuelven Decimal con 2 decimales. None o vacío cuenta como 0.

Se usan igual al guardar un registro (campos persistidos) y al armar los
reportes (valores recalculados desde los montos crudos).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Máximo de una columna Numeric(12, 2)
MAX_AMOUNT = Decimal("9999999999.99")

# Montos capturados al cerrar el turno
INPUT_FIELDS = ("monto_depositado", "venta_tarjeta", "total_sistema", "gastos", "canjes")

# Montos calculados y guardados en cada registro
DERIVED_FIELDS = ("total_ventas", "total_vendido", "total_facturado", "total_no_facturado", "total_meta")


def to_money(val) -> Decimal:
    """Convierte a Decimal(.., 2). Acepta coma o punto; si falla -> 0.00."""
    if val is None:
        return ZERO
    if isinstance(val, Decimal):
        d = val
    else:
        s = str(val).strip().replace(",", ".")
        if not s:
            return ZERO
        try:
            d = Decimal(s)
        except (InvalidOperation, ValueError):
            return ZERO
    if not d.is_finite():
        return ZERO
    try:
        return d.quantize(CENT)
    except InvalidOperation:
        return ZERO


def total_ventas(monto_depositado, venta_tarjeta) -> Decimal:
    return to_money(monto_depositado) + to_money(venta_tarjeta)


def total_vendido(total_sistema, gastos, canjes) -> Decimal:
    return to_money(total_sistema) - to_money(gastos) - to_money(canjes)


def total_facturado(monto_depositado, venta_tarjeta) -> Decimal:
    # Mismo valor que total_ventas; los reportes históricos usan ambos nombres.
    return total_ventas(monto_depositado, venta_tarjeta)


def total_meta(total_sistema, gastos, canjes) -> Decimal:
    """Venta comparable contra la meta mensual (= total_sistema - canjes)."""
    return total_vendido(total_sistema, gastos, canjes) + to_money(gastos)


def faltante(total_sistema, monto_depositado, venta_tarjeta, gastos) -> Decimal:
    """Diferencia entre lo que reporta el sistema y lo recibido.

    Los canjes no entran en la fórmula. Un valor negativo indica faltante.
    """
    recibido = to_money(monto_depositado) + to_money(venta_tarjeta) + to_money(gastos)
    return to_money(total_sistema) - recibido


def has_shortage(value) -> bool:
    return to_money(value) < 0


def no_facturado(monto_depositado, es_especial: bool) -> Decimal:
    """Depósito a cuenta especial = no facturado. Sin cuenta o cuenta normal = 0."""
    if not es_especial:
        return ZERO
    return to_money(monto_depositado)


@dataclass(frozen=True)
class DerivedTotals:
    total_ventas: Decimal
    total_vendido: Decimal
    total_facturado: Decimal
    total_no_facturado: Decimal
    total_meta: Decimal
    faltante: Decimal

    @property
    def tiene_faltante(self) -> bool:
        return self.faltante < 0

    def persisted(self) -> dict:
        """Campos que se guardan en el registro (faltante no se persiste)."""
        return {name: getattr(self, name) for name in DERIVED_FIELDS}

    def as_dict(self) -> dict:
        data = self.persisted()
        data["faltante"] = self.faltante
        data["tiene_faltante"] = self.tiene_faltante
        return data


def derive_totals(
    monto_depositado=None,
    venta_tarjeta=None,
    total_sistema=None,
    gastos=None,
    canjes=None,
    es_especial: bool = False,
) -> DerivedTotals:
    return DerivedTotals(
        total_ventas=total_ventas(monto_depositado, venta_tarjeta),
        total_vendido=total_vendido(total_sistema, gastos, canjes),
        total_facturado=total_facturado(monto_depositado, venta_tarjeta),
        total_no_facturado=no_facturado(monto_depositado, es_especial),
        total_meta=total_meta(total_sistema, gastos, canjes),
        faltante=faltante(total_sistema, monto_depositado, venta_tarjeta, gastos),
    )


def derive_for_record(record) -> DerivedTotals:
    """Recalcula los derivados de un registro de turno (o cualquier objeto con
    los mismos atributos). La cuenta se toma de `record.account`."""
    account = getattr(record, "account", None)
    return derive_totals(
        monto_depositado=getattr(record, "monto_depositado", None),
        venta_tarjeta=getattr(record, "venta_tarjeta", None),
        total_sistema=getattr(record, "total_sistema", None),
        gastos=getattr(record, "gastos", None),
        canjes=getattr(record, "canjes", None),
        es_especial=bool(account is not None and account.is_special),
    )
