"""Helpers para leer parámetros de request y payloads JSON."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from services.calculations import CENT, MAX_AMOUNT
from services.errors import ValidationError


def clean_str(value) -> str:
    return (str(value) if value is not None else "").strip()


def optional_str(value) -> str | None:
    s = clean_str(value)
    return s or None


def parse_date(value, field: str, required: bool = False) -> date | None:
    """Acepta date o 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = clean_str(value)
    if not s:
        if required:
            raise ValidationError(f"El campo {field} es requerido.")
        return None
    try:
        return datetime.strptime(s[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Fecha inválida en {field}: use YYYY-MM-DD.") from None


def parse_int(value, field: str, required: bool = False) -> int | None:
    if isinstance(value, bool):
        raise ValidationError(f"Valor inválido en {field}.")
    if isinstance(value, int):
        return value
    s = clean_str(value)
    if not s:
        if required:
            raise ValidationError(f"El campo {field} es requerido.")
        return None
    try:
        return int(s)
    except ValueError:
        raise ValidationError(f"Valor inválido en {field}: se esperaba un número entero.") from None


def parse_money(value, field: str, allow_negative: bool = False) -> Decimal:
    """Monto con 2 decimales. Vacío -> 0.00. Texto inválido o negativo -> error."""
    if isinstance(value, bool):
        raise ValidationError(f"Monto inválido en {field}.")
    if value is None:
        return Decimal("0.00")
    raw = clean_str(value).replace(",", ".")
    if not raw:
        return Decimal("0.00")
    try:
        d = Decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Monto inválido en {field}.") from None
    if not d.is_finite():
        raise ValidationError(f"Monto inválido en {field}.")
    if d < 0 and not allow_negative:
        raise ValidationError(f"El campo {field} debe ser mayor o igual a 0.")
    if abs(d) > MAX_AMOUNT:
        raise ValidationError(f"Monto fuera de rango en {field}: máximo {MAX_AMOUNT}.")
    return d.quantize(CENT)


def parse_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    s = clean_str(value).lower()
    if not s:
        return default
    return s in ("1", "true", "si", "sí", "yes", "on")
