"""Lectura de query string y cuerpo JSON para las rutas de la API."""

from __future__ import annotations

from datetime import date

from flask import request

from services.errors import ValidationError
from services.parsing import parse_bool, parse_date, parse_int


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("El cuerpo debe ser un objeto JSON.")
    return data


def arg_date(name: str, required: bool = False) -> date | None:
    return parse_date(request.args.get(name), name, required=required)


def arg_int(name: str, required: bool = False) -> int | None:
    return parse_int(request.args.get(name), name, required=required)


def arg_bool(name: str, default: bool = False) -> bool:
    return parse_bool(request.args.get(name), default=default)


def date_range() -> tuple[date | None, date | None]:
    """fecha_inicio / fecha_fin (inclusivas). Rango invertido -> error."""
    date_from = arg_date("fecha_inicio")
    date_to = arg_date("fecha_fin")
    if date_from and date_to and date_from > date_to:
        raise ValidationError("fecha_inicio no puede ser mayor que fecha_fin.")
    return date_from, date_to
