"""Acceso a registros de turno y metas mensuales.

Las funciones reciben la sesión SQLAlchemy y hacen flush, no commit: la
ruta que las llama confirma o revierte la transacción.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.account import Account
from models.branch import Branch
from models.monthly_goal import MonthlyGoal
from models.shift_record import ShiftRecord
from models.shift_type import ShiftType
from services.calculations import INPUT_FIELDS, derive_totals
from services.errors import ConflictError, NotFoundError, ValidationError
from services.parsing import optional_str, parse_date, parse_int, parse_money

logger = logging.getLogger(__name__)

DUPLICATE_RECORD_MSG = "Ya existe un registro para esta fecha, sucursal y turno."
DUPLICATE_GOAL_MSG = "Ya existe una meta para esta sucursal y periodo."

_TEXT_FIELDS = ("correlativo_inicial", "correlativo_final", "observaciones")


# =========================
# Registros de turno
# =========================
def list_shift_records(
    db: Session,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[int] = None,
    shift_type_id: Optional[int] = None,
    account_id: Optional[int] = None,
    account_not_null: bool = False,
    deposit_gt_zero: bool = False,
    descending: bool = False,
) -> list[ShiftRecord]:
    """Registros con sucursal, turno y cuenta ya cargados.

    El rango de fechas es inclusivo. Orden ascendente: fecha, sucursal, turno.
    Orden descendente (listados): fecha desc, luego sucursal y turno asc.
    """
    q = db.query(ShiftRecord).join(ShiftType, ShiftType.id == ShiftRecord.shift_type_id)

    if date_from is not None:
        q = q.filter(ShiftRecord.fecha >= date_from)
    if date_to is not None:
        q = q.filter(ShiftRecord.fecha <= date_to)
    if branch_id is not None:
        q = q.filter(ShiftRecord.branch_id == branch_id)
    if shift_type_id is not None:
        q = q.filter(ShiftRecord.shift_type_id == shift_type_id)
    if account_id is not None:
        q = q.filter(ShiftRecord.account_id == account_id)
    if account_not_null:
        q = q.filter(ShiftRecord.account_id.isnot(None))
    if deposit_gt_zero:
        q = q.filter(ShiftRecord.monto_depositado > 0)

    fecha_order = ShiftRecord.fecha.desc() if descending else ShiftRecord.fecha.asc()
    q = q.order_by(
        fecha_order,
        ShiftRecord.branch_id.asc(),
        ShiftType.sort_order.asc(),
        ShiftRecord.shift_type_id.asc(),
    )
    return q.all()


def get_shift_record(db: Session, record_id: int) -> ShiftRecord:
    r = db.get(ShiftRecord, record_id)
    if r is None:
        raise NotFoundError("Registro no encontrado.")
    return r


def _get_required(db: Session, model, obj_id: int, message: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise ValidationError(message)
    return obj


def _record_values(data: dict, current: Optional[ShiftRecord] = None) -> dict:
    """Mezcla el payload con los valores actuales (edición) y valida."""

    def pick(key: str, attr: str):
        if key in data:
            return data[key]
        return getattr(current, attr) if current is not None else None

    values = {
        "fecha": parse_date(pick("fecha", "fecha"), "fecha", required=True),
        "branch_id": parse_int(pick("sucursal_id", "branch_id"), "sucursal_id", required=True),
        "shift_type_id": parse_int(pick("turno_id", "shift_type_id"), "turno_id", required=True),
        "account_id": parse_int(pick("cuenta_id", "account_id"), "cuenta_id"),
    }
    for name in INPUT_FIELDS:
        values[name] = parse_money(pick(name, name), name)
    for name in _TEXT_FIELDS:
        values[name] = optional_str(pick(name, name))
    return values


def _find_duplicate(db: Session, fecha: date, branch_id: int, shift_type_id: int, exclude_id: Optional[int] = None):
    q = db.query(ShiftRecord.id).filter(
        ShiftRecord.fecha == fecha,
        ShiftRecord.branch_id == branch_id,
        ShiftRecord.shift_type_id == shift_type_id,
    )
    if exclude_id is not None:
        q = q.filter(ShiftRecord.id != exclude_id)
    return q.first()


def _apply(db: Session, record: ShiftRecord, values: dict) -> None:
    branch = _get_required(db, Branch, values["branch_id"], "Sucursal inválida.")
    shift_type = _get_required(db, ShiftType, values["shift_type_id"], "Turno inválido.")
    account = None
    if values["account_id"] is not None:
        account = _get_required(db, Account, values["account_id"], "Cuenta inválida.")

    if _find_duplicate(db, values["fecha"], values["branch_id"], values["shift_type_id"], exclude_id=record.id):
        raise ConflictError(DUPLICATE_RECORD_MSG)

    for name, value in values.items():
        setattr(record, name, value)
    # Relaciones al día para la respuesta (sin esperar a expirar la instancia)
    record.branch = branch
    record.shift_type = shift_type
    record.account = account

    derived = derive_totals(
        monto_depositado=values["monto_depositado"],
        venta_tarjeta=values["venta_tarjeta"],
        total_sistema=values["total_sistema"],
        gastos=values["gastos"],
        canjes=values["canjes"],
        es_especial=bool(account is not None and account.is_special),
    )
    for name, value in derived.persisted().items():
        setattr(record, name, value)


def _flush_or_conflict(db: Session, message: str) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message) from None


def create_shift_record(db: Session, data: dict) -> ShiftRecord:
    values = _record_values(data)
    record = ShiftRecord()
    _apply(db, record, values)
    db.add(record)
    _flush_or_conflict(db, DUPLICATE_RECORD_MSG)
    logger.info(
        "Registro %s creado: %s sucursal=%s turno=%s",
        record.id, record.fecha, record.branch_id, record.shift_type_id,
    )
    return record


def update_shift_record(db: Session, record_id: int, data: dict) -> ShiftRecord:
    record = get_shift_record(db, record_id)
    values = _record_values(data, current=record)
    _apply(db, record, values)
    _flush_or_conflict(db, DUPLICATE_RECORD_MSG)
    logger.info("Registro %s actualizado", record.id)
    return record


def delete_shift_record(db: Session, record_id: int) -> None:
    record = get_shift_record(db, record_id)
    db.delete(record)
    db.flush()
    logger.info("Registro %s eliminado", record_id)


# =========================
# Metas mensuales
# =========================
def _period(year, month) -> tuple[int, int]:
    y = parse_int(year, "anio", required=True)
    m = parse_int(month, "mes", required=True)
    if not 1 <= m <= 12:
        raise ValidationError("El mes debe estar entre 1 y 12.")
    if not 1900 <= y <= 9999:
        raise ValidationError("Año inválido.")
    return y, m


def list_monthly_goals(
    db: Session,
    *,
    year: Optional[int] = None,
    month: Optional[int] = None,
    branch_id: Optional[int] = None,
) -> list[MonthlyGoal]:
    q = db.query(MonthlyGoal)
    if year is not None:
        q = q.filter(MonthlyGoal.year == year)
    if month is not None:
        q = q.filter(MonthlyGoal.month == month)
    if branch_id is not None:
        q = q.filter(MonthlyGoal.branch_id == branch_id)
    return q.order_by(MonthlyGoal.year.desc(), MonthlyGoal.month.desc(), MonthlyGoal.branch_id.asc()).all()


def goals_by_branch(db: Session, year: int, month: int, branch_id: Optional[int] = None) -> dict[int, Decimal]:
    return {g.branch_id: g.amount for g in list_monthly_goals(db, year=year, month=month, branch_id=branch_id)}


def get_monthly_goal(db: Session, branch_id, year, month) -> MonthlyGoal:
    b_id = parse_int(branch_id, "sucursal_id", required=True)
    y, m = _period(year, month)
    goal = (
        db.query(MonthlyGoal)
        .filter(MonthlyGoal.branch_id == b_id, MonthlyGoal.year == y, MonthlyGoal.month == m)
        .one_or_none()
    )
    if goal is None:
        raise NotFoundError("Meta no encontrada.")
    return goal


def get_monthly_goal_by_id(db: Session, goal_id: int) -> MonthlyGoal:
    goal = db.get(MonthlyGoal, goal_id)
    if goal is None:
        raise NotFoundError("Meta no encontrada.")
    return goal


def _goal_values(db: Session, branch_id, year, month, amount) -> tuple[int, int, int, Decimal]:
    if amount is None:
        raise ValidationError("Faltan campos requeridos: sucursal_id, anio, mes y meta.")
    b_id = parse_int(branch_id, "sucursal_id", required=True)
    y, m = _period(year, month)
    if db.get(Branch, b_id) is None:
        raise ValidationError("Sucursal inválida.")
    return b_id, y, m, parse_money(amount, "meta")


def upsert_monthly_goal(db: Session, branch_id, year, month, amount) -> tuple[MonthlyGoal, bool]:
    """Crea o reemplaza la meta del periodo. Devuelve (meta, creada)."""
    b_id, y, m, value = _goal_values(db, branch_id, year, month, amount)

    goal = (
        db.query(MonthlyGoal)
        .filter(MonthlyGoal.branch_id == b_id, MonthlyGoal.year == y, MonthlyGoal.month == m)
        .one_or_none()
    )
    created = goal is None
    if created:
        goal = MonthlyGoal(branch_id=b_id, year=y, month=m, amount=value)
        db.add(goal)
    else:
        goal.amount = value

    _flush_or_conflict(db, DUPLICATE_GOAL_MSG)
    logger.info("Meta %s-%02d sucursal=%s = %s (%s)", y, m, b_id, value, "nueva" if created else "reemplazada")
    return goal, created


def create_monthly_goal(db: Session, branch_id, year, month, amount) -> MonthlyGoal:
    """Alta estricta: si ya existe la meta del periodo -> ConflictError."""
    b_id, y, m, value = _goal_values(db, branch_id, year, month, amount)
    exists = (
        db.query(MonthlyGoal.id)
        .filter(MonthlyGoal.branch_id == b_id, MonthlyGoal.year == y, MonthlyGoal.month == m)
        .first()
    )
    if exists:
        raise ConflictError(DUPLICATE_GOAL_MSG)

    goal = MonthlyGoal(branch_id=b_id, year=y, month=m, amount=value)
    db.add(goal)
    _flush_or_conflict(db, DUPLICATE_GOAL_MSG)
    return goal


def update_monthly_goal(db: Session, goal_id: int, amount) -> MonthlyGoal:
    goal = get_monthly_goal_by_id(db, goal_id)
    if amount is not None:
        goal.amount = parse_money(amount, "meta")
    db.flush()
    return goal


def delete_monthly_goal(db: Session, goal_id: int) -> None:
    goal = get_monthly_goal_by_id(db, goal_id)
    db.delete(goal)
    db.flush()
    logger.info("Meta %s eliminada", goal_id)
