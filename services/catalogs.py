"""Catálogos: distritos, sucursales, turnos, cuentas y usuarios.

Sucursales, turnos y cuentas no se borran: "eliminar" las desactiva
(is_active=False) porque los registros de turno las siguen referenciando.
Distritos y usuarios sí se eliminan.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.account import Account
from models.branch import Branch, Weekday
from models.district import District
from models.shift_type import ShiftType
from models.user import User
from services.errors import ConflictError, NotFoundError, ValidationError
from services.parsing import clean_str, optional_str, parse_bool, parse_int

logger = logging.getLogger(__name__)


def _get_or_404(db: Session, model, obj_id: int, message: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(message)
    return obj


def _required_str(data: dict, key: str, label: str) -> str:
    value = clean_str(data.get(key))
    if not value:
        raise ValidationError(f"El {label} es requerido.")
    return value


def _ensure_unique(db: Session, model, column, value, exclude_id, message: str) -> None:
    q = db.query(model.id).filter(column == value)
    if exclude_id is not None:
        q = q.filter(model.id != exclude_id)
    if q.first():
        raise ConflictError(message)


def _flush(db: Session, message: str) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message) from None


# =========================
# Distritos
# =========================
def list_districts(db: Session) -> list[District]:
    return db.query(District).order_by(District.name.asc()).all()


def get_district(db: Session, district_id: int) -> District:
    return _get_or_404(db, District, district_id, "Distrito no encontrado.")


def save_district(db: Session, data: dict, district_id: int | None = None) -> District:
    d = get_district(db, district_id) if district_id is not None else District()
    if district_id is None or "nombre" in data:
        name = _required_str(data, "nombre", "nombre")
        _ensure_unique(db, District, District.name, name, district_id, "Ya existe un distrito con ese nombre.")
        d.name = name
    if district_id is None:
        db.add(d)
    _flush(db, "Ya existe un distrito con ese nombre.")
    return d


def delete_district(db: Session, district_id: int) -> None:
    d = get_district(db, district_id)
    for b in list(d.branches):
        b.district_id = None
    db.delete(d)
    db.flush()


# =========================
# Sucursales
# =========================
def parse_attendance_days(value) -> str:
    """Lista o texto separado por comas -> 'LU,MA,...' en orden de semana."""
    if value is None:
        return Weekday.DEFAULT
    if isinstance(value, str):
        codes = [c.strip().upper() for c in value.split(",") if c.strip()]
    else:
        codes = [clean_str(c).upper() for c in value if clean_str(c)]

    invalid = [c for c in codes if c not in Weekday.ALL]
    if invalid:
        raise ValidationError(f"Días de atención inválidos: {', '.join(invalid)}.")
    if not codes:
        raise ValidationError("La sucursal debe atender al menos un día.")
    return ",".join(c for c in Weekday.ORDERED if c in codes)


def list_branches(db: Session, only_active: bool = False) -> list[Branch]:
    q = db.query(Branch)
    if only_active:
        q = q.filter(Branch.is_active.is_(True))
    return q.order_by(Branch.name.asc()).all()


def get_branch(db: Session, branch_id: int) -> Branch:
    return _get_or_404(db, Branch, branch_id, "Sucursal no encontrada.")


def save_branch(db: Session, data: dict, branch_id: int | None = None) -> Branch:
    creating = branch_id is None
    b = Branch() if creating else get_branch(db, branch_id)

    if creating or "nombre" in data:
        name = _required_str(data, "nombre", "nombre")
        _ensure_unique(db, Branch, Branch.name, name, branch_id, "Ya existe una sucursal con ese nombre.")
        b.name = name
    if creating or "direccion" in data:
        b.address = optional_str(data.get("direccion"))
    if creating or "distrito_id" in data:
        district_id = parse_int(data.get("distrito_id"), "distrito_id")
        if district_id is not None and db.get(District, district_id) is None:
            raise ValidationError("Distrito inválido.")
        b.district_id = district_id
    if creating or "dias_atencion" in data:
        b.attendance_days = parse_attendance_days(data.get("dias_atencion"))
    if creating or "activo" in data:
        b.is_active = parse_bool(data.get("activo"), default=True)

    if creating:
        db.add(b)
    _flush(db, "Ya existe una sucursal con ese nombre.")
    logger.info("Sucursal %s guardada (%s)", b.id, b.name)
    return b


def disable_branch(db: Session, branch_id: int) -> Branch:
    b = get_branch(db, branch_id)
    b.is_active = False
    db.flush()
    logger.info("Sucursal %s desactivada", b.id)
    return b


# =========================
# Turnos
# =========================
def list_shift_types(db: Session) -> list[ShiftType]:
    return db.query(ShiftType).order_by(ShiftType.sort_order.asc(), ShiftType.id.asc()).all()


def get_shift_type(db: Session, shift_type_id: int) -> ShiftType:
    return _get_or_404(db, ShiftType, shift_type_id, "Turno no encontrado.")


def save_shift_type(db: Session, data: dict, shift_type_id: int | None = None) -> ShiftType:
    creating = shift_type_id is None
    t = ShiftType() if creating else get_shift_type(db, shift_type_id)

    if creating or "nombre" in data:
        name = _required_str(data, "nombre", "nombre")
        _ensure_unique(db, ShiftType, ShiftType.name, name, shift_type_id, "Ya existe un turno con ese nombre.")
        t.name = name
    if creating or "orden" in data:
        t.sort_order = parse_int(data.get("orden"), "orden") or 0
    if creating or "activo" in data:
        t.is_active = parse_bool(data.get("activo"), default=True)

    if creating:
        db.add(t)
    _flush(db, "Ya existe un turno con ese nombre.")
    return t


def disable_shift_type(db: Session, shift_type_id: int) -> ShiftType:
    t = get_shift_type(db, shift_type_id)
    t.is_active = False
    db.flush()
    return t


# =========================
# Cuentas
# =========================
def list_accounts(db: Session, only_active: bool = False) -> list[Account]:
    q = db.query(Account)
    if only_active:
        q = q.filter(Account.is_active.is_(True))
    return q.order_by(Account.name.asc()).all()


def get_account(db: Session, account_id: int) -> Account:
    return _get_or_404(db, Account, account_id, "Cuenta no encontrada.")


def save_account(db: Session, data: dict, account_id: int | None = None) -> Account:
    creating = account_id is None
    a = Account() if creating else get_account(db, account_id)

    if creating or "numero" in data:
        number = _required_str(data, "numero", "número de cuenta")
        _ensure_unique(db, Account, Account.number, number, account_id, "Ya existe una cuenta con ese número.")
        a.number = number
    if creating or "nombre" in data:
        a.name = _required_str(data, "nombre", "nombre")
    if creating or "banco" in data:
        a.bank = _required_str(data, "banco", "banco")
    if creating or "es_especial" in data:
        a.is_special = parse_bool(data.get("es_especial"), default=False)
    if creating or "activo" in data:
        a.is_active = parse_bool(data.get("activo"), default=True)

    if creating:
        db.add(a)
    _flush(db, "Ya existe una cuenta con ese número.")
    logger.info("Cuenta %s guardada (especial=%s)", a.number, a.is_special)
    return a


def disable_account(db: Session, account_id: int) -> Account:
    a = get_account(db, account_id)
    a.is_active = False
    db.flush()
    return a


# =========================
# Usuarios
# =========================
def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.full_name.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    return _get_or_404(db, User, user_id, "Usuario no encontrado.")


def save_user(db: Session, data: dict, user_id: int | None = None) -> User:
    creating = user_id is None
    u = User() if creating else get_user(db, user_id)

    if creating or "username" in data:
        username = _required_str(data, "username", "usuario").lower()
        _ensure_unique(db, User, User.username, username, user_id, "El nombre de usuario ya está en uso.")
        u.username = username
    if creating or "nombre" in data:
        u.full_name = _required_str(data, "nombre", "nombre")
    if creating or "activo" in data:
        u.is_active = parse_bool(data.get("activo"), default=True)

    if creating:
        db.add(u)
    _flush(db, "El nombre de usuario ya está en uso.")
    return u


def delete_user(db: Session, user_id: int) -> None:
    u = get_user(db, user_id)
    db.delete(u)
    db.flush()
