"""Datos base del sistema (turnos, cuentas y usuario admin).

Idempotente: cada bloque solo inserta si su tabla está vacía, así que se
puede llamar en cada arranque.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from models.account import Account
from models.shift_type import ShiftType
from models.user import User

logger = logging.getLogger(__name__)

DEFAULT_SHIFT_TYPES = [
    {"name": "Diurno AM", "sort_order": 1},
    {"name": "Diurno PM", "sort_order": 2},
    {"name": "Nocturno", "sort_order": 3},
]

DEFAULT_ACCOUNTS = [
    {"number": "7100717710", "name": "Grupo de negocios Tel", "bank": "Interbanco", "is_special": False},
    {"number": "3285010891", "name": "SELVIN GIAN TELLO", "bank": "BANRURAL", "is_special": True},
    {"number": "ALDO", "name": "ALDO IVAN TELLO", "bank": "BANRURAL", "is_special": True},
    {"number": "OFICINA", "name": "Oficina", "bank": "Cuenta Especial", "is_special": True},
]

DEFAULT_ADMIN = {"username": "admin", "full_name": "Administrador"}


def bootstrap_reference_data(db: Session) -> dict[str, int]:
    """Siembra lo que falte y hace commit. Devuelve cuántas filas creó por tabla."""
    created = {"turnos": 0, "cuentas": 0, "usuarios": 0}

    # 1) Turnos
    if db.query(ShiftType.id).first() is None:
        for row in DEFAULT_SHIFT_TYPES:
            db.add(ShiftType(**row, is_active=True))
        created["turnos"] = len(DEFAULT_SHIFT_TYPES)

    # 2) Cuentas
    if db.query(Account.id).first() is None:
        for row in DEFAULT_ACCOUNTS:
            db.add(Account(**row, is_active=True))
        created["cuentas"] = len(DEFAULT_ACCOUNTS)

    # 3) Usuario admin
    if db.query(User.id).first() is None:
        db.add(User(**DEFAULT_ADMIN, is_active=True))
        created["usuarios"] = 1

    if any(created.values()):
        db.commit()
        logger.info("Datos base sembrados: %s", created)
    else:
        logger.debug("Datos base ya presentes, nada que sembrar")
    return created
