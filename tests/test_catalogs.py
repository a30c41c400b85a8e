import pytest

from models.account import Account
from models.shift_type import ShiftType
from models.user import User
from services import catalogs
from services.bootstrap import DEFAULT_ACCOUNTS, bootstrap_reference_data
from services.errors import ConflictError, NotFoundError, ValidationError


def test_branch_create_with_district_and_days(session):
    district = catalogs.save_district(session, {"nombre": "Zona 1"})
    b = catalogs.save_branch(
        session,
        {"nombre": " Centro ", "direccion": "6a avenida", "distrito_id": district.id, "dias_atencion": ["sa", "LU", "MI"]},
    )
    session.commit()

    assert b.name == "Centro"
    assert b.attendance_days == "LU,MI,SA"
    data = b.to_dict()
    assert data["distrito"] == "Zona 1"
    assert data["dias_atencion"] == ["LU", "MI", "SA"]
    assert data["activo"] is True


def test_branch_defaults_to_monday_to_saturday(session):
    b = catalogs.save_branch(session, {"nombre": "Norte"})
    assert b.attendance_day_codes == ["LU", "MA", "MI", "JU", "VI", "SA"]


@pytest.mark.parametrize("days", ["LU,XX", [], ""])
def test_branch_rejects_bad_attendance_days(session, days):
    with pytest.raises(ValidationError):
        catalogs.save_branch(session, {"nombre": "Sur", "dias_atencion": days})


def test_branch_name_is_unique(session):
    catalogs.save_branch(session, {"nombre": "Centro"})
    session.commit()
    with pytest.raises(ConflictError):
        catalogs.save_branch(session, {"nombre": "Centro"})


def test_branch_partial_update_and_disable(session):
    b = catalogs.save_branch(session, {"nombre": "Centro", "direccion": "Calle 1"})
    session.commit()

    catalogs.save_branch(session, {"direccion": "Calle 2"}, branch_id=b.id)
    assert b.name == "Centro"
    assert b.address == "Calle 2"

    catalogs.disable_branch(session, b.id)
    session.commit()
    assert catalogs.list_branches(session, only_active=True) == []
    assert len(catalogs.list_branches(session)) == 1


def test_delete_district_unlinks_branches(session):
    d = catalogs.save_district(session, {"nombre": "Zona 2"})
    b = catalogs.save_branch(session, {"nombre": "Oeste", "distrito_id": d.id})
    session.commit()

    catalogs.delete_district(session, d.id)
    session.commit()
    assert b.district_id is None
    with pytest.raises(NotFoundError):
        catalogs.get_district(session, d.id)


def test_shift_types_sorted_by_order(session):
    catalogs.save_shift_type(session, {"nombre": "Nocturno", "orden": 3})
    catalogs.save_shift_type(session, {"nombre": "Diurno AM", "orden": 1})
    session.commit()
    assert [t.name for t in catalogs.list_shift_types(session)] == ["Diurno AM", "Nocturno"]


def test_account_requires_fields_and_unique_number(session):
    with pytest.raises(ValidationError, match="banco"):
        catalogs.save_account(session, {"numero": "123", "nombre": "Caja"})

    a = catalogs.save_account(session, {"numero": "123", "nombre": "Caja", "banco": "BI", "es_especial": "true"})
    session.commit()
    assert a.is_special is True

    with pytest.raises(ConflictError):
        catalogs.save_account(session, {"numero": "123", "nombre": "Otra", "banco": "BI"})


def test_users_lowercase_and_delete(session):
    u = catalogs.save_user(session, {"username": "Admin2", "nombre": "Segundo"})
    session.commit()
    assert u.username == "admin2"

    with pytest.raises(ConflictError):
        catalogs.save_user(session, {"username": "ADMIN2", "nombre": "Otro"})

    catalogs.delete_user(session, u.id)
    session.commit()
    assert catalogs.list_users(session) == []


def test_bootstrap_is_idempotent(session):
    first = bootstrap_reference_data(session)
    assert first == {"turnos": 3, "cuentas": len(DEFAULT_ACCOUNTS), "usuarios": 1}

    second = bootstrap_reference_data(session)
    assert second == {"turnos": 0, "cuentas": 0, "usuarios": 0}

    assert session.query(ShiftType).count() == 3
    assert session.query(Account).count() == 4
    assert session.query(User).count() == 1

    special = {a.number for a in session.query(Account).filter(Account.is_special.is_(True))}
    assert special == {"3285010891", "ALDO", "OFICINA"}
    names = [t.name for t in catalogs.list_shift_types(session)]
    assert names == ["Diurno AM", "Diurno PM", "Nocturno"]
