"""Fixtures: app con SQLite en memoria, cliente HTTP y fábricas de datos."""

from datetime import date

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.account import Account
from models.branch import Branch
from models.shift_type import ShiftType
from services import records


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def make_branch(session):
    def _make(name="Sucursal Centro", **kwargs):
        b = Branch(name=name, is_active=kwargs.pop("is_active", True), **kwargs)
        session.add(b)
        session.commit()
        return b

    return _make


@pytest.fixture
def make_shift_type(session):
    def _make(name="Diurno AM", sort_order=1):
        t = ShiftType(name=name, sort_order=sort_order, is_active=True)
        session.add(t)
        session.commit()
        return t

    return _make


@pytest.fixture
def make_account(session):
    def _make(number="7100717710", name="Grupo de negocios Tel", bank="Interbanco", is_special=False):
        a = Account(number=number, name=name, bank=bank, is_special=is_special, is_active=True)
        session.add(a)
        session.commit()
        return a

    return _make


@pytest.fixture
def make_record(session):
    """Crea un registro por el mismo camino que la API (valida y calcula)."""

    def _make(branch, shift_type, fecha=date(2024, 3, 5), account=None, **amounts):
        data = {
            "fecha": fecha.isoformat(),
            "sucursal_id": branch.id,
            "turno_id": shift_type.id,
            "cuenta_id": account.id if account is not None else None,
        }
        data.update(amounts)
        r = records.create_shift_record(session, data)
        session.commit()
        return r

    return _make
