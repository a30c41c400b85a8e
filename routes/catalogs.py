from flask import Blueprint, current_app, jsonify

from models import db
from routes.params import arg_bool, json_body
from services import catalogs

catalogs_bp = Blueprint("catalogs", __name__, url_prefix="/api")


# =========================
# Turnos
# =========================
@catalogs_bp.get("/turnos")
def shift_types_list():
    items = catalogs.list_shift_types(db.session)
    if arg_bool("activos"):
        items = [t for t in items if t.is_active]
    return jsonify([t.to_dict() for t in items])


@catalogs_bp.get("/turnos/<int:shift_type_id>")
def shift_types_get(shift_type_id: int):
    return jsonify(catalogs.get_shift_type(db.session, shift_type_id).to_dict())


@catalogs_bp.post("/turnos")
def shift_types_create():
    t = catalogs.save_shift_type(db.session, json_body())
    db.session.commit()
    return jsonify(t.to_dict()), 201


@catalogs_bp.put("/turnos/<int:shift_type_id>")
def shift_types_update(shift_type_id: int):
    t = catalogs.save_shift_type(db.session, json_body(), shift_type_id=shift_type_id)
    db.session.commit()
    return jsonify(t.to_dict())


@catalogs_bp.delete("/turnos/<int:shift_type_id>")
def shift_types_delete(shift_type_id: int):
    catalogs.disable_shift_type(db.session, shift_type_id)
    db.session.commit()
    return jsonify({"message": "Turno desactivado"})


# =========================
# Cuentas
# =========================
@catalogs_bp.get("/cuentas")
def accounts_list():
    items = catalogs.list_accounts(db.session, only_active=arg_bool("activas"))
    return jsonify([a.to_dict() for a in items])


@catalogs_bp.get("/cuentas/<int:account_id>")
def accounts_get(account_id: int):
    return jsonify(catalogs.get_account(db.session, account_id).to_dict())


@catalogs_bp.post("/cuentas")
def accounts_create():
    a = catalogs.save_account(db.session, json_body())
    db.session.commit()
    current_app.logger.info("Cuenta creada: %s", a.number)
    return jsonify(a.to_dict()), 201


@catalogs_bp.put("/cuentas/<int:account_id>")
def accounts_update(account_id: int):
    a = catalogs.save_account(db.session, json_body(), account_id=account_id)
    db.session.commit()
    return jsonify(a.to_dict())


@catalogs_bp.delete("/cuentas/<int:account_id>")
def accounts_delete(account_id: int):
    catalogs.disable_account(db.session, account_id)
    db.session.commit()
    return jsonify({"message": "Cuenta desactivada"})


# =========================
# Usuarios
# =========================
@catalogs_bp.get("/usuarios")
def users_list():
    return jsonify([u.to_dict() for u in catalogs.list_users(db.session)])


@catalogs_bp.get("/usuarios/<int:user_id>")
def users_get(user_id: int):
    return jsonify(catalogs.get_user(db.session, user_id).to_dict())


@catalogs_bp.post("/usuarios")
def users_create():
    u = catalogs.save_user(db.session, json_body())
    db.session.commit()
    return jsonify(u.to_dict()), 201


@catalogs_bp.put("/usuarios/<int:user_id>")
def users_update(user_id: int):
    u = catalogs.save_user(db.session, json_body(), user_id=user_id)
    db.session.commit()
    return jsonify(u.to_dict())


@catalogs_bp.delete("/usuarios/<int:user_id>")
def users_delete(user_id: int):
    catalogs.delete_user(db.session, user_id)
    db.session.commit()
    current_app.logger.info("Usuario eliminado: %s", user_id)
    return jsonify({"message": "Usuario eliminado"})
