from flask import Blueprint, current_app, jsonify

from models import db
from routes.params import arg_bool, json_body
from services import catalogs

branches_bp = Blueprint("branches", __name__, url_prefix="/api")


# =========================
# Sucursales
# =========================
@branches_bp.get("/sucursales")
def branches_list():
    branches = catalogs.list_branches(db.session, only_active=arg_bool("activas"))
    return jsonify([b.to_dict() for b in branches])


@branches_bp.get("/sucursales/<int:branch_id>")
def branches_get(branch_id: int):
    return jsonify(catalogs.get_branch(db.session, branch_id).to_dict())


@branches_bp.post("/sucursales")
def branches_create():
    b = catalogs.save_branch(db.session, json_body())
    db.session.commit()
    current_app.logger.info("Sucursal creada: %s (%s)", b.id, b.name)
    return jsonify(b.to_dict()), 201


@branches_bp.put("/sucursales/<int:branch_id>")
def branches_update(branch_id: int):
    b = catalogs.save_branch(db.session, json_body(), branch_id=branch_id)
    db.session.commit()
    return jsonify(b.to_dict())


@branches_bp.delete("/sucursales/<int:branch_id>")
def branches_delete(branch_id: int):
    """No borra: desactiva (los registros la siguen referenciando)."""
    catalogs.disable_branch(db.session, branch_id)
    db.session.commit()
    current_app.logger.info("Sucursal desactivada: %s", branch_id)
    return jsonify({"message": "Sucursal desactivada"})


# =========================
# Distritos
# =========================
@branches_bp.get("/distritos")
def districts_list():
    return jsonify([d.to_dict() for d in catalogs.list_districts(db.session)])


@branches_bp.get("/distritos/<int:district_id>")
def districts_get(district_id: int):
    return jsonify(catalogs.get_district(db.session, district_id).to_dict())


@branches_bp.post("/distritos")
def districts_create():
    d = catalogs.save_district(db.session, json_body())
    db.session.commit()
    return jsonify(d.to_dict()), 201


@branches_bp.put("/distritos/<int:district_id>")
def districts_update(district_id: int):
    d = catalogs.save_district(db.session, json_body(), district_id=district_id)
    db.session.commit()
    return jsonify(d.to_dict())


@branches_bp.delete("/distritos/<int:district_id>")
def districts_delete(district_id: int):
    catalogs.delete_district(db.session, district_id)
    db.session.commit()
    current_app.logger.info("Distrito eliminado: %s", district_id)
    return jsonify({"message": "Distrito eliminado"})
