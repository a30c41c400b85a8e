from flask import Blueprint, current_app, jsonify

from models import db
from routes.params import arg_int, date_range, json_body
from services import aggregation, records

records_bp = Blueprint("records", __name__, url_prefix="/api/registros")


@records_bp.get("")
def records_list():
    """Listado con filtros; más recientes primero."""
    date_from, date_to = date_range()
    items = records.list_shift_records(
        db.session,
        date_from=date_from,
        date_to=date_to,
        branch_id=arg_int("sucursal_id"),
        shift_type_id=arg_int("turno_id"),
        account_id=arg_int("cuenta_id"),
        descending=True,
    )
    return jsonify([r.to_dict() for r in items])


@records_bp.get("/<int:record_id>")
def records_get(record_id: int):
    return jsonify(records.get_shift_record(db.session, record_id).to_dict())


@records_bp.post("")
def records_create():
    r = records.create_shift_record(db.session, json_body())
    db.session.commit()
    current_app.logger.info("Registro creado: %s (%s, sucursal %s)", r.id, r.fecha, r.branch_id)
    return jsonify(r.to_dict()), 201


@records_bp.put("/<int:record_id>")
def records_update(record_id: int):
    r = records.update_shift_record(db.session, record_id, json_body())
    db.session.commit()
    current_app.logger.info("Registro actualizado: %s", r.id)
    return jsonify(r.to_dict())


@records_bp.delete("/<int:record_id>")
def records_delete(record_id: int):
    records.delete_shift_record(db.session, record_id)
    db.session.commit()
    current_app.logger.info("Registro eliminado: %s", record_id)
    return jsonify({"message": "Registro eliminado"})


@records_bp.get("/resumen/sucursal")
def records_branch_summary():
    date_from, date_to = date_range()
    items = records.list_shift_records(
        db.session, date_from=date_from, date_to=date_to, branch_id=arg_int("sucursal_id")
    )
    groups = aggregation.group_by_branch(items, order_by="id")

    rows = []
    for g in groups:
        row = {"sucursal_id": g.branch_id, "sucursal_nombre": g.branch_name, "dias_con_ventas": g.dias_con_ventas}
        row.update(g.amounts())
        rows.append(row)
    return jsonify(rows)
