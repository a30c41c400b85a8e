from flask import Blueprint, current_app, jsonify

from models import db
from routes.params import arg_int, json_body
from services import records

goals_bp = Blueprint("goals", __name__, url_prefix="/api/metas")


@goals_bp.get("")
def goals_list():
    goals = records.list_monthly_goals(
        db.session,
        year=arg_int("anio"),
        month=arg_int("mes"),
        branch_id=arg_int("sucursal_id"),
    )
    return jsonify([g.to_dict() for g in goals])


@goals_bp.get("/<int:branch_id>/<int:year>/<int:month>")
def goals_get(branch_id: int, year: int, month: int):
    return jsonify(records.get_monthly_goal(db.session, branch_id, year, month).to_dict())


@goals_bp.post("")
def goals_upsert():
    """Crea o reemplaza la meta del periodo: 201 si es nueva, 200 si ya existía."""
    data = json_body()
    goal, created = records.upsert_monthly_goal(
        db.session,
        data.get("sucursal_id"),
        data.get("anio"),
        data.get("mes"),
        data.get("meta"),
    )
    db.session.commit()
    current_app.logger.info(
        "Meta %s: sucursal %s %s-%02d", "creada" if created else "actualizada", goal.branch_id, goal.year, goal.month
    )
    return jsonify(goal.to_dict()), 201 if created else 200


@goals_bp.put("/<int:goal_id>")
def goals_update(goal_id: int):
    goal = records.update_monthly_goal(db.session, goal_id, json_body().get("meta"))
    db.session.commit()
    return jsonify(goal.to_dict())


@goals_bp.delete("/<int:goal_id>")
def goals_delete(goal_id: int):
    records.delete_monthly_goal(db.session, goal_id)
    db.session.commit()
    return jsonify({"message": "Meta eliminada"})
