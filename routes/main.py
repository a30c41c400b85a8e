from datetime import datetime

from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from models import db
from routes import main_bp


@main_bp.get("/health")
def health():
    """Estado del servicio y de la base de datos."""
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except OperationalError:
        db.session.rollback()
        current_app.logger.exception("Health check: base de datos no disponible")
        database = "error"

    status = 200 if database == "ok" else 503
    return jsonify({
        "status": "ok" if status == 200 else "degraded",
        "database": database,
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }), status
