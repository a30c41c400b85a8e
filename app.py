from datetime import date
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from flask_migrate import Migrate
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from services.errors import ReconciliationError


migrate = Migrate()


class ApiJSONProvider(DefaultJSONProvider):
    """Montos como número y fechas como YYYY-MM-DD."""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, date):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    app.json = ApiJSONProvider(app)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    # -------------------------
    # Extensiones
    # -------------------------
    db.init_app(app)
    migrate.init_app(app, db)

    # -------------------------
    # Importar modelos (Alembic)
    # -------------------------
    from models.district import District  # noqa: F401
    from models.branch import Branch  # noqa: F401
    from models.shift_type import ShiftType  # noqa: F401
    from models.account import Account  # noqa: F401
    from models.user import User  # noqa: F401
    from models.shift_record import ShiftRecord  # noqa: F401
    from models.monthly_goal import MonthlyGoal  # noqa: F401

    # -------------------------
    # Blueprints
    # -------------------------
    from routes.main import main_bp

    from routes.branches import branches_bp
    from routes.catalogs import catalogs_bp
    from routes.records import records_bp
    from routes.goals import goals_bp
    from routes.reports import reports_bp

    blueprints = [
        main_bp,

        # Catálogos
        branches_bp,
        catalogs_bp,

        # Operación
        records_bp,
        goals_bp,

        # Reportes
        reports_bp,
    ]

    for bp in blueprints:
        app.register_blueprint(bp)

    # -------------------------
    # Logging + manejo global de errores
    # -------------------------
    import os
    import logging
    from logging.handlers import RotatingFileHandler

    if app.config.get("LOG_TO_FILE", True):
        log_dir = app.config.get("LOG_DIR") or os.path.join(os.path.dirname(__file__), "logs")
        os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "app.log"),
            maxBytes=2_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))

        if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
            app.logger.addHandler(file_handler)
        # Servicios (services.*) al mismo archivo
        services_logger = logging.getLogger("services")
        if not any(isinstance(h, RotatingFileHandler) for h in services_logger.handlers):
            services_logger.addHandler(file_handler)
        services_logger.setLevel(logging.INFO)
    app.logger.setLevel(logging.INFO)

    @app.errorhandler(ReconciliationError)
    def _handle_domain_error(e):
        db.session.rollback()
        if e.status_code >= 500:
            app.logger.error("Error de dominio: %s %s: %s", request.method, request.path, e.message)
        else:
            app.logger.info("%s %s -> %s: %s", request.method, request.path, e.status_code, e.message)
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(404)
    def _handle_404(e):
        return jsonify({"error": "Recurso no encontrado."}), 404

    @app.errorhandler(405)
    def _handle_405(e):
        return jsonify({"error": "Método no permitido."}), 405

    @app.errorhandler(500)
    def _handle_500(e):
        db.session.rollback()
        app.logger.exception("Error 500 no manejado: %s %s", request.method, request.path)
        return jsonify({"error": "Ocurrió un error interno. El problema fue registrado."}), 500

    @app.errorhandler(HTTPException)
    def _handle_http(e):
        return jsonify({"error": e.description}), e.code

    # -------------------------
    # Datos base (turnos, cuentas, admin)
    # -------------------------
    if app.config.get("BOOTSTRAP_ON_START"):
        from services.bootstrap import bootstrap_reference_data

        with app.app_context():
            try:
                bootstrap_reference_data(db.session)
            except OperationalError as e:
                db.session.rollback()
                app.logger.warning("Sin datos base: base de datos no inicializada (flask db upgrade). %s", e)

    return app


if __name__ == "__main__":
    app = create_app()
    # Debug controlado por config / variables de entorno
    app.run(debug=app.config.get("DEBUG", False))
