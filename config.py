import os

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on", "si")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev_secret_key_change_me")

    # SQLite local por defecto; DATABASE_URL para Postgres/MySQL
    DB_PATH = os.environ.get("DB_PATH", os.path.join(basedir, "cuadre.db"))
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", f"sqlite:///{DB_PATH}")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logs rotativos (logs/app.log)
    LOG_DIR = os.environ.get("LOG_DIR", os.path.join(basedir, "logs"))
    LOG_TO_FILE = True

    # Turnos, cuentas y usuario admin al arrancar
    BOOTSTRAP_ON_START = _env_flag("BOOTSTRAP_ON_START", True)

    # Respetar el orden de las claves en las respuestas
    JSON_SORT_KEYS = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_TO_FILE = False
    BOOTSTRAP_ON_START = False
