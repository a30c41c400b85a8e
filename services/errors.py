"""Errores de dominio del cuadre de turnos.

Todos heredan de ReconciliationError y llevan un mensaje listo para mostrar
al usuario. La app los convierte en respuestas JSON con su status_code.
"""


class ReconciliationError(Exception):
    """Base de los errores de dominio."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReconciliationError):
    """Datos de entrada incompletos o inválidos (no se toca la base)."""

    status_code = 400


class NotFoundError(ReconciliationError):
    """Búsqueda por id sin resultado."""

    status_code = 404


class ConflictError(ReconciliationError):
    """Registro duplicado.

    Se usa cuando ya existe un registro para (fecha, sucursal, turno), una meta
    para (sucursal, año, mes) fuera del upsert, o un nombre/número único repetido.
    """

    status_code = 409
