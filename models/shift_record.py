from datetime import datetime

from . import db
from services.calculations import faltante, has_shortage


class ShiftRecord(db.Model):
    """Cierre de un turno en una sucursal.

    Un registro por (fecha, sucursal, turno). Los totales derivados se
    recalculan en cada alta/edición (ver services.records); faltante no se
    guarda, se calcula donde se muestra.
    """

    __tablename__ = "shift_records"

    id = db.Column(db.Integer, primary_key=True)

    fecha = db.Column(db.Date, nullable=False, index=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)
    shift_type_id = db.Column(db.Integer, db.ForeignKey("shift_types.id"), nullable=False, index=True)

    # Correlativos de facturas (texto libre)
    correlativo_inicial = db.Column(db.Text, nullable=True)
    correlativo_final = db.Column(db.Text, nullable=True)

    # Cuenta a la que se depositó (opcional)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=True, index=True)

    monto_depositado = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    venta_tarjeta = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    total_sistema = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    gastos = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    # Informativo: nunca reduce el faltante ni lo facturado
    canjes = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")

    # Derivados (no editables)
    total_ventas = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    total_vendido = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    total_facturado = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    total_no_facturado = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")
    total_meta = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")

    observaciones = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    branch = db.relationship("Branch", lazy="joined")
    shift_type = db.relationship("ShiftType", lazy="joined")
    account = db.relationship("Account", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("fecha", "branch_id", "shift_type_id", name="uq_shift_records_day_branch_shift"),
        db.Index("ix_shift_records_fecha_branch", "fecha", "branch_id"),
    )

    @property
    def faltante(self):
        return faltante(self.total_sistema, self.monto_depositado, self.venta_tarjeta, self.gastos)

    @property
    def tiene_faltante(self) -> bool:
        return has_shortage(self.faltante)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fecha": self.fecha,
            "sucursal_id": self.branch_id,
            "turno_id": self.shift_type_id,
            "cuenta_id": self.account_id,
            "correlativo_inicial": self.correlativo_inicial,
            "correlativo_final": self.correlativo_final,
            "monto_depositado": self.monto_depositado,
            "venta_tarjeta": self.venta_tarjeta,
            "total_sistema": self.total_sistema,
            "gastos": self.gastos,
            "canjes": self.canjes,
            "total_ventas": self.total_ventas,
            "total_vendido": self.total_vendido,
            "total_facturado": self.total_facturado,
            "total_no_facturado": self.total_no_facturado,
            "total_meta": self.total_meta,
            "faltante": self.faltante,
            "tiene_faltante": self.tiene_faltante,
            "observaciones": self.observaciones,
            "sucursal": {"id": self.branch.id, "nombre": self.branch.name} if self.branch else None,
            "turno": {"id": self.shift_type.id, "nombre": self.shift_type.name} if self.shift_type else None,
            "cuenta": self.account.to_dict() if self.account else None,
        }

    def __repr__(self) -> str:
        return f"<ShiftRecord {self.id} {self.fecha} branch={self.branch_id} shift={self.shift_type_id}>"
