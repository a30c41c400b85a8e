from datetime import datetime

from . import db


class Account(db.Model):
    """Cuenta bancaria destino de los depósitos de turno.

    Las cuentas especiales (is_special=True) reciben depósitos que NO se
    facturan; su monto alimenta total_no_facturado.
    """

    __tablename__ = "accounts"

    id = db.Column(db.Integer, primary_key=True)

    number = db.Column(db.String(60), nullable=False, unique=True)
    name = db.Column(db.String(120), nullable=False)
    bank = db.Column(db.String(120), nullable=False)

    is_special = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def label(self) -> str:
        return f"{self.number} - {self.name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "numero": self.number,
            "nombre": self.name,
            "banco": self.bank,
            "es_especial": bool(self.is_special),
            "activo": bool(self.is_active),
        }

    def __repr__(self) -> str:
        return f"<Account {self.id} {self.number} special={self.is_special}>"
