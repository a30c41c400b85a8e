from datetime import datetime

from . import db


class ShiftType(db.Model):
    __tablename__ = "shift_types"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(60), nullable=False, unique=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nombre": self.name,
            "orden": self.sort_order,
            "activo": bool(self.is_active),
        }

    def __repr__(self) -> str:
        return f"<ShiftType {self.id} {self.name} order={self.sort_order}>"
