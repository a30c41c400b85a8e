from datetime import datetime

from . import db


class Weekday:
    """Códigos de día usados en los días de atención de una sucursal."""

    MONDAY = "LU"
    TUESDAY = "MA"
    WEDNESDAY = "MI"
    THURSDAY = "JU"
    FRIDAY = "VI"
    SATURDAY = "SA"
    SUNDAY = "DO"

    # Orden lunes..domingo (coincide con date.weekday())
    ORDERED = [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY]
    ALL = set(ORDERED)

    DEFAULT = ",".join(ORDERED[:6])  # Lunes a sábado


class Branch(db.Model):
    __tablename__ = "branches"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(120), nullable=False, unique=True)
    address = db.Column(db.String(255), nullable=True)

    district_id = db.Column(db.Integer, db.ForeignKey("districts.id"), nullable=True, index=True)

    # "LU,MA,MI,JU,VI,SA"
    attendance_days = db.Column(db.String(40), nullable=False, default=Weekday.DEFAULT)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    district = db.relationship("District", back_populates="branches", lazy="joined")

    @property
    def attendance_day_codes(self) -> list[str]:
        codes = [c.strip() for c in (self.attendance_days or "").split(",") if c.strip()]
        return [c for c in Weekday.ORDERED if c in codes]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nombre": self.name,
            "direccion": self.address,
            "distrito_id": self.district_id,
            "distrito": self.district.name if self.district else None,
            "dias_atencion": self.attendance_day_codes,
            "activo": bool(self.is_active),
        }

    def __repr__(self) -> str:
        return f"<Branch {self.id} {self.name} active={self.is_active}>"
