from datetime import datetime

from . import db


class District(db.Model):
    __tablename__ = "districts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    branches = db.relationship("Branch", back_populates="district")

    def to_dict(self) -> dict:
        return {"id": self.id, "nombre": self.name}

    def __repr__(self) -> str:
        return f"<District {self.id} {self.name}>"
