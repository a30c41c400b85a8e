from datetime import datetime

from . import db


class MonthlyGoal(db.Model):
    """Meta de venta mensual por sucursal. Una por (sucursal, año, mes)."""

    __tablename__ = "monthly_goals"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)

    amount = db.Column(db.Numeric(12, 2), nullable=False, default="0.00")

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    branch = db.relationship("Branch", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("branch_id", "year", "month", name="uq_monthly_goals_branch_period"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sucursal_id": self.branch_id,
            "anio": self.year,
            "mes": self.month,
            "meta": self.amount,
            "sucursal": {"id": self.branch.id, "nombre": self.branch.name} if self.branch else None,
        }

    def __repr__(self) -> str:
        return f"<MonthlyGoal branch={self.branch_id} {self.year}-{self.month:02d} amount={self.amount}>"
