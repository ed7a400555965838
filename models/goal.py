from datetime import datetime, timezone
from models import db
from services.allocator import FundingTarget


class Goal(db.Model):
    """A goal funded from accumulated earnings, in catalog order."""

    __tablename__ = "goals"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    details = db.Column(db.Text, default="")
    amount = db.Column(db.Float, nullable=False)  # cost to fully fund
    priority = db.Column(
        db.String(20), nullable=False
    )  # 'critical', 'high', 'medium' or 'low'
    start_date = db.Column(db.Date)
    # Catalog order; same-priority goals are funded in this order
    position = db.Column(db.Integer, nullable=False, default=0, index=True)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "details": self.details,
            "amount": self.amount,
            "priority": self.priority,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "position": self.position,
        }

    def to_target(self) -> FundingTarget:
        return FundingTarget(
            name=self.name,
            cost=self.amount,
            priority=self.priority,
            details=self.details or "",
            start_date=self.start_date,
        )
