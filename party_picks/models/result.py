from datetime import datetime, timezone

from party_picks import db


class Result(db.Model):
    __tablename__ = "results"

    # At most one announced result per category
    category = db.Column(db.String(50), primary_key=True)
    selection = db.Column(db.String(50), nullable=False)
    announced_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def __repr__(self):
        return f"<Result {self.category}={self.selection}>"

    def to_dict(self):
        return {
            "category": self.category,
            "selection": self.selection,
            "announced_at": self.announced_at.isoformat() if self.announced_at else None,
        }
