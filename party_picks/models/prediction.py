from datetime import datetime, timezone

from party_picks import db


class Prediction(db.Model):
    __tablename__ = "predictions"

    # At most one prediction per (user, category)
    user_id = db.Column(db.String(255), primary_key=True)
    category = db.Column(db.String(50), primary_key=True)

    selection = db.Column(db.String(50), nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (db.Index("idx_prediction_category", "category"),)

    def __repr__(self):
        return f"<Prediction user_id={self.user_id} {self.category}={self.selection}>"

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "category": self.category,
            "selection": self.selection,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
