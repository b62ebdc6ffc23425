from datetime import datetime, timezone

from party_picks import db

DEFAULT_DISPLAY_NAME = "Player"


class Profile(db.Model):
    __tablename__ = "profiles"

    user_id = db.Column(db.String(255), primary_key=True)
    first_name = db.Column(db.String(50), nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Profile {self.user_id} {self.first_name}>"

    @staticmethod
    def display_names_for(user_ids):
        """Map user id to saved display name for the given users"""
        if not user_ids:
            return {}
        rows = Profile.query.filter(Profile.user_id.in_(list(user_ids))).all()
        return {row.user_id: row.first_name for row in rows}

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "first_name": self.first_name,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
