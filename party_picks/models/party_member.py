from datetime import datetime, timezone

from party_picks import db


class PartyMember(db.Model):
    __tablename__ = "party_members"

    # One row per (party, user) pair
    party_id = db.Column(
        db.String(36), db.ForeignKey("parties.id"), primary_key=True
    )
    user_id = db.Column(db.String(255), primary_key=True)

    joined_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (db.Index("idx_party_members_user", "user_id"),)

    def __repr__(self):
        return f"<PartyMember user_id={self.user_id} party_id={self.party_id}>"

    def to_dict(self):
        return {
            "party_id": self.party_id,
            "user_id": self.user_id,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
