import secrets
import uuid
from datetime import datetime, timezone

from party_picks import db

# No I/O/0/1, so codes survive being read aloud or copied by hand
INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 6


class Party(db.Model):
    __tablename__ = "parties"

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(50), nullable=False)

    # Code for joining the party
    invite_code = db.Column(
        db.String(INVITE_CODE_LENGTH), unique=True, nullable=False, index=True
    )

    # Creator and timestamps
    created_by = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    members = db.relationship(
        "PartyMember", backref="party", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (db.Index("idx_party_creator", "created_by"),)

    def __repr__(self):
        return f"<Party {self.name} ({self.invite_code})>"

    def __init__(self, **kwargs):
        super(Party, self).__init__(**kwargs)
        if not self.id:
            self.id = str(uuid.uuid4())
        if not self.invite_code:
            self.invite_code = self.generate_invite_code()

    @staticmethod
    def generate_invite_code():
        """Generate a candidate 6-character invite code (uniqueness is checked on insert)"""
        return "".join(
            secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH)
        )

    @staticmethod
    def normalize_code(code):
        return (code or "").strip().upper()

    @staticmethod
    def is_well_formed_code(code):
        return len(code) == INVITE_CODE_LENGTH and all(
            ch in INVITE_CODE_ALPHABET for ch in code
        )

    @staticmethod
    def find_by_code(code):
        return Party.query.filter_by(invite_code=Party.normalize_code(code)).first()

    def get_member_ids(self):
        """User ids of every member"""
        return [member.user_id for member in self.members.all()]

    def get_member_count(self):
        return self.members.count()

    def is_user_member(self, user_id):
        return self.members.filter_by(user_id=user_id).first() is not None

    def to_dict(self, member_count=None):
        """Convert party to dictionary for API responses"""
        data = {
            "id": self.id,
            "name": self.name,
            "invite_code": self.invite_code,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if member_count is not None:
            data["member_count"] = member_count

        return data
