"""
Party registry: creating, joining and leaving parties.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, OperationalError

from party_picks import db
from party_picks.errors import (
    CodeGenerationExhausted,
    InvalidInviteCode,
    NotPartyMember,
    ValidationFailed,
    is_unique_violation,
    translate_store_error,
)
from party_picks.models import Party, PartyMember
from party_picks.utils.db_utils import commit_session

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5
MAX_PARTY_NAME_LENGTH = 50


def validate_party_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationFailed("Party name is required")
    if len(name) > MAX_PARTY_NAME_LENGTH:
        raise ValidationFailed(
            f"Party name cannot exceed {MAX_PARTY_NAME_LENGTH} characters"
        )
    return name


def create_party(name, creator_id):
    """
    Create a party and make its creator the first member.

    The party row and the creator's membership are committed together. A
    new invite code is drawn whenever the previous one collides, up to
    MAX_CODE_ATTEMPTS times.
    """
    name = validate_party_name(name)

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        party = Party(
            name=name, created_by=creator_id, invite_code=Party.generate_invite_code()
        )
        membership = PartyMember(party_id=party.id, user_id=creator_id)
        db.session.add_all([party, membership])

        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if is_unique_violation(e, "invite_code"):
                logger.warning(
                    f"Invite code collision on attempt {attempt}/{MAX_CODE_ATTEMPTS}"
                )
                continue
            raise translate_store_error(e) from e
        except OperationalError as e:
            db.session.rollback()
            raise translate_store_error(e) from e

        logger.info(f"Party created: {party.id} ({party.invite_code}) by {creator_id}")
        return party

    logger.error(f"Gave up generating an invite code after {MAX_CODE_ATTEMPTS} attempts")
    raise CodeGenerationExhausted()


def join_party(code, user_id):
    """Join the party with the given invite code; joining twice is a no-op"""
    normalized = Party.normalize_code(code)
    if not Party.is_well_formed_code(normalized):
        raise InvalidInviteCode()

    party = Party.query.filter_by(invite_code=normalized).first()
    if party is None:
        raise InvalidInviteCode()

    if party.is_user_member(user_id):
        return party

    db.session.add(PartyMember(party_id=party.id, user_id=user_id))
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        # Joined concurrently from another request
        if is_unique_violation(e):
            return party
        raise translate_store_error(e) from e
    except OperationalError as e:
        db.session.rollback()
        raise translate_store_error(e) from e

    logger.info(f"User {user_id} joined party {party.id}")
    return party


def leave_party(party_id, user_id):
    """Remove the user's membership; False if they were not a member"""
    membership = db.session.get(PartyMember, (party_id, user_id))
    if membership is None:
        return False

    db.session.delete(membership)
    commit_session()
    logger.info(f"User {user_id} left party {party_id}")
    return True


def list_my_parties(user_id):
    """Parties the user belongs to, each with its member count"""
    party_ids = [
        party_id
        for (party_id,) in db.session.query(PartyMember.party_id).filter(
            PartyMember.user_id == user_id
        )
    ]
    if not party_ids:
        return []

    counts = dict(
        db.session.query(PartyMember.party_id, func.count(PartyMember.user_id))
        .filter(PartyMember.party_id.in_(party_ids))
        .group_by(PartyMember.party_id)
        .all()
    )
    parties = (
        Party.query.filter(Party.id.in_(party_ids)).order_by(Party.created_at).all()
    )
    return [party.to_dict(member_count=counts.get(party.id, 0)) for party in parties]


def get_party(party_id, viewer_id):
    """The party, provided the viewer belongs to it"""
    party = db.session.get(Party, party_id)
    if party is None or not party.is_user_member(viewer_id):
        raise NotPartyMember()
    return party


def get_party_members(party_id, viewer_id):
    """Member ids of a party the viewer belongs to"""
    return get_party(party_id, viewer_id).get_member_ids()


def find_orphaned_parties():
    """Parties left with no members"""
    return Party.query.filter(~Party.members.any()).order_by(Party.created_at).all()
