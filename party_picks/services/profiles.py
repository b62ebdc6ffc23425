"""
Display name profiles.

A profile is created the first time a user signs in or makes a pick, from
the name the identity provider reports. Once the user edits it, the edited
name wins. Lookups here are on non-critical paths: failures are logged and
callers fall back to a placeholder name.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from party_picks import db
from party_picks.errors import PartyPicksError, ValidationFailed
from party_picks.models import Profile
from party_picks.models.policies import acting_as
from party_picks.utils.db_utils import commit_session

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 50


def get_display_name(user_id):
    """Saved display name, or None when missing or unreadable"""
    try:
        profile = db.session.get(Profile, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load profile for {user_id}: {e}")
        db.session.rollback()
        return None
    return profile.first_name if profile else None


def display_names_for(user_ids):
    """Saved display names for many users; empty on failure"""
    try:
        return Profile.display_names_for(user_ids)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load profiles: {e}")
        db.session.rollback()
        return {}


def effective_display_name(principal):
    return get_display_name(principal.id) or principal.derived_first_name


def ensure_profile(principal):
    """
    Create the principal's profile from provider metadata if none exists.

    Best-effort: returns the display name, or None if the write failed.
    """
    try:
        profile = db.session.get(Profile, principal.id)
        if profile is not None:
            return profile.first_name

        with acting_as(principal.id):
            profile = Profile(
                user_id=principal.id, first_name=principal.derived_first_name
            )
            db.session.add(profile)
            commit_session()

        logger.info(f"Created profile for {principal.id}")
        return profile.first_name
    except (SQLAlchemyError, PartyPicksError) as e:
        db.session.rollback()
        logger.warning(f"Failed to save profile for {principal.id}: {e}")
        return None


def update_display_name(principal, new_name):
    """Overwrite the principal's display name"""
    name = (new_name or "").strip()
    if not name:
        raise ValidationFailed("Display name is required")
    if len(name) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationFailed(
            f"Display name cannot exceed {MAX_DISPLAY_NAME_LENGTH} characters"
        )

    with acting_as(principal.id):
        profile = db.session.get(Profile, principal.id)
        if profile is None:
            profile = Profile(user_id=principal.id, first_name=name)
            db.session.add(profile)
        else:
            profile.first_name = name
            profile.updated_at = datetime.now(timezone.utc)
        commit_session()

    logger.info(f"Display name updated for {principal.id}")
    return profile
