"""
Storage-boundary write policies.

Predictions and profiles may only be written by the user who owns them, and
results only by a verified administrator. Services record the acting
principal on the session for the duration of a unit of work; the flush guard
rejects any pending write that the principal is not allowed to make, whatever
route or script produced it.
"""

import itertools
from contextlib import contextmanager

from sqlalchemy import event
from sqlalchemy.orm import Session

from party_picks import db
from party_picks.errors import AdminRequired, OwnershipViolation

from .prediction import Prediction
from .profile import Profile
from .result import Result

ACTOR_KEY = "acting_user_id"
ADMIN_KEY = "acting_is_admin"


@contextmanager
def acting_as(user_id, is_admin=False):
    """Run a block of writes on behalf of a principal"""
    session = db.session()
    previous = (session.info.get(ACTOR_KEY), session.info.get(ADMIN_KEY, False))
    session.info[ACTOR_KEY] = user_id
    session.info[ADMIN_KEY] = bool(is_admin)
    try:
        yield session
    finally:
        session.info[ACTOR_KEY], session.info[ADMIN_KEY] = previous


@event.listens_for(Session, "before_flush")
def enforce_write_policies(session, flush_context, instances):
    actor = session.info.get(ACTOR_KEY)
    is_admin = session.info.get(ADMIN_KEY, False)

    for obj in itertools.chain(session.new, session.dirty, session.deleted):
        if isinstance(obj, (Prediction, Profile)):
            if actor is None or obj.user_id != actor:
                raise OwnershipViolation()
        elif isinstance(obj, Result):
            if not is_admin:
                raise AdminRequired()
