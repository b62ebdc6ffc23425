from sqlalchemy.exc import IntegrityError, OperationalError

from party_picks import db
from party_picks.errors import translate_store_error


def commit_session():
    """Commit the current unit of work, translating datastore failures"""
    try:
        db.session.commit()
    except (IntegrityError, OperationalError) as e:
        db.session.rollback()
        raise translate_store_error(e) from e
    except Exception:
        db.session.rollback()
        raise
