"""
Results service.

Results are the announced winner of each category. Any signed-in user may
read them; only a verified administrator may announce or clear one.
"""

import logging

from sqlalchemy import select

from party_picks import db
from party_picks.catalog import get_category, validate_selection
from party_picks.errors import AdminRequired
from party_picks.models import Result
from party_picks.models.policies import acting_as
from party_picks.utils.cache_utils import cached_query, invalidate_query
from party_picks.utils.db_utils import commit_session
from party_picks.utils.records import ResultRecord
from party_picks.utils.timezone_utils import get_utc_time

logger = logging.getLogger(__name__)


class SystemAdmin:
    """Trusted administrator for management commands run on the server"""

    id = "system"
    is_admin = True

    def __repr__(self):
        return "<SystemAdmin>"


SYSTEM_ADMIN = SystemAdmin()


@cached_query("result", timeout=300)
def load_results_map():
    """Map category id to announced option id"""
    rows = db.session.query(Result.category, Result.selection)
    return {category: selection for category, selection in rows}


def get_results():
    return dict(load_results_map())


def list_results():
    """Announced results with timestamps, in category order"""
    return Result.query.order_by(Result.category).all()


def load_results_snapshot(connection):
    """
    Read every result on a plain connection.

    Used from change feed subscribers, which run after the session's
    transaction has closed.
    """
    table = Result.__table__
    rows = connection.execute(
        select(table.c.category, table.c.selection, table.c.announced_at)
    )
    return [ResultRecord.from_row(row._mapping) for row in rows]


def _require_admin(actor):
    if actor is None or not getattr(actor, "is_admin", False):
        raise AdminRequired()


def announce_result(actor, category_id, option_id):
    """Create or overwrite the result for a category"""
    _require_admin(actor)
    validate_selection(category_id, option_id)

    with acting_as(actor.id, is_admin=True):
        result = db.session.get(Result, category_id)
        if result is None:
            result = Result(
                category=category_id, selection=option_id, announced_at=get_utc_time()
            )
            db.session.add(result)
        else:
            result.selection = option_id
            result.announced_at = get_utc_time()
        commit_session()

    invalidate_query(load_results_map)
    logger.info(f"Result announced by {actor.id}: {category_id}={option_id}")
    return result


def clear_result(actor, category_id):
    """Remove the result for a category; False if none was announced"""
    _require_admin(actor)
    get_category(category_id)

    with acting_as(actor.id, is_admin=True):
        result = db.session.get(Result, category_id)
        if result is None:
            return False
        db.session.delete(result)
        commit_session()

    invalidate_query(load_results_map)
    logger.info(f"Result cleared by {actor.id}: {category_id}")
    return True
