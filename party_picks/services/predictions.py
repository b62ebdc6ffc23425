"""
Prediction service.

Each (user, category) pair is in one of two states: unset, or set to one of
the category's options. Selecting an option moves it to set; selecting the
option that is already set moves it back to unset. Every transition is
rejected once the global lockout instant has passed.
"""

import logging

from party_picks import db
from party_picks.catalog import get_category, validate_selection
from party_picks.errors import PredictionsLocked
from party_picks.models import Prediction
from party_picks.models.policies import acting_as
from party_picks.services.profiles import ensure_profile
from party_picks.utils.cache_utils import cached_query, invalidate_query
from party_picks.utils.db_utils import commit_session
from party_picks.utils.timezone_utils import get_utc_time, is_locked

logger = logging.getLogger(__name__)


@cached_query("prediction", timeout=300)
def load_prediction_map(user_id):
    """Map category id to selected option id for one user"""
    rows = db.session.query(Prediction.category, Prediction.selection).filter(
        Prediction.user_id == user_id
    )
    return {category: selection for category, selection in rows}


def list_predictions(user_id):
    return dict(load_prediction_map(user_id))


def ensure_open(now=None):
    """Raise PredictionsLocked once the lockout instant has passed"""
    if is_locked(now):
        raise PredictionsLocked()


def save_prediction(principal, category_id, option_id):
    """Insert or overwrite the principal's prediction for a category"""
    ensure_open()
    validate_selection(category_id, option_id)

    with acting_as(principal.id):
        prediction = db.session.get(Prediction, (principal.id, category_id))
        if prediction is None:
            prediction = Prediction(
                user_id=principal.id, category=category_id, selection=option_id
            )
            db.session.add(prediction)
        else:
            prediction.selection = option_id
            prediction.updated_at = get_utc_time()
        commit_session()

    invalidate_query(load_prediction_map, principal.id)
    logger.info(f"Prediction saved: {principal.id} {category_id}={option_id}")
    return prediction


def delete_prediction(principal, category_id):
    """Remove the principal's prediction for a category; False if there was none"""
    ensure_open()
    get_category(category_id)

    with acting_as(principal.id):
        prediction = db.session.get(Prediction, (principal.id, category_id))
        if prediction is None:
            return False
        db.session.delete(prediction)
        commit_session()

    invalidate_query(load_prediction_map, principal.id)
    logger.info(f"Prediction removed: {principal.id} {category_id}")
    return True


def select_option(principal, category_id, option_id):
    """
    Apply a tap on an option.

    The toggle is decided against the stored row, not the client's view.

    Returns:
        The saved Prediction, or None when the tap cleared the prediction
    """
    ensure_open()
    validate_selection(category_id, option_id)

    current = db.session.get(Prediction, (principal.id, category_id))
    if current is not None and current.selection == option_id:
        delete_prediction(principal, category_id)
        return None

    if current is None:
        # First pick in a category may be the user's first pick at all
        ensure_profile(principal)

    return save_prediction(principal, category_id, option_id)
