import logging

from flask import jsonify, request
from flask_login import current_user, login_required

from party_picks.errors import ValidationFailed
from party_picks.routes.picks import bp
from party_picks.services import leaderboard, predictions
from party_picks.utils.timezone_utils import is_locked

logger = logging.getLogger(__name__)


@bp.route("/")
@login_required
def index():
    """The user's picks and score bar"""
    return jsonify(
        {
            "predictions": predictions.list_predictions(current_user.id),
            "summary": leaderboard.score_for_user(current_user.id),
            "is_locked": is_locked(),
        }
    )


@bp.route("/<category_id>", methods=["POST"])
@login_required
def select(category_id):
    """Tap an option: selects it, or clears it if it was already selected"""
    data = request.get_json(silent=True) or {}
    option_id = data.get("option")
    if not option_id or not isinstance(option_id, str):
        raise ValidationFailed("An option is required")

    prediction = predictions.select_option(current_user, category_id, option_id)
    return jsonify(
        {
            "category": category_id,
            "selection": prediction.selection if prediction else None,
            "predictions": predictions.list_predictions(current_user.id),
        }
    )


@bp.route("/<category_id>", methods=["DELETE"])
@login_required
def remove(category_id):
    deleted = predictions.delete_prediction(current_user, category_id)
    return jsonify({"category": category_id, "deleted": deleted})
