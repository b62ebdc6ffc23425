import hmac
import logging
from functools import wraps

from flask import current_app, jsonify, request, session
from flask_login import current_user, login_required

from party_picks import limiter
from party_picks.errors import AdminRequired, ValidationFailed
from party_picks.forms import validate_or_raise
from party_picks.forms.profile import AdminLoginForm
from party_picks.identity import ADMIN_UNLOCKED_SESSION_KEY
from party_picks.routes.results import bp
from party_picks.services import leaderboard, results

logger = logging.getLogger(__name__)


def admin_unlocked_required(f):
    """Require the admin password gate to have been passed in this session"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get(ADMIN_UNLOCKED_SESSION_KEY):
            raise AdminRequired("Enter the admin password first")
        return f(*args, **kwargs)

    return decorated_function


@bp.route("/")
@login_required
def index():
    return jsonify({"results": results.get_results()})


@bp.route("/admin/login", methods=["POST"])
@login_required
@limiter.limit("5 per minute")
def admin_login():
    form = validate_or_raise(AdminLoginForm())
    expected = current_app.config.get("ADMIN_PASSWORD") or ""

    if not expected or not hmac.compare_digest(
        form.password.data.encode(), expected.encode()
    ):
        logger.warning(f"Failed admin password attempt by {current_user.id}")
        raise AdminRequired("Incorrect admin password")

    session[ADMIN_UNLOCKED_SESSION_KEY] = True
    logger.info(f"Admin gate unlocked by {current_user.id}")
    return jsonify({"success": True, "is_admin": current_user.is_admin})


@bp.route("/<category_id>", methods=["PUT"])
@login_required
@admin_unlocked_required
def announce(category_id):
    data = request.get_json(silent=True) or {}
    option_id = data.get("option")
    if not option_id or not isinstance(option_id, str):
        raise ValidationFailed("An option is required")

    result = results.announce_result(current_user, category_id, option_id)
    return jsonify(result.to_dict())


@bp.route("/<category_id>", methods=["DELETE"])
@login_required
@admin_unlocked_required
def clear(category_id):
    cleared = results.clear_result(current_user, category_id)
    return jsonify({"category": category_id, "cleared": cleared})


@bp.route("/admin/overview")
@login_required
@admin_unlocked_required
def admin_overview():
    if not current_user.is_admin:
        raise AdminRequired()
    return jsonify(leaderboard.admin_overview())
