import logging

from flask import current_app, jsonify
from flask_login import current_user, login_required
from flask_wtf.csrf import generate_csrf

from party_picks import limiter
from party_picks.catalog import CATEGORIES, grouped_categories
from party_picks.routes.main import bp
from party_picks.services import leaderboard
from party_picks.utils.timezone_utils import (
    format_countdown,
    format_lockout_time,
    get_lockout_time,
    get_utc_time,
    is_locked,
    seconds_until_lockout,
)

logger = logging.getLogger(__name__)


@bp.route("/health")
@limiter.exempt
def health():
    """Health check endpoint - exempt from rate limiting for monitoring systems"""
    return jsonify({"status": "healthy", "timestamp": get_utc_time().isoformat()})


@bp.route("/api/event")
def event_info():
    """Event name, lockout instant and time left to make picks"""
    seconds_left = seconds_until_lockout()
    return jsonify(
        {
            "name": current_app.config["EVENT_NAME"],
            "lockout_time": get_lockout_time().isoformat(),
            "lockout_display": format_lockout_time(),
            "is_locked": is_locked(),
            "seconds_until_lockout": seconds_left,
            "countdown": format_countdown(seconds_left),
            "category_count": len(CATEGORIES),
        }
    )


@bp.route("/api/categories")
def categories():
    return jsonify({"groups": grouped_categories()})


@bp.route("/api/csrf-token")
def csrf_token():
    return jsonify({"csrf_token": generate_csrf()})


@bp.route("/leaderboard")
@login_required
def global_leaderboard():
    """Every player with at least one pick"""
    return jsonify(leaderboard.global_leaderboard(viewer_id=current_user.id))
