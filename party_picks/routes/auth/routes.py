import hmac
import logging
import secrets

from flask import current_app, jsonify, redirect, request, session
from flask_login import current_user, login_required

from party_picks import limiter
from party_picks.errors import AuthenticationRequired, ValidationFailed
from party_picks.forms import validate_or_raise
from party_picks.forms.profile import DisplayNameForm
from party_picks.identity import (
    OAUTH_STATE_SESSION_KEY,
    GoogleIdentityProvider,
    sign_in,
    sign_out,
)
from party_picks.routes.auth import bp
from party_picks.services import profiles

logger = logging.getLogger(__name__)


@bp.route("/login")
@limiter.limit("10 per minute")
def login():
    """Send the browser to Google's consent screen"""
    state = secrets.token_urlsafe(32)
    session[OAUTH_STATE_SESSION_KEY] = state
    provider = GoogleIdentityProvider.from_config(current_app.config)
    return redirect(provider.authorization_url(state))


@bp.route("/callback")
@limiter.limit("10 per minute")
def callback():
    expected_state = session.pop(OAUTH_STATE_SESSION_KEY, None)
    state = request.args.get("state", "")
    if not expected_state or not hmac.compare_digest(expected_state, state):
        logger.warning("OAuth callback with missing or mismatched state")
        raise ValidationFailed("Sign-in request expired, please try again")

    if request.args.get("error"):
        logger.info(f"OAuth sign-in cancelled: {request.args.get('error')}")
        raise AuthenticationRequired("Sign-in was cancelled")

    code = request.args.get("code")
    if not code:
        raise ValidationFailed("Missing authorization code")

    provider = GoogleIdentityProvider.from_config(current_app.config)
    principal = provider.authenticate(code)
    sign_in(principal)

    return redirect(current_app.config.get("APP_URL") or "/")


@bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        sign_out()
    return jsonify({"success": True})


@bp.route("/me")
@login_required
def me():
    data = current_user.to_dict()
    data["display_name"] = profiles.effective_display_name(current_user)
    return jsonify(data)


@bp.route("/profile", methods=["PUT"])
@login_required
@limiter.limit("30 per hour")
def update_profile():
    form = validate_or_raise(DisplayNameForm())
    profile = profiles.update_display_name(current_user, form.first_name.data)
    return jsonify(profile.to_dict())
