"""
Identity adapter.

Sign-in is delegated to Google. The provider's profile becomes a Principal
that Flask-Login keeps in the session; the only thing persisted about a
user is the display name Profile.
"""

import logging
import re
from urllib.parse import urlencode

import requests
from flask import current_app, session
from flask_login import (
    UserMixin,
    login_user,
    logout_user,
    user_logged_in,
    user_logged_out,
)

from party_picks import login_manager
from party_picks.errors import TransientNetwork, ValidationFailed
from party_picks.models.profile import DEFAULT_DISPLAY_NAME

logger = logging.getLogger(__name__)

PRINCIPAL_SESSION_KEY = "principal"
OAUTH_STATE_SESSION_KEY = "oauth_state"
ADMIN_UNLOCKED_SESSION_KEY = "admin_unlocked"

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


def extract_first_name(full_name=None, email=None):
    """
    Derive a display name from OAuth metadata.

    Prefers the first word of the full name; otherwise uses the email local
    part with digits removed, cut at the first '.', '_' or '-', capitalized.
    """
    if full_name and full_name.strip():
        return full_name.strip().split()[0]

    if email:
        local_part = email.split("@")[0]
        name = re.split(r"[._-]", re.sub(r"[0-9]", "", local_part))[0]
        if name:
            return name[0].upper() + name[1:].lower()

    return DEFAULT_DISPLAY_NAME


# tokeninfo reports email_verified as the string "true"
def _is_true(value):
    return value is True or (isinstance(value, str) and value.lower() == "true")


class Principal(UserMixin):
    """The authenticated user as reported by the identity provider"""

    def __init__(self, user_id, email=None, full_name=None, email_verified=False):
        self.id = user_id
        self.email = (email or "").strip().lower() or None
        self.full_name = full_name
        self.email_verified = bool(email_verified)

    def __repr__(self):
        return f"<Principal {self.id}>"

    @property
    def is_admin(self):
        """Verified administrator role, keyed on the provider-verified email"""
        admin_emails = current_app.config.get("ADMIN_EMAILS") or set()
        return self.email_verified and bool(self.email) and self.email in admin_emails

    @property
    def derived_first_name(self):
        return extract_first_name(self.full_name, self.email)

    @classmethod
    def from_google_profile(cls, profile):
        user_id = profile.get("sub")
        if not user_id:
            raise ValidationFailed("Identity provider profile has no subject")
        return cls(
            user_id=f"google:{user_id}",
            email=profile.get("email"),
            full_name=profile.get("name") or profile.get("given_name"),
            email_verified=_is_true(profile.get("email_verified")),
        )

    @classmethod
    def from_session(cls, data):
        return cls(
            user_id=data["id"],
            email=data.get("email"),
            full_name=data.get("full_name"),
            email_verified=data.get("email_verified", False),
        )

    def to_session(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "email_verified": self.email_verified,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "is_admin": self.is_admin,
        }


@login_manager.user_loader
def load_principal(user_id):
    data = session.get(PRINCIPAL_SESSION_KEY)
    if not data or data.get("id") != user_id:
        return None
    return Principal.from_session(data)


def sign_in(principal):
    """Start a session for the principal"""
    session[PRINCIPAL_SESSION_KEY] = principal.to_session()
    login_user(principal, remember=False)


def sign_out():
    """End the current session"""
    logout_user()
    session.pop(PRINCIPAL_SESSION_KEY, None)
    session.pop(ADMIN_UNLOCKED_SESSION_KEY, None)


class GoogleIdentityProvider:
    """OAuth 2.0 authorization-code flow against Google"""

    def __init__(self, client_id, client_secret, redirect_uri, timeout=15):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            client_id=config.get("GOOGLE_CLIENT_ID"),
            client_secret=config.get("GOOGLE_CLIENT_SECRET"),
            redirect_uri=config.get("GOOGLE_REDIRECT_URI"),
            timeout=config.get("OAUTH_TIMEOUT", 15),
        )

    def authorization_url(self, state):
        return GOOGLE_AUTHORIZE_URL + "?" + urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": "openid email profile",
                "prompt": "select_account",
                "state": state,
            }
        )

    def exchange_code(self, code):
        try:
            r = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
                timeout=self.timeout,
            )
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.error(f"Google token exchange failed: {e}")
            raise TransientNetwork("Sign-in with Google failed, please try again") from e

    def fetch_profile(self, id_token):
        try:
            r = requests.get(
                GOOGLE_TOKENINFO_URL,
                params={"id_token": id_token},
                timeout=self.timeout,
            )
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.error(f"Google profile lookup failed: {e}")
            raise TransientNetwork("Sign-in with Google failed, please try again") from e

    def authenticate(self, code):
        """Exchange an authorization code for a Principal"""
        tokens = self.exchange_code(code)
        id_token = tokens.get("id_token")
        if not id_token:
            raise TransientNetwork("Identity provider returned no id_token")
        profile = self.fetch_profile(id_token)
        return Principal.from_google_profile(profile)


def _on_signed_in(sender, user, **extra):
    logger.info(f"Session started for {user.id}")

    from party_picks.services.profiles import ensure_profile

    ensure_profile(user)


def _on_signed_out(sender, user, **extra):
    logger.info(f"Session ended for {getattr(user, 'id', None)}")


def init_app(app):
    """Listen to Flask-Login's session transitions"""
    user_logged_in.connect(_on_signed_in, app)
    user_logged_out.connect(_on_signed_out, app)
