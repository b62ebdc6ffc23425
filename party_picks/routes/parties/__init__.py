from flask import Blueprint

bp = Blueprint("parties", __name__)

from party_picks.routes.parties import routes  # noqa: F401, E402
