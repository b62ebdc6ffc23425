import logging

from flask import jsonify
from flask_login import current_user, login_required

from party_picks import limiter
from party_picks.forms import validate_or_raise
from party_picks.forms.parties import CreatePartyForm, JoinPartyForm
from party_picks.routes.parties import bp
from party_picks.services import leaderboard, party_registry

logger = logging.getLogger(__name__)


@bp.route("/")
@login_required
def index():
    """List the parties the user belongs to"""
    return jsonify({"parties": party_registry.list_my_parties(current_user.id)})


@bp.route("/", methods=["POST"])
@login_required
@limiter.limit("10 per hour")
def create():
    form = validate_or_raise(CreatePartyForm())
    party = party_registry.create_party(form.name.data, current_user.id)
    return jsonify(party.to_dict(member_count=1)), 201


@bp.route("/join", methods=["POST"])
@login_required
@limiter.limit("30 per hour")
def join():
    form = validate_or_raise(JoinPartyForm())
    party = party_registry.join_party(form.invite_code.data, current_user.id)
    return jsonify(party.to_dict(member_count=party.get_member_count()))


@bp.route("/<party_id>/membership", methods=["DELETE"])
@login_required
def leave(party_id):
    left = party_registry.leave_party(party_id, current_user.id)
    return jsonify({"success": True, "left": left})


@bp.route("/<party_id>/leaderboard")
@login_required
def party_leaderboard(party_id):
    return jsonify(leaderboard.party_leaderboard(party_id, current_user.id))
