"""
Leaderboard service.

Loads the inputs of the scoring engine for a scope (a party's members, or
every player) and returns ranked entries. Display names are enrichment
only: if they cannot be loaded every entry shows the placeholder name.
"""

import logging

from party_picks import db
from party_picks.catalog import CATEGORIES
from party_picks.models import Prediction
from party_picks.services import party_registry, profiles, results
from party_picks.utils.records import PredictionRecord
from party_picks.utils.scoring import compute_leaderboard, rank_entries

logger = logging.getLogger(__name__)

ANONYMIZED_ID_LENGTH = 8


def _load_predictions(scope):
    if not scope:
        return []
    rows = db.session.query(
        Prediction.user_id, Prediction.category, Prediction.selection
    ).filter(Prediction.user_id.in_(list(scope)))
    return [PredictionRecord.from_row(row._mapping) for row in rows]


def global_scope():
    """Every user with at least one prediction"""
    rows = db.session.query(Prediction.user_id).distinct()
    return [user_id for (user_id,) in rows]


def build_leaderboard(scope):
    """Sorted LeaderboardEntry list for a scope"""
    scope = list(scope)
    return compute_leaderboard(
        scope,
        _load_predictions(scope),
        results.get_results(),
        profiles.display_names_for(scope),
    )


def _find_rank(ranked, user_id):
    for entry in ranked:
        if entry["user_id"] == user_id:
            return entry["rank"]
    return None


def party_leaderboard(party_id, viewer_id):
    party = party_registry.get_party(party_id, viewer_id)
    ranked = rank_entries(build_leaderboard(party.get_member_ids()))
    return {
        "party": party.to_dict(member_count=len(ranked)),
        "entries": ranked,
        "my_rank": _find_rank(ranked, viewer_id),
    }


def global_leaderboard(viewer_id=None):
    ranked = rank_entries(build_leaderboard(global_scope()))
    return {
        "entries": ranked,
        "my_rank": _find_rank(ranked, viewer_id) if viewer_id else None,
    }


def score_for_user(user_id):
    """Score bar for one player: correct picks, picks made, results announced"""
    announced = results.get_results()
    entries = compute_leaderboard(
        [user_id],
        _load_predictions([user_id]),
        announced,
    )
    entry = entries[0]
    return {
        "score": entry.score,
        "picks": entry.total,
        "results_announced": len(announced),
        "categories": len(CATEGORIES),
    }


def anonymize_user_id(user_id):
    """Truncated subject id, without the provider prefix"""
    subject = user_id.split(":", 1)[-1]
    return subject[:ANONYMIZED_ID_LENGTH] + "..."


def admin_overview():
    """Results progress and a global leaderboard keyed by truncated ids"""
    announced = results.list_results()
    entries = build_leaderboard(global_scope())
    return {
        "results_entered": len(announced),
        "categories": len(CATEGORIES),
        "results": [result.to_dict() for result in announced],
        "leaderboard": [
            {
                "rank": rank,
                "player": anonymize_user_id(entry.user_id),
                "score": entry.score,
                "total": entry.total,
            }
            for rank, entry in enumerate(entries, start=1)
        ],
    }
