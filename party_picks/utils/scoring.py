"""
Scoring Engine for Party Picks

Scores are computed on read and never stored: correcting or clearing a
result re-scores every affected player the next time a leaderboard is
built. The functions here are pure; loading members, predictions and
results is done in party_picks.services.leaderboard.
"""

from party_picks.models.profile import DEFAULT_DISPLAY_NAME
from party_picks.utils.records import LeaderboardEntry


def calculate_pick_score(selection, result):
    """
    Calculate score for a single prediction.

    Returns:
        1 when a result is announced and equals the selection exactly
        0 otherwise, including categories that are not decided yet
    """
    if result is None:
        return 0
    return 1 if selection == result else 0


def leaderboard_sort_key(entry):
    """Score desc, picks made desc, then name and id so ties are deterministic"""
    return (-entry.score, -entry.total, entry.display_name.casefold(), entry.user_id)


def compute_leaderboard(scope, predictions, results, display_names=None):
    """
    Rank every member of a scope by correct predictions.

    Args:
        scope: iterable of user ids (party members, or every player)
        predictions: objects with user_id, category and selection
        results: mapping of category id to announced option id
        display_names: optional mapping of user id to display name

    Members without predictions are included with 0/0. Predictions from
    users outside the scope are ignored.
    """
    display_names = display_names or {}

    entries = {}
    for user_id in scope:
        entries[user_id] = LeaderboardEntry(
            user_id=user_id,
            display_name=display_names.get(user_id) or DEFAULT_DISPLAY_NAME,
        )

    for prediction in predictions:
        entry = entries.get(prediction.user_id)
        if entry is None:
            continue

        # A pick counts toward the total whether or not it is decided yet
        entry.total += 1
        entry.score += calculate_pick_score(
            prediction.selection, results.get(prediction.category)
        )

    return sorted(entries.values(), key=leaderboard_sort_key)


def rank_entries(entries):
    """Serialize sorted entries with their 1-based rank"""
    return [entry.to_dict(rank=index) for index, entry in enumerate(entries, start=1)]
