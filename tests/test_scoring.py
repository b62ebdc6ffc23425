from party_picks.utils.records import PredictionRecord
from party_picks.utils.scoring import (
    calculate_pick_score,
    compute_leaderboard,
    rank_entries,
)


def pick(user_id, category, selection):
    return PredictionRecord(user_id=user_id, category=category, selection=selection)


PREDICTIONS = [
    pick("u1", "winner", "seahawks"),
    pick("u2", "winner", "patriots"),
    pick("u2", "mvp", "drake-maye"),
]


def test_calculate_pick_score():
    assert calculate_pick_score("seahawks", "seahawks") == 1
    assert calculate_pick_score("seahawks", "patriots") == 0
    assert calculate_pick_score("seahawks", None) == 0


def test_correct_pick_outranks_more_picks():
    entries = compute_leaderboard(
        ["u1", "u2"], PREDICTIONS, {"winner": "seahawks"}, {"u1": "Uma", "u2": "Ugo"}
    )
    assert [(e.user_id, e.score, e.total) for e in entries] == [
        ("u1", 1, 1),
        ("u2", 0, 2),
    ]


def test_members_without_predictions_are_listed():
    entries = compute_leaderboard(["u1", "u3"], PREDICTIONS, {})
    by_id = {e.user_id: e for e in entries}
    assert by_id["u3"].score == 0 and by_id["u3"].total == 0
    assert by_id["u3"].display_name == "Player"


def test_predictions_outside_scope_are_ignored():
    entries = compute_leaderboard(["u1"], PREDICTIONS, {"winner": "patriots"})
    assert len(entries) == 1
    assert entries[0].score == 0


def test_ties_break_on_total_then_name_then_id():
    predictions = [
        pick("b", "winner", "seahawks"),
        pick("a", "winner", "seahawks"),
        pick("c", "winner", "seahawks"),
        pick("c", "mvp", "geno-smith"),
        pick("d", "winner", "seahawks"),
    ]
    names = {"a": "zed", "b": "Amy", "c": "Cal", "d": "amy"}
    entries = compute_leaderboard(["a", "b", "c", "d"], predictions, {"winner": "seahawks"}, names)
    assert [e.user_id for e in entries] == ["c", "b", "d", "a"]


def test_compute_leaderboard_is_pure():
    results = {"winner": "seahawks"}
    first = compute_leaderboard(["u1", "u2"], PREDICTIONS, results)
    second = compute_leaderboard(["u1", "u2"], PREDICTIONS, results)
    assert [e.to_dict() for e in first] == [e.to_dict() for e in second]
    assert results == {"winner": "seahawks"}


def test_announcing_a_result_never_lowers_scores():
    before = {e.user_id: e.score for e in compute_leaderboard(["u1", "u2"], PREDICTIONS, {})}
    after = {
        e.user_id: e.score
        for e in compute_leaderboard(["u1", "u2"], PREDICTIONS, {"mvp": "drake-maye"})
    }
    assert after["u1"] == before["u1"]
    assert after["u2"] == before["u2"] + 1


def test_score_never_exceeds_total():
    results = {"winner": "patriots", "mvp": "drake-maye"}
    entries = compute_leaderboard(["u1", "u2"], PREDICTIONS, results)
    assert all(e.score <= e.total for e in entries)
    assert sum(e.score for e in entries) <= sum(e.total for e in entries)


def test_rank_entries():
    entries = compute_leaderboard(["u1", "u2"], PREDICTIONS, {"winner": "seahawks"})
    ranked = rank_entries(entries)
    assert [(r["user_id"], r["rank"]) for r in ranked] == [("u1", 1), ("u2", 2)]
