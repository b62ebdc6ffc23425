import pytest

from config import LOCKOUT_TIME
from party_picks import db
from party_picks.errors import (
    InvalidOption,
    OwnershipViolation,
    PredictionsLocked,
    TransientNetwork,
    UnknownCategory,
)
from party_picks.models import Prediction, Profile
from party_picks.models.policies import acting_as
from party_picks.services import predictions, profiles


def rows(user_id, category=None):
    query = Prediction.query.filter_by(user_id=user_id)
    if category:
        query = query.filter_by(category=category)
    return query.all()


def test_selecting_same_option_twice_clears_it(app, alice):
    assert predictions.select_option(alice, "winner", "seahawks").selection == "seahawks"
    assert predictions.select_option(alice, "winner", "seahawks") is None

    assert rows(alice.id, "winner") == []
    assert predictions.list_predictions(alice.id) == {}


def test_selecting_another_option_overwrites(app, alice):
    predictions.select_option(alice, "winner", "seahawks")
    predictions.select_option(alice, "winner", "patriots")

    stored = rows(alice.id, "winner")
    assert len(stored) == 1
    assert stored[0].selection == "patriots"
    assert predictions.list_predictions(alice.id) == {"winner": "patriots"}


def test_first_pick_creates_profile(app, bob):
    predictions.select_option(bob, "coin-toss", "heads")

    profile = db.session.get(Profile, bob.id)
    assert profile is not None
    assert profile.first_name == "Bob"


def test_rejects_unknown_category_and_option(app, alice):
    with pytest.raises(UnknownCategory):
        predictions.select_option(alice, "halftime-snacks", "nachos")
    with pytest.raises(InvalidOption):
        predictions.select_option(alice, "winner", "cowboys")
    assert rows(alice.id) == []


def test_picks_lock_at_kickoff(app, alice, clock):
    predictions.select_option(alice, "winner", "seahawks")

    clock.now = LOCKOUT_TIME
    with pytest.raises(PredictionsLocked):
        predictions.select_option(alice, "winner", "patriots")
    with pytest.raises(PredictionsLocked):
        predictions.delete_prediction(alice, "winner")

    assert rows(alice.id, "winner")[0].selection == "seahawks"


def test_delete_prediction(app, alice):
    predictions.save_prediction(alice, "mvp", "geno-smith")

    assert predictions.delete_prediction(alice, "mvp") is True
    assert predictions.delete_prediction(alice, "mvp") is False
    assert rows(alice.id) == []


def test_cannot_write_another_users_prediction(app, alice, bob):
    with acting_as(alice.id):
        db.session.add(Prediction(user_id=bob.id, category="winner", selection="seahawks"))
        with pytest.raises(OwnershipViolation):
            db.session.flush()
    db.session.rollback()

    assert rows(bob.id) == []


def test_cannot_write_prediction_without_actor(app, bob):
    db.session.add(Prediction(user_id=bob.id, category="winner", selection="seahawks"))
    with pytest.raises(OwnershipViolation):
        db.session.commit()
    db.session.rollback()


def test_prediction_map_is_refreshed_after_write(app, alice):
    assert predictions.list_predictions(alice.id) == {}

    predictions.save_prediction(alice, "gatorade", "orange")

    assert predictions.list_predictions(alice.id) == {"gatorade": "orange"}


def test_profile_failure_does_not_block_first_pick(app, bob, monkeypatch):
    def failing_commit():
        db.session.rollback()
        raise TransientNetwork()

    monkeypatch.setattr(profiles, "commit_session", failing_commit)

    saved = predictions.select_option(bob, "coin-toss", "heads")

    assert saved.selection == "heads"
    assert [p.selection for p in rows(bob.id, "coin-toss")] == ["heads"]
    assert db.session.get(Profile, bob.id) is None
