import pytest

from party_picks import db
from party_picks.errors import (
    CodeGenerationExhausted,
    InvalidInviteCode,
    NotPartyMember,
    ValidationFailed,
)
from party_picks.models import Party, PartyMember
from party_picks.models.party import INVITE_CODE_ALPHABET
from party_picks.services import party_registry


def member_rows(party_id):
    return PartyMember.query.filter_by(party_id=party_id).count()


def test_create_party_adds_creator_as_member(app):
    party = party_registry.create_party("  Watch Party  ", "google:alice")

    assert party.name == "Watch Party"
    assert len(party.invite_code) == 6
    assert all(ch in INVITE_CODE_ALPHABET for ch in party.invite_code)
    assert party.get_member_ids() == ["google:alice"]


@pytest.mark.parametrize("name", ["", "   ", "x" * 51])
def test_create_party_rejects_bad_names(app, name):
    with pytest.raises(ValidationFailed):
        party_registry.create_party(name, "google:alice")
    assert Party.query.count() == 0


def test_create_party_retries_on_code_collision(app, monkeypatch):
    taken = party_registry.create_party("First", "google:alice").invite_code
    codes = iter([taken, taken, "ZZZZZZ"])
    monkeypatch.setattr(Party, "generate_invite_code", staticmethod(lambda: next(codes)))

    party = party_registry.create_party("Second", "google:bob")

    assert party.invite_code == "ZZZZZZ"
    assert Party.query.count() == 2


def test_create_party_gives_up_after_five_collisions(app, monkeypatch):
    taken = party_registry.create_party("First", "google:alice").invite_code
    attempts = []

    def colliding_code():
        attempts.append(1)
        return taken

    monkeypatch.setattr(Party, "generate_invite_code", staticmethod(colliding_code))

    with pytest.raises(CodeGenerationExhausted):
        party_registry.create_party("Second", "google:bob")

    assert len(attempts) == 5
    assert Party.query.count() == 1
    assert PartyMember.query.filter_by(user_id="google:bob").count() == 0


def test_join_party_is_idempotent(app):
    party = party_registry.create_party("Watch Party", "google:alice")

    for _ in range(3):
        joined = party_registry.join_party(party.invite_code.lower(), "google:bob")
        assert joined.id == party.id

    assert member_rows(party.id) == 2
    assert PartyMember.query.filter_by(user_id="google:bob").count() == 1


@pytest.mark.parametrize("code", ["bad-code", "", "ZZZZZZ"])
def test_join_party_rejects_unknown_codes(app, code):
    party_registry.create_party("Watch Party", "google:alice")

    with pytest.raises(InvalidInviteCode):
        party_registry.join_party(code, "google:bob")

    assert PartyMember.query.filter_by(user_id="google:bob").count() == 0


def test_list_my_parties_counts_members(app):
    first = party_registry.create_party("First", "google:alice")
    second = party_registry.create_party("Second", "google:bob")
    party_registry.join_party(second.invite_code, "google:alice")
    party_registry.join_party(second.invite_code, "google:carol")

    parties = {p["id"]: p for p in party_registry.list_my_parties("google:alice")}

    assert parties[first.id]["member_count"] == member_rows(first.id) == 1
    assert parties[second.id]["member_count"] == member_rows(second.id) == 3
    assert party_registry.list_my_parties("google:nobody") == []


def test_leave_party_and_orphans(app):
    party = party_registry.create_party("Watch Party", "google:alice")

    assert party_registry.leave_party(party.id, "google:alice") is True
    assert party_registry.leave_party(party.id, "google:alice") is False

    orphaned = party_registry.find_orphaned_parties()
    assert [p.id for p in orphaned] == [party.id]


def test_get_party_members_requires_membership(app):
    party = party_registry.create_party("Watch Party", "google:alice")
    party_registry.join_party(party.invite_code, "google:bob")

    assert sorted(party_registry.get_party_members(party.id, "google:bob")) == [
        "google:alice",
        "google:bob",
    ]
    with pytest.raises(NotPartyMember):
        party_registry.get_party_members(party.id, "google:mallory")
    with pytest.raises(NotPartyMember):
        party_registry.get_party_members("missing", "google:alice")


def test_party_row_survives_session_reset(app):
    party = party_registry.create_party("Watch Party", "google:alice")
    party_id = party.id
    db.session.expunge_all()

    reloaded = db.session.get(Party, party_id)
    assert reloaded.get_member_count() == 1
