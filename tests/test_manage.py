import pytest
from click.testing import CliRunner

from manage import cli
from party_picks.models import Result
from party_picks.services import party_registry


@pytest.fixture
def runner(app):
    return CliRunner()


def test_announce_list_and_clear(runner):
    result = runner.invoke(cli, ["results", "announce", "winner", "seahawks"])
    assert result.exit_code == 0
    assert "Announced winner = seahawks" in result.output
    assert Result.query.count() == 1

    listing = runner.invoke(cli, ["results", "list"])
    assert "1/15 announced" in listing.output
    assert "Seattle Seahawks" in listing.output

    runner.invoke(cli, ["results", "clear", "winner"])
    assert Result.query.count() == 0


def test_announce_rejects_invalid_option(runner):
    result = runner.invoke(cli, ["results", "announce", "winner", "cowboys"])
    assert "❌" in result.output
    assert Result.query.count() == 0


def test_party_orphans(runner):
    party = party_registry.create_party("Watch Party", "google:alice")
    assert "No orphaned parties" in runner.invoke(cli, ["party", "orphans"]).output

    party_registry.leave_party(party.id, "google:alice")
    output = runner.invoke(cli, ["party", "orphans"]).output
    assert party.invite_code in output


def test_leaderboard_show_for_party(runner):
    party = party_registry.create_party("Watch Party", "google:alice")

    output = runner.invoke(cli, ["leaderboard", "show", "--party", party.invite_code]).output
    assert "Watch Party" in output
    assert "google:alice" in output

    missing = runner.invoke(cli, ["leaderboard", "show", "--party", "ZZZZZZ"]).output
    assert "not found" in missing


def test_catalog_validate(runner):
    result = runner.invoke(cli, ["catalog", "validate"])
    assert result.exit_code == 0
    assert "15 categories are valid" in result.output
