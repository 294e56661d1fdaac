import pytest
from click.testing import CliRunner

from app import db
from app.models import League, Player
from manage import cli


@pytest.fixture
def runner(app):
    return CliRunner()


def test_create_and_list_players(runner):
    result = runner.invoke(cli, ["player", "create", "alice"])
    assert result.exit_code == 0
    assert "Created player 'alice'" in result.output

    result = runner.invoke(cli, ["player", "create", "alice"])
    assert "already exists" in result.output
    assert Player.query.count() == 1

    result = runner.invoke(cli, ["player", "list"])
    assert "alice - £0" in result.output


def test_create_league_by_player_name(runner, players):
    result = runner.invoke(
        cli, ["league", "create", "alice", "bob", "La Liga", "--total-games", "4"]
    )
    assert result.exit_code == 0
    assert "1 - La Liga" in result.output

    league = League.query.one()
    assert league.total_games == 4
    assert league.player_a.name == "alice"


def test_create_league_unknown_player(runner, players):
    result = runner.invoke(cli, ["league", "create", "alice", "zed", "La Liga"])
    assert "Player 'zed' not found" in result.output
    assert League.query.count() == 0


def test_standings_and_refresh(runner, league, game_data):
    from app.services import league_service

    league_service.create_game(league.id, game_data(2, 0))

    result = runner.invoke(cli, ["league", "standings", str(league.id)])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[2].startswith("alice")

    result = runner.invoke(cli, ["league", "refresh", str(league.id)])
    assert "active" in result.output
    assert "9 games remaining" in result.output

    result = runner.invoke(cli, ["league", "refresh", "999"])
    assert "not found" in result.output


def test_money_recalculate(runner, league, players, game_data):
    from app.services import league_service

    alice, _ = players
    league_service.create_game(league.id, game_data(1, 0))

    result = runner.invoke(cli, ["money", "recalculate"])
    assert "already match" in result.output

    db.session.get(Player, alice.id).prize_money = 50
    db.session.commit()

    result = runner.invoke(cli, ["money", "recalculate"])
    assert "alice: £50 -> £3" in result.output
    assert db.session.get(Player, alice.id).prize_money == 3


def test_status(runner, league):
    result = runner.invoke(cli, ["status"])
    assert result.exit_code == 0
    assert "Database: Connected" in result.output
    assert "Players: 2" in result.output
    assert "1 active, 0 finished" in result.output
