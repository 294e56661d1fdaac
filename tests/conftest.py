import pytest

from app import create_app, db
from app.models import Player
from app.services import league_service
from app.utils.prize_money import MatchStats


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def players(app):
    alice = Player(name="alice")
    bob = Player(name="bob")
    db.session.add_all([alice, bob])
    db.session.commit()
    return alice, bob


@pytest.fixture
def league(players):
    alice, bob = players
    return league_service.create_league(
        alice.id, bob.id, "Premier League", total_games=10
    )


@pytest.fixture
def game_data(players):
    """Build the league service payload for one game"""
    alice, bob = players

    def build(
        home_score,
        away_score,
        home=None,
        away=None,
        home_team="Arsenal",
        away_team="Liverpool",
        home_stats=None,
        away_stats=None,
        home_xg=1.0,
        away_xg=1.0,
    ):
        home = home or alice
        away = away or bob
        return {
            "home_user_id": home.id,
            "away_user_id": away.id,
            "home_team": home_team,
            "away_team": away_team,
            "home_score": home_score,
            "away_score": away_score,
            "home_xg": home_xg,
            "away_xg": away_xg,
            "home_stats": home_stats or MatchStats(goals=home_score),
            "away_stats": away_stats or MatchStats(goals=away_score),
        }

    return build
