import logging
from functools import wraps

from flask import jsonify, request
from sqlalchemy.exc import IntegrityError

from app import db
from app.forms import json_formdata
from app.forms.games import GameForm
from app.forms.leagues import CreateLeagueForm, PlayerForm
from app.models import Game, League, Player
from app.routes.api import bp
from app.services import league_service
from app.services.league_service import (
    GameNotFound,
    InvalidPlayers,
    LeagueNotActive,
    LeagueNotFound,
    LeagueServiceError,
    PlayerNotFound,
)
from app.utils.standings import prize_money_leader, recompute_league_state

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    LeagueNotFound: 404,
    GameNotFound: 404,
    PlayerNotFound: 404,
    LeagueNotActive: 409,
    InvalidPlayers: 400,
}


def handle_service_errors(f):
    """Translate league service errors into JSON error responses"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except LeagueServiceError as e:
            status = ERROR_STATUS.get(type(e), 400)
            logger.warning(f"{request.method} {request.path} rejected: {e}")
            return jsonify({"error": str(e)}), status

    return decorated_function


def form_error_response(form):
    return jsonify({"error": "Invalid input", "fields": form.errors}), 400


@bp.route("/players")
def players():
    """Get all players"""
    players = Player.query.order_by(Player.name).all()
    return jsonify([player.to_dict() for player in players])


@bp.route("/players", methods=["POST"])
def create_player():
    """Create a player"""
    form = PlayerForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        return form_error_response(form)

    player = Player(name=form.name.data)
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": f"Player {form.name.data} already exists"}), 409

    logger.info(f"Created player {player.id} ({player.name})")
    return jsonify(player.to_dict()), 201


@bp.route("/players/<int:player_id>/stats")
def player_stats(player_id):
    """Get career stats and balance for a player"""
    player = Player.query.get_or_404(player_id)
    return jsonify({"player": player.to_dict(), "career": player.get_career_stats()})


@bp.route("/leagues")
def leagues():
    """Get leagues, optionally filtered by status"""
    query = League.query
    status = request.args.get("status")
    if status:
        query = query.filter_by(status=status)
    leagues = query.order_by(League.created_at.desc()).all()
    return jsonify([league.to_dict() for league in leagues])


@bp.route("/leagues", methods=["POST"])
@handle_service_errors
def create_league():
    """Create a league between two players"""
    form = CreateLeagueForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        return form_error_response(form)

    league = league_service.create_league(
        form.player_a_id.data,
        form.player_b_id.data,
        form.football_league.data,
        form.total_games.data,
    )
    return jsonify(league.to_dict(include_standings=True)), 201


@bp.route("/leagues/<int:league_id>")
def league_detail(league_id):
    """Get a league with standings and games"""
    league = League.query.get_or_404(league_id)
    data = league.to_dict(include_standings=True)
    data["games"] = [game.to_dict() for game in reversed(league.get_games())]
    return jsonify(data)


@bp.route("/leagues/<int:league_id>/standings")
def league_standings(league_id):
    """Get the league table and completion state"""
    league = League.query.get_or_404(league_id)
    games = league.get_games()
    state = recompute_league_state(
        games, league.player_a_id, league.player_b_id, league.total_games
    )
    return jsonify(
        {
            "league_id": league.id,
            "standings": league.get_standings(),
            "status": league.status,
            "champion_id": league.champion_id,
            "games_played": state["games_played"],
            "remaining_games": state["remaining_games"],
        }
    )


@bp.route("/leagues/<int:league_id>/prize-money")
def league_prize_money(league_id):
    """Get the prize money leader between the league's two players"""
    league = League.query.get_or_404(league_id)
    return jsonify(
        {
            "league_id": league.id,
            "players": [league.player_a.to_dict(), league.player_b.to_dict()],
            "leader": prize_money_leader(league.player_a, league.player_b),
        }
    )


@bp.route("/leagues/<int:league_id>/games", methods=["POST"])
@handle_service_errors
def create_game(league_id):
    """Record a game in a league"""
    form = GameForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        return form_error_response(form)

    game = league_service.create_game(league_id, form.to_game_data())
    return jsonify({"game": game.to_dict(), "league": game.league.to_dict()}), 201


@bp.route("/games/<int:game_id>")
def game_detail(game_id):
    """Get one game"""
    game = Game.query.get_or_404(game_id)
    return jsonify(game.to_dict())


@bp.route("/games/<int:game_id>", methods=["PUT"])
@handle_service_errors
def update_game(game_id):
    """Replace a game's result and stats"""
    form = GameForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        return form_error_response(form)

    game = league_service.update_game(game_id, form.to_game_data())
    return jsonify({"game": game.to_dict(), "league": game.league.to_dict()})


@bp.route("/games/<int:game_id>", methods=["DELETE"])
@handle_service_errors
def delete_game(game_id):
    """Delete a game"""
    league = league_service.delete_game(game_id)
    return jsonify({"deleted": game_id, "league": league.to_dict()})
