"""
League Service for FIFA League Tracker

Records, edits and deletes games. Each mutation moves both players' prize
money and re-evaluates the league status inside a single transaction, so a
game never exists without its money and status applied (and vice versa).
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models import Game, GamePlayerStats, League, Player
from app.utils.logging_config import get_logger
from app.utils.prize_money import (
    MatchStats,
    calculate_match_prize_money,
    jackpot_settings,
)

logger = get_logger(__name__)


class LeagueServiceError(Exception):
    """Base error for league mutations"""


class LeagueNotFound(LeagueServiceError):
    pass


class GameNotFound(LeagueServiceError):
    pass


class PlayerNotFound(LeagueServiceError):
    pass


class LeagueNotActive(LeagueServiceError):
    """League no longer accepts this kind of change"""


class InvalidPlayers(LeagueServiceError):
    pass


def _to_match_stats(stats):
    if stats is None:
        return MatchStats()
    if isinstance(stats, MatchStats):
        return stats
    if isinstance(stats, dict):
        return MatchStats(
            **{name: stats.get(name) or 0 for name in MatchStats._fields}
        )
    return MatchStats(**{name: getattr(stats, name) for name in MatchStats._fields})


def _lock_league(league_id):
    """Load a league and serialize concurrent writers on its row"""
    league = db.session.get(
        League, league_id, with_for_update=True, populate_existing=True
    )
    if not league:
        raise LeagueNotFound(f"League {league_id} not found")
    return league


def _lock_game(game_id):
    """Find a game, lock its league, then reload the game under that lock"""
    game = db.session.get(Game, game_id)
    if not game:
        raise GameNotFound(f"Game {game_id} not found")

    league = _lock_league(game.league_id)
    game = db.session.get(Game, game_id, populate_existing=True)
    if not game:
        raise GameNotFound(f"Game {game_id} not found")
    return game, league


def _require_active(league):
    if not league.is_active:
        raise LeagueNotActive(f"League {league.id} is {league.status}")


def _require_correctable(league):
    # An early-clinched league can still be corrected, a fully played one cannot
    if not league.accepts_corrections:
        raise LeagueNotActive(f"League {league.id} is complete")


def _validate_players(league, home_user_id, away_user_id):
    if home_user_id == away_user_id:
        raise InvalidPlayers("A game needs two different players")
    if not (league.has_player(home_user_id) and league.has_player(away_user_id)):
        raise InvalidPlayers(
            f"Players {home_user_id} and {away_user_id} are not the players of league {league.id}"
        )


def _calculate_deltas(data, home_stats, away_stats):
    return calculate_match_prize_money(
        home_stats,
        away_stats,
        data["home_team"],
        data["away_team"],
        data["home_score"],
        data["away_score"],
        **jackpot_settings(current_app.config),
    )


def _apply_game_money(game, sign=1):
    """Apply (or with sign=-1 reverse) a game's stored deltas to balances"""
    db.session.get(Player, game.home_user_id).apply_prize_money(
        sign * game.home_prize_money
    )
    db.session.get(Player, game.away_user_id).apply_prize_money(
        sign * game.away_prize_money
    )


def _fill_game(game, data, home_stats, away_stats):
    game.home_user_id = data["home_user_id"]
    game.away_user_id = data["away_user_id"]
    game.home_team = data["home_team"]
    game.away_team = data["away_team"]
    game.home_score = data["home_score"]
    game.away_score = data["away_score"]
    game.home_xg = data.get("home_xg") or 0.0
    game.away_xg = data.get("away_xg") or 0.0
    if data.get("played_at"):
        game.played_at = data["played_at"]

    game.home_prize_money, game.away_prize_money = _calculate_deltas(
        data, home_stats, away_stats
    )

    _set_side_stats(game, home_stats, data["home_user_id"], is_home=True)
    _set_side_stats(game, away_stats, data["away_user_id"], is_home=False)


def _set_side_stats(game, stats, user_id, is_home):
    row = game.home_stats if is_home else game.away_stats
    if row is None:
        row = GamePlayerStats(is_home=is_home)
        game.player_stats.append(row)
    row.user_id = user_id
    row.update_from(stats)


def create_league(player_a_id, player_b_id, football_league, total_games=None):
    """
    Create a league between two existing players.

    Returns:
        League: The committed league
    """
    if total_games is None:
        total_games = current_app.config.get("DEFAULT_TOTAL_GAMES", 10)

    if player_a_id == player_b_id:
        raise InvalidPlayers("A league needs two different players")
    for player_id in (player_a_id, player_b_id):
        if not db.session.get(Player, player_id):
            raise PlayerNotFound(f"Player {player_id} not found")

    try:
        league = League.create_league(
            player_a_id, player_b_id, football_league, total_games
        )
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"League creation failed - SQL error: {e}")
        raise

    logger.info(
        f"Created league {league.id} '{league.name}' "
        f"({player_a_id} vs {player_b_id}, {total_games} games)"
    )
    return league


def create_game(league_id, data):
    """
    Record a game in an active league.

    Args:
        league_id: League the game belongs to
        data: dict with home_user_id, away_user_id, home_team, away_team,
            home_score, away_score, home_xg, away_xg, home_stats,
            away_stats and optionally played_at

    Returns:
        Game: The committed game
    """
    try:
        league = _lock_league(league_id)
        _require_active(league)
        _validate_players(league, data["home_user_id"], data["away_user_id"])

        home_stats = _to_match_stats(data.get("home_stats"))
        away_stats = _to_match_stats(data.get("away_stats"))

        game = Game(league_id=league.id)
        _fill_game(game, data, home_stats, away_stats)
        db.session.add(game)

        _apply_game_money(game)
        league.refresh_status()

        db.session.commit()
    except LeagueServiceError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Game creation failed in league {league_id} - SQL error: {e}")
        raise

    logger.info(
        f"Recorded game {game.id} in league {league_id}: "
        f"{game.home_team} {game.home_score}-{game.away_score} {game.away_team}, "
        f"prize money {game.home_prize_money:+}/{game.away_prize_money:+}"
    )
    return game


def update_game(game_id, data):
    """
    Replace a game's result and stats.

    The old deltas are reversed and the new ones applied, then the league
    status is re-evaluated (an edit can un-clinch a title).
    """
    try:
        game, league = _lock_game(game_id)
        _require_correctable(league)
        _validate_players(league, data["home_user_id"], data["away_user_id"])

        home_stats = _to_match_stats(data.get("home_stats"))
        away_stats = _to_match_stats(data.get("away_stats"))

        old_money = (game.home_prize_money, game.away_prize_money)
        _apply_game_money(game, sign=-1)
        _fill_game(game, data, home_stats, away_stats)
        _apply_game_money(game)

        league.refresh_status()
        db.session.commit()
    except LeagueServiceError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Game {game_id} update failed - SQL error: {e}")
        raise

    logger.info(
        f"Updated game {game.id}: prize money {old_money[0]:+}/{old_money[1]:+} "
        f"-> {game.home_prize_money:+}/{game.away_prize_money:+}"
    )
    return game


def delete_game(game_id):
    """Delete a game, reversing its prize money (can un-clinch the league)"""
    try:
        game, league = _lock_game(game_id)
        league_id = league.id
        _require_correctable(league)

        _apply_game_money(game, sign=-1)
        db.session.delete(game)

        league.refresh_status()
        db.session.commit()
    except LeagueServiceError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Game {game_id} delete failed - SQL error: {e}")
        raise

    logger.info(f"Deleted game {game_id} from league {league_id}")
    return league


def recalculate_prize_money():
    """
    Replay every game through the calculator and rebuild all balances.

    Rewrites each game's stored deltas with the current rules, then sets
    every player's balance to the sum of their deltas.

    Returns:
        list: (player, old_balance, new_balance) for players whose balance changed
    """
    settings = jackpot_settings(current_app.config)
    balances = {}

    try:
        for game in Game.query.order_by(Game.id).all():
            home_stats = game.home_stats or MatchStats()
            away_stats = game.away_stats or MatchStats()
            game.home_prize_money, game.away_prize_money = calculate_match_prize_money(
                home_stats,
                away_stats,
                game.home_team,
                game.away_team,
                game.home_score,
                game.away_score,
                **settings,
            )
            balances[game.home_user_id] = (
                balances.get(game.home_user_id, 0) + game.home_prize_money
            )
            balances[game.away_user_id] = (
                balances.get(game.away_user_id, 0) + game.away_prize_money
            )

        changed = []
        for player in (
            Player.query.with_for_update().populate_existing().order_by(Player.id).all()
        ):
            new_balance = balances.get(player.id, 0)
            if player.prize_money != new_balance:
                changed.append((player, player.prize_money, new_balance))
                logger.warning(
                    f"Player {player.id} balance corrected {player.prize_money} -> {new_balance}"
                )
                player.prize_money = new_balance

        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Prize money recalculation failed - SQL error: {e}")
        raise

    return changed


def refresh_league(league_id):
    """Re-evaluate one league's status outside of a game mutation"""
    try:
        league = _lock_league(league_id)
        state = league.refresh_status()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"League {league_id} refresh failed - SQL error: {e}")
        raise
    return state
