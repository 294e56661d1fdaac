"""
Prize Money Engine for FIFA League Tracker

This module converts a single match result into the signed prize money delta
for each player. It is pure: no database access and no side effects.
For persisting the deltas against player balances, see
app/services/league_service.py
"""

from collections import namedtuple

DEFAULT_JACKPOT_TEAM = "sheffield united"
DEFAULT_JACKPOT_MULTIPLIER = 2

WIN_BONUS = 2
LOSS_PENALTY = 2

MatchStats = namedtuple(
    "MatchStats",
    [
        "goals",
        "hat_tricks",
        "outside_box_goals",
        "header_goals",
        "penalties_missed",
        "red_cards",
        "xg",
    ],
    defaults=(0, 0, 0, 0, 0, 0, 0),
)


def stat_value(stats, name):
    """Read a stat from a model row, a MatchStats value or a plain dict"""
    if isinstance(stats, dict):
        return stats.get(name, 0) or 0
    return getattr(stats, name, 0) or 0


def calculate_individual_bonuses(stats):
    """
    Calculate the individual performance bonus for one side of a match.

    +2 per hat trick, +2 per outside box goal, +1 per header goal,
    -1 per penalty missed, -1 per red card.
    """
    bonuses = 0
    bonuses += stat_value(stats, "hat_tricks") * 2
    bonuses += stat_value(stats, "outside_box_goals") * 2
    bonuses += stat_value(stats, "header_goals")
    bonuses -= stat_value(stats, "penalties_missed")
    bonuses -= stat_value(stats, "red_cards")
    return bonuses


def is_jackpot_team(team_name, jackpot_team=DEFAULT_JACKPOT_TEAM):
    """Check whether a free-text team name triggers the jackpot multiplier"""
    if not jackpot_team or not team_name:
        return False
    return jackpot_team.lower() in team_name.lower()


def calculate_prize_money(
    player_stats,
    opponent_stats,
    team_name,
    player_score,
    opponent_score,
    jackpot_team=DEFAULT_JACKPOT_TEAM,
    jackpot_multiplier=DEFAULT_JACKPOT_MULTIPLIER,
):
    """
    Calculate the prize money delta for one player in one match.

    Without the jackpot rule the two sides of a match sum to zero. Playing
    as the jackpot team (case-insensitive substring match on the team name)
    multiplies that side's whole delta, so only one side qualifying breaks
    the zero-sum.

    Args:
        player_stats: Stats for the player being scored
        opponent_stats: Stats for the opponent
        team_name: Team the player used in this match
        player_score: Goals scored by the player
        opponent_score: Goals scored by the opponent
        jackpot_team: Team name substring that triggers the multiplier,
            None disables the rule
        jackpot_multiplier: Factor applied to the whole delta

    Returns:
        Signed prize money delta
    """
    money = 0

    # Goal difference (can be negative)
    money += player_score - opponent_score

    if player_score > opponent_score:
        money += WIN_BONUS
    elif player_score < opponent_score:
        money -= LOSS_PENALTY

    # Your bonuses add, opponent's subtract
    money += calculate_individual_bonuses(player_stats)
    money -= calculate_individual_bonuses(opponent_stats)

    if is_jackpot_team(team_name, jackpot_team):
        money *= jackpot_multiplier

    return money


def calculate_match_prize_money(
    home_stats,
    away_stats,
    home_team,
    away_team,
    home_score,
    away_score,
    jackpot_team=DEFAULT_JACKPOT_TEAM,
    jackpot_multiplier=DEFAULT_JACKPOT_MULTIPLIER,
):
    """
    Calculate both sides' prize money for a match.

    Returns:
        Tuple of (home_delta, away_delta)
    """
    home_money = calculate_prize_money(
        home_stats,
        away_stats,
        home_team,
        home_score,
        away_score,
        jackpot_team=jackpot_team,
        jackpot_multiplier=jackpot_multiplier,
    )
    away_money = calculate_prize_money(
        away_stats,
        home_stats,
        away_team,
        away_score,
        home_score,
        jackpot_team=jackpot_team,
        jackpot_multiplier=jackpot_multiplier,
    )
    return home_money, away_money


def jackpot_settings(app_config):
    """Build calculator keyword arguments from the Flask app config"""
    if not app_config.get("JACKPOT_ENABLED", True):
        return {"jackpot_team": None}
    return {
        "jackpot_team": app_config.get("JACKPOT_TEAM", DEFAULT_JACKPOT_TEAM),
        "jackpot_multiplier": app_config.get(
            "JACKPOT_MULTIPLIER", DEFAULT_JACKPOT_MULTIPLIER
        ),
    }
