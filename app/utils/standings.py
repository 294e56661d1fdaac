"""
Standings Engine for FIFA League Tracker

Folds a league's games into a two-row table and decides whether the league
is finished and who the champion is. Everything here is pure and works on
Game model rows, MatchResult values or plain dicts alike.
"""

from collections import namedtuple

from app.utils.prize_money import WIN_BONUS, stat_value

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

STATUS_ACTIVE = "active"
STATUS_FINISHED = "finished"

MatchResult = namedtuple(
    "MatchResult",
    [
        "home_user_id",
        "away_user_id",
        "home_score",
        "away_score",
        "home_xg",
        "away_xg",
        "home_team",
        "away_team",
        "played_at",
        "home_stats",
        "away_stats",
    ],
    defaults=(0, 0, "", "", None, None, None),
)


def _field(game, name):
    if isinstance(game, dict):
        return game.get(name)
    return getattr(game, name, None)


def _result_points(score_for, score_against):
    if score_for > score_against:
        return POINTS_FOR_WIN
    if score_for == score_against:
        return POINTS_FOR_DRAW
    return 0


def _empty_entry(user_id, user_name):
    return {
        "user_id": user_id,
        "user_name": user_name,
        "played": 0,
        "wins": 0,
        "draws": 0,
        "losses": 0,
        "goals_for": 0,
        "goals_against": 0,
        "goal_difference": 0,
        "points": 0,
        "x_pts": 0,
    }


def calculate_league_standings(
    games, player_a_id, player_b_id, player_a_name=None, player_b_name=None
):
    """
    Build the league table for the two players of a league.

    Args:
        games: Iterable of games between the two players
        player_a_id: First player of the league
        player_b_id: Second player of the league
        player_a_name: Display name for player A
        player_b_name: Display name for player B

    Returns:
        list: Two standings dicts sorted by points, goal difference and
        goals scored. Equal on all three keeps player A first.
    """
    standings = {
        player_a_id: _empty_entry(player_a_id, player_a_name),
        player_b_id: _empty_entry(player_b_id, player_b_name),
    }

    for game in games:
        home = standings[_field(game, "home_user_id")]
        away = standings[_field(game, "away_user_id")]
        home_score = _field(game, "home_score")
        away_score = _field(game, "away_score")

        home["played"] += 1
        away["played"] += 1

        home["goals_for"] += home_score
        home["goals_against"] += away_score
        away["goals_for"] += away_score
        away["goals_against"] += home_score

        if home_score > away_score:
            home["wins"] += 1
            away["losses"] += 1
        elif away_score > home_score:
            away["wins"] += 1
            home["losses"] += 1
        else:
            home["draws"] += 1
            away["draws"] += 1

        home["points"] += _result_points(home_score, away_score)
        away["points"] += _result_points(away_score, home_score)

        # Expected points ignore the real score
        home_xg = _field(game, "home_xg") or 0
        away_xg = _field(game, "away_xg") or 0
        home["x_pts"] += _result_points(home_xg, away_xg)
        away["x_pts"] += _result_points(away_xg, home_xg)

    for entry in standings.values():
        entry["goal_difference"] = entry["goals_for"] - entry["goals_against"]

    return sorted(
        [standings[player_a_id], standings[player_b_id]],
        key=lambda e: (e["points"], e["goal_difference"], e["goals_for"]),
        reverse=True,
    )


def calculate_points(games, player_a_id, player_b_id):
    """Get league points per player id"""
    points = {player_a_id: 0, player_b_id: 0}
    for game in games:
        home_score = _field(game, "home_score")
        away_score = _field(game, "away_score")
        points[_field(game, "home_user_id")] += _result_points(home_score, away_score)
        points[_field(game, "away_user_id")] += _result_points(away_score, home_score)
    return points


def recompute_league_state(games, player_a_id, player_b_id, total_games):
    """
    Decide league status and champion from scratch.

    Safe to call after any create, edit or delete: an edit that removes a
    clinching lead puts the league back to active.

    Args:
        games: All games currently recorded in the league
        player_a_id: First player of the league
        player_b_id: Second player of the league
        total_games: Configured number of games, must be positive

    Returns:
        dict: status, champion_id (None when tied or undecided),
        games_played and remaining_games
    """
    games = list(games)
    games_played = len(games)
    remaining_games = total_games - games_played

    state = {
        "status": STATUS_ACTIVE,
        "champion_id": None,
        "games_played": games_played,
        "remaining_games": max(remaining_games, 0),
    }

    if games_played == 0:
        return state

    points = calculate_points(games, player_a_id, player_b_id)
    a_points = points[player_a_id]
    b_points = points[player_b_id]

    if remaining_games > 0:
        leading_points = max(a_points, b_points)
        trailing_points = min(a_points, b_points)
        max_possible_points = remaining_games * POINTS_FOR_WIN

        # Trailer must not even be able to draw level
        if trailing_points + max_possible_points < leading_points:
            state["status"] = STATUS_FINISHED
            state["champion_id"] = player_a_id if a_points > b_points else player_b_id

    if games_played >= total_games:
        state["status"] = STATUS_FINISHED
        if a_points > b_points:
            state["champion_id"] = player_a_id
        elif b_points > a_points:
            state["champion_id"] = player_b_id
        else:
            state["champion_id"] = None

    return state


def calculate_career_stats(games, user_id):
    """
    Aggregate career totals for one player over any set of games.

    Games must expose home_stats and away_stats (GamePlayerStats rows,
    MatchStats values or dicts). A missing stats record counts as zero.
    """
    career = {
        "games": 0,
        "wins": 0,
        "draws": 0,
        "losses": 0,
        "goals": 0,
        "hat_tricks": 0,
        "outside_box_goals": 0,
        "header_goals": 0,
        "penalties_missed": 0,
        "red_cards": 0,
        "win_bonus": 0,
    }

    for game in games:
        is_home = _field(game, "home_user_id") == user_id
        if not is_home and _field(game, "away_user_id") != user_id:
            continue

        if is_home:
            score_for, score_against = _field(game, "home_score"), _field(game, "away_score")
            stats = _field(game, "home_stats")
        else:
            score_for, score_against = _field(game, "away_score"), _field(game, "home_score")
            stats = _field(game, "away_stats")

        career["games"] += 1
        if score_for > score_against:
            career["wins"] += 1
            career["win_bonus"] += WIN_BONUS
        elif score_for == score_against:
            career["draws"] += 1
        else:
            career["losses"] += 1

        if stats is not None:
            for name in (
                "goals",
                "hat_tricks",
                "outside_box_goals",
                "header_goals",
                "penalties_missed",
                "red_cards",
            ):
                career[name] += stat_value(stats, name)

    return career


def prize_money_leader(player_a, player_b):
    """
    Compare two players' prize money balances.

    Returns:
        dict: leader_id and leader_name (None when tied), amount as the
        absolute balance of the leader and a tied flag
    """
    a_money = _field(player_a, "prize_money") or 0
    b_money = _field(player_b, "prize_money") or 0

    if a_money == b_money:
        return {
            "leader_id": None,
            "leader_name": None,
            "amount": abs(a_money),
            "tied": True,
        }

    leader = player_a if a_money > b_money else player_b
    return {
        "leader_id": _field(leader, "id"),
        "leader_name": _field(leader, "name"),
        "amount": abs(max(a_money, b_money)),
        "tied": False,
    }
