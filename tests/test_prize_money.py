import pytest

from app.utils.prize_money import (
    MatchStats,
    calculate_individual_bonuses,
    calculate_match_prize_money,
    calculate_prize_money,
    is_jackpot_team,
    jackpot_settings,
)

EMPTY = MatchStats()


def both_sides(p1_stats, p2_stats, p1_score, p2_score, p1_team="Arsenal", p2_team="Liverpool"):
    p1 = calculate_prize_money(p1_stats, p2_stats, p1_team, p1_score, p2_score)
    p2 = calculate_prize_money(p2_stats, p1_stats, p2_team, p2_score, p1_score)
    return p1, p2


class TestBasicScenarios:
    @pytest.mark.parametrize("score", [0, 1, 3])
    def test_draw_without_bonuses_is_zero(self, score):
        assert both_sides(EMPTY, EMPTY, score, score) == (0, 0)

    def test_win_one_nil(self):
        # +1 goal difference, +2 win
        assert both_sides(EMPTY, EMPTY, 1, 0) == (3, -3)

    def test_win_three_nil(self):
        assert both_sides(EMPTY, EMPTY, 3, 0) == (5, -5)

    def test_player_two_wins_five_two(self):
        assert both_sides(EMPTY, EMPTY, 2, 5) == (-5, 5)


class TestIndividualBonuses:
    def test_hat_trick(self):
        stats = MatchStats(goals=3, hat_tricks=1)
        assert both_sides(stats, EMPTY, 3, 0) == (7, -7)

    def test_outside_box_goals(self):
        stats = MatchStats(goals=2, outside_box_goals=2)
        assert both_sides(stats, EMPTY, 2, 0) == (8, -8)

    def test_penalty_miss(self):
        stats = MatchStats(goals=1, penalties_missed=2)
        assert both_sides(stats, EMPTY, 1, 0) == (1, -1)

    def test_bonuses_on_both_sides(self):
        p1 = MatchStats(goals=2, header_goals=2)
        p2 = MatchStats(goals=1, red_cards=1)
        # 1 + 2 + 2 - (-1) = 6
        assert both_sides(p1, p2, 2, 1) == (6, -6)

    def test_draw_with_bonuses_on_both_sides(self):
        p1 = MatchStats(goals=2, header_goals=1)
        p2 = MatchStats(goals=2, header_goals=1)
        assert both_sides(p1, p2, 2, 2) == (0, 0)

    def test_negative_bonuses_can_outweigh_a_win(self):
        p1 = MatchStats(goals=1, penalties_missed=3, red_cards=2)
        p2 = MatchStats(outside_box_goals=0)
        # 1 + 2 - 5 = -2
        assert both_sides(p1, p2, 1, 0) == (-2, 2)


class TestIndividualBonusHelper:
    def test_empty_stats(self):
        assert calculate_individual_bonuses(EMPTY) == 0

    @pytest.mark.parametrize(
        "stats, expected",
        [
            (MatchStats(hat_tricks=2), 4),
            (MatchStats(outside_box_goals=3), 6),
            (MatchStats(header_goals=5), 5),
            (MatchStats(penalties_missed=2), -2),
            (MatchStats(red_cards=3), -3),
        ],
    )
    def test_each_event(self, stats, expected):
        assert calculate_individual_bonuses(stats) == expected

    def test_combination(self):
        stats = MatchStats(
            goals=5,
            hat_tricks=1,
            outside_box_goals=2,
            header_goals=1,
            penalties_missed=1,
            red_cards=0,
        )
        assert calculate_individual_bonuses(stats) == 6

    def test_goals_and_xg_do_not_count(self):
        assert calculate_individual_bonuses(MatchStats(goals=7, xg=3.5)) == 0

    def test_accepts_plain_dict(self):
        assert calculate_individual_bonuses({"hat_tricks": 1, "red_cards": 1}) == 1


class TestJackpotTeam:
    def test_jackpot_winner_doubles(self):
        p1, p2 = both_sides(EMPTY, EMPTY, 3, 0, p1_team="Sheffield United")
        assert (p1, p2) == (10, -5)
        # Documented quirk: one jackpot side breaks the zero-sum
        assert p1 + p2 == 5

    def test_jackpot_loser_doubles(self):
        p1, p2 = both_sides(EMPTY, EMPTY, 0, 3, p1_team="Sheffield United")
        assert (p1, p2) == (-10, 5)
        assert p1 + p2 == -5

    def test_jackpot_doubles_bonuses_too(self):
        stats = MatchStats(goals=3, hat_tricks=1)
        assert both_sides(stats, EMPTY, 3, 0, p1_team="Sheffield United") == (14, -7)

    def test_both_sides_jackpot_is_zero_sum(self):
        p1, p2 = both_sides(
            EMPTY, EMPTY, 2, 1, p1_team="Sheffield United", p2_team="sheffield united fc"
        )
        assert (p1, p2) == (6, -6)

    @pytest.mark.parametrize(
        "team",
        ["Sheffield United", "sheffield united", "SHEFFIELD UNITED", "Sheffield United FC"],
    )
    def test_case_insensitive_substring(self, team):
        assert is_jackpot_team(team)

    @pytest.mark.parametrize("team", ["Sheffield Wednesday", "Manchester United", ""])
    def test_other_teams_do_not_qualify(self, team):
        assert not is_jackpot_team(team)

    def test_sum_equals_undoubled_side_delta(self):
        p1_stats = MatchStats(goals=2, outside_box_goals=1)
        p2_stats = MatchStats(goals=1, red_cards=1)
        plain = calculate_prize_money(p1_stats, p2_stats, "Arsenal", 2, 1)
        p1, p2 = both_sides(p1_stats, p2_stats, 2, 1, p1_team="Sheffield United")
        assert p1 + p2 == plain

    def test_jackpot_can_be_disabled(self):
        money = calculate_prize_money(
            EMPTY, EMPTY, "Sheffield United", 3, 0, jackpot_team=None
        )
        assert money == 5

    def test_custom_jackpot_team_and_multiplier(self):
        money = calculate_prize_money(
            EMPTY, EMPTY, "Wrexham AFC", 1, 0, jackpot_team="wrexham", jackpot_multiplier=3
        )
        assert money == 9


class TestMatchPrizeMoney:
    def test_returns_home_and_away_deltas(self):
        home = MatchStats(goals=3, hat_tricks=1)
        assert calculate_match_prize_money(home, EMPTY, "Arsenal", "Chelsea", 3, 0) == (7, -7)

    def test_fractional_scores_pass_through(self):
        home, away = calculate_match_prize_money(EMPTY, EMPTY, "A", "B", 1.5, 0.5)
        assert home == pytest.approx(3.0)
        assert away == pytest.approx(-3.0)

    def test_jackpot_settings_from_config(self):
        assert jackpot_settings({"JACKPOT_ENABLED": False}) == {"jackpot_team": None}
        assert jackpot_settings(
            {"JACKPOT_ENABLED": True, "JACKPOT_TEAM": "wrexham", "JACKPOT_MULTIPLIER": 3}
        ) == {"jackpot_team": "wrexham", "jackpot_multiplier": 3}
