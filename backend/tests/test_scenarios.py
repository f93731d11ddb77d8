"""
Tests for clinch narratives, the playoff picture and what-if scenarios.
"""

import pytest

from playoff_odds.core.config import SimulationConfig
from playoff_odds.simulator.magic_numbers import UNREACHABLE
from playoff_odds.simulator.models import (
    InvalidLeagueError,
    LeagueSettings,
    PlayoffProbabilityReport,
)
from playoff_odds.simulator.scenarios import (
    STATUS_BUBBLE,
    STATUS_CLINCHED,
    STATUS_ELIMINATED,
    STATUS_LIKELY,
    calculate_best_case_scenario,
    calculate_most_likely_scenario,
    calculate_scenario_probability,
    calculate_worst_case_scenario,
    generate_clinch_scenarios,
    get_playoff_picture,
    picture_status,
    weekly_clinch_scenarios,
)


FAST = SimulationConfig(iterations=200, seed=11)


class TestClinchNarratives:

    def test_clinched_division(self):
        assert generate_clinch_scenarios(100.0, 100.0, 0, UNREACHABLE, 2) == [
            "Clinched division title", "Playing for seeding"
        ]

    def test_clinched_spot_still_playing_for_division(self):
        assert generate_clinch_scenarios(100.0, 60.0, 0, UNREACHABLE, 1) == [
            "Clinched playoff spot", "Playing for division title and seeding"
        ]

    def test_clinched_with_season_over(self):
        assert generate_clinch_scenarios(100.0, 0.0, 0, UNREACHABLE, 0) == ["Clinched playoff spot"]

    def test_eliminated(self):
        assert generate_clinch_scenarios(0.5, 0.0, UNREACHABLE, 0, 3) == [
            "Eliminated from playoff contention"
        ]

    def test_very_likely(self):
        lines = generate_clinch_scenarios(85.0, 55.0, 2, 4, 5)
        assert lines == [
            "Magic number: 2 (win 2 games to clinch)",
            "Leading division race",
            "Win 2 of next 5 games to secure spot",
        ]

    def test_magic_number_singular(self):
        assert generate_clinch_scenarios(90.0, 10.0, 1, 3, 2)[0] == \
            "Magic number: 1 (win 1 game to clinch)"

    def test_likely_wildcard(self):
        assert generate_clinch_scenarios(60.0, 10.0, 3, 2, 5) == [
            "Win 3 of 5 remaining games", "Competing for wildcard spot"
        ]

    def test_likely_division_race(self):
        assert generate_clinch_scenarios(60.0, 40.0, 3, 2, 4)[1] == "In division race - key games ahead"

    def test_bubble(self):
        assert generate_clinch_scenarios(30.0, 5.0, UNREACHABLE, 2, 4) == [
            "Must win 3 of 4 remaining games",
            "Need help from other teams",
            "2 losses eliminates",
        ]

    def test_long_shot(self):
        assert generate_clinch_scenarios(5.0, 0.0, UNREACHABLE, 1, 3) == [
            "Must win out (3 games)",
            "Requires multiple upsets by other teams",
            "Any loss eliminates",
        ]


class TestWeeklyClinchScenarios:

    def test_loss_eliminates_y(self, league_factory):
        # Y (div A) can still reach 9 wins and tie A1 on points; one loss ends it.
        teams = [
            ("A1", "A", 9, 3, 1000.0),
            ("Y", "A", 7, 5, 1300.0),
            ("B1", "B", 11, 1, 1300.0),
            ("B2", "B", 10, 2, 1300.0),
        ]
        games = [(13, "Y", "B1"), (14, "Y", "B2")]
        standings, schedules, divisions = league_factory(teams, games)
        settings = LeagueSettings(num_wildcards=1)

        clinches, eliminations = weekly_clinch_scenarios(
            standings, schedules, divisions, 13, settings
        )
        assert "Y eliminated from playoffs with a LOSS to B1" in eliminations
        assert all("B1 eliminated" not in line for line in eliminations)
        assert all(not line.startswith("B1 clinches") for line in clinches)

    def test_win_clinches(self, league_factory):
        teams = [
            ("A1", "A", 9, 3, 1200.0),
            ("A2", "A", 8, 4, 1000.0),
            ("B1", "B", 3, 9, 900.0),
            ("B2", "B", 2, 10, 900.0),
        ]
        games = [(13, "A1", "A2"), (14, "A1", "B1"), (14, "A2", "B2")]
        standings, schedules, divisions = league_factory(teams, games)
        settings = LeagueSettings(num_wildcards=0)

        clinches, _ = weekly_clinch_scenarios(standings, schedules, divisions, 13, settings)
        assert "A1 clinches playoff spot with a WIN vs A2" in clinches

    def test_other_weeks_ignored(self, clinch_league):
        standings, schedules, divisions = clinch_league
        assert weekly_clinch_scenarios(standings, schedules, divisions, 20) == ([], [])


def _report(fid, playoff):
    return PlayoffProbabilityReport(
        franchise_id=fid,
        playoff_probability=playoff,
        division_win_probability=0.0,
        wildcard_probability=playoff,
        seed_probabilities=[],
        average_seed=0.0,
        magic_number=UNREACHABLE,
        elimination_number=UNREACHABLE,
        is_eliminated=False
    )


class TestPlayoffPicture:

    def test_status_thresholds(self):
        assert picture_status(99.0) == STATUS_CLINCHED
        assert picture_status(70.0) == STATUS_LIKELY
        assert picture_status(40.0) == STATUS_BUBBLE
        assert picture_status(4.9) == STATUS_ELIMINATED

    def test_leaders_and_wildcard_race(self, small_league):
        standings, _, divisions = small_league
        reports = [_report("d", 99.5), _report("a", 80.0), _report("b", 45.0),
                   _report("e", 40.0), _report("c", 10.0), _report("f", 1.0)]
        picture = get_playoff_picture(standings, reports, divisions, LeagueSettings(num_wildcards=1))

        assert [e.franchise_id for e in picture.standings][:2] == ["d", "a"]
        assert [e.rank for e in picture.standings] == [1, 2, 3, 4, 5, 6]
        assert picture.division_leaders == ["a", "d"]
        # e and b are both 4-4; e has more points
        assert picture.wildcard_race == ["e", "b"]
        # three places: the 3rd ranked team holds the last one
        assert picture.cutoff_probability == 40.0
        assert picture.standings[0].status == STATUS_CLINCHED
        assert picture.standings[-1].status == STATUS_ELIMINATED

    def test_missing_odds_default_to_zero(self, small_league):
        standings, _, divisions = small_league
        picture = get_playoff_picture(standings, [], divisions)
        assert all(e.playoff_probability == 0.0 for e in picture.standings)


class TestWhatIfScenarios:

    def test_best_case_wins_out(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        result = calculate_best_case_scenario("b", standings, schedules, divisions,
                                              small_settings, FAST)
        assert result.record == "7-4"
        assert result.description == "Win out (3-0) to finish 7-4"
        assert 0.0 < result.probability < 100.0

    def test_worst_case_loses_out(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        result = calculate_worst_case_scenario("b", standings, schedules, divisions,
                                               small_settings, FAST)
        assert result.record == "4-7"
        assert result.description == "Lose out (0-3) to finish 4-7"

    def test_best_case_beats_worst_case(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        best = calculate_best_case_scenario("b", standings, schedules, divisions,
                                            small_settings, FAST)
        worst = calculate_worst_case_scenario("b", standings, schedules, divisions,
                                              small_settings, FAST)
        assert best.playoff_probability >= worst.playoff_probability

    def test_most_likely_uses_expected_wins(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        result = calculate_most_likely_scenario("d", standings, schedules, divisions,
                                                small_settings, FAST)
        wins = int(result.record.split("-")[0])
        assert 6 <= wins <= 9
        assert 0.0 < result.probability <= 100.0
        assert result.description.startswith("Go ")

    def test_custom_results(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        result = calculate_scenario_probability(
            "a", {9: "W", 10: "L", 11: None}, standings, schedules, divisions,
            small_settings, FAST
        )
        assert result.record == "6-4"
        assert result.description == "Go 1-1 in chosen games to stand at 6-4"

    def test_custom_result_must_be_w_or_l(self, small_league):
        standings, schedules, divisions = small_league
        with pytest.raises(ValueError):
            calculate_scenario_probability("a", {9: "T"}, standings, schedules, divisions,
                                           config=FAST)

    def test_season_complete(self, league_factory, small_tables):
        teams, _ = small_tables
        standings, schedules, divisions = league_factory(teams, [])
        result = calculate_best_case_scenario("a", standings, schedules, divisions,
                                              LeagueSettings(num_wildcards=2), FAST)
        assert result.description == "Season complete"
        assert result.probability == 100.0

    def test_unknown_team_raises(self, small_league):
        standings, schedules, divisions = small_league
        with pytest.raises(InvalidLeagueError):
            calculate_worst_case_scenario("nobody", standings, schedules, divisions)
