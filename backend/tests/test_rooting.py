"""
Tests for rooting interest analysis.
"""

from unittest.mock import patch

import pytest

from playoff_odds.simulator.models import InvalidLeagueError
from playoff_odds.simulator.rooting import (
    CERTAINTY_HIGH,
    CERTAINTY_LOW,
    CERTAINTY_MEDIUM,
    CONTEXT_DIVISION,
    CONTEXT_INDIRECT,
    CONTEXT_TIEBREAKER,
    CONTEXT_WILDCARD,
    IMPORTANCE_CRITICAL,
    IMPORTANCE_IMPORTANT,
    IMPORTANCE_MINOR,
    IMPORTANCE_MODERATE,
    MAX_TOP_MATCHUPS,
    analyze_rooting_interests,
    certainty_level,
    classify_context,
    classify_importance,
    explain,
    has_relevant_rooting_interests,
)


FAST = dict(iterations=60, baseline_iterations=60, seed=7)


@pytest.fixture
def analysis(small_league, small_settings):
    standings, schedules, divisions = small_league
    return analyze_rooting_interests("a", standings, schedules, divisions, 9,
                                     small_settings, **FAST)


class TestClassifiers:

    def test_importance_buckets(self):
        assert classify_importance(10.0) == IMPORTANCE_CRITICAL
        assert classify_importance(5.0) == IMPORTANCE_IMPORTANT
        assert classify_importance(2.0) == IMPORTANCE_MODERATE
        assert classify_importance(1.99) == IMPORTANCE_MINOR

    def test_context_prefers_division(self, small_league):
        _, _, divisions = small_league
        assert classify_context("a", "b", "e", 0.0, divisions) == CONTEXT_DIVISION
        assert classify_context("a", "d", "e", 3.0, divisions) == CONTEXT_WILDCARD
        assert classify_context("a", "d", "e", 1.0, divisions) == CONTEXT_TIEBREAKER
        assert classify_context("a", "d", "e", 0.5, divisions) == CONTEXT_INDIRECT

    def test_certainty_by_games_left(self):
        assert certainty_level(3) == CERTAINTY_HIGH
        assert certainty_level(5) == CERTAINTY_MEDIUM
        assert certainty_level(6) == CERTAINTY_LOW

    def test_relevance(self):
        assert has_relevant_rooting_interests(60.0, False) is True
        assert has_relevant_rooting_interests(99.5, False) is False
        assert has_relevant_rooting_interests(0.0, True) is False

    def test_explanations(self, small_league, team_factory):
        _, _, divisions = small_league
        target = team_factory("a", 5, 3)
        assert "division rival" in explain(target, team_factory("b", 4, 4), 3.0, divisions)
        assert "1 game ahead" in explain(target, team_factory("d", 6, 2), 3.0, divisions)
        assert "tied with you" in explain(target, team_factory("e", 5, 3), 3.0, divisions)
        assert explain(target, team_factory("f", 2, 6), 6.0, divisions) == \
            "Significantly impacts wildcard race"
        assert explain(target, team_factory("f", 2, 6), 1.0, divisions) == \
            "Indirectly affects playoff positioning"


class TestAnalyzeRootingInterests:

    def test_target_games_are_excluded(self, analysis):
        assert len(analysis.all_matchups) == 6
        for m in analysis.all_matchups:
            assert "a" not in (m.team_a.franchise_id, m.team_b.franchise_id)

    def test_earlier_weeks_are_ignored(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        result = analyze_rooting_interests("a", standings, schedules, divisions, 10,
                                           small_settings, **FAST)
        assert len(result.all_matchups) == 4
        assert all(m.week >= 10 for m in result.all_matchups)

    def test_root_for_side_is_the_better_outcome(self, analysis):
        for m in analysis.all_matchups:
            assert m.root_for in (m.team_a.franchise_id, m.team_b.franchise_id)
            assert m.if_root_for_wins >= m.if_root_for_loses
            assert m.swing == pytest.approx(m.if_root_for_wins - m.if_root_for_loses)
            assert m.importance == classify_importance(m.swing)

    def test_sorted_by_swing(self, analysis):
        swings = [m.swing for m in analysis.all_matchups]
        assert swings == sorted(swings, reverse=True)

    def test_top_matchups_are_important_ones(self, analysis):
        assert len(analysis.top_matchups) <= MAX_TOP_MATCHUPS
        for m in analysis.top_matchups:
            assert m.importance in (IMPORTANCE_CRITICAL, IMPORTANCE_IMPORTANT)

    def test_weekly_breakdown_covers_all_matchups(self, analysis):
        assert list(analysis.weekly_breakdown) == [9, 10, 11]
        assert sum(len(v) for v in analysis.weekly_breakdown.values()) == 6

    def test_division_games_are_division_race(self, analysis):
        game = next(m for m in analysis.all_matchups
                    if {m.team_a.franchise_id, m.team_b.franchise_id} == {"b", "e"})
        assert game.context == CONTEXT_DIVISION

    def test_certainty_and_baseline(self, analysis):
        assert analysis.certainty_level == CERTAINTY_HIGH
        assert 0.0 <= analysis.baseline_probability <= 100.0
        assert analysis.to_dict()["franchise_id"] == "a"

    def test_fixed_seed_repeats(self, small_league, small_settings, analysis):
        standings, schedules, divisions = small_league
        again = analyze_rooting_interests("a", standings, schedules, divisions, 9,
                                          small_settings, **FAST)
        assert again.to_dict() == analysis.to_dict()

    def test_pool_failure_falls_back(self, small_league, small_settings, analysis):
        standings, schedules, divisions = small_league
        with patch("playoff_odds.simulator.rooting.ProcessPoolExecutor",
                   side_effect=OSError("no processes")):
            result = analyze_rooting_interests("a", standings, schedules, divisions, 9,
                                               small_settings, max_workers=2, **FAST)
        assert result.to_dict() == analysis.to_dict()

    def test_progress_reaches_100(self, small_league, small_settings):
        standings, schedules, divisions = small_league
        seen = []
        analyze_rooting_interests("a", standings, schedules, divisions, 11, small_settings,
                                  progress_callback=seen.append, **FAST)
        assert seen[-1] == pytest.approx(100.0)

    def test_unknown_target_raises(self, small_league):
        standings, schedules, divisions = small_league
        with pytest.raises(InvalidLeagueError):
            analyze_rooting_interests("nobody", standings, schedules, divisions, 1, **FAST)
