"""
Fantasy Playoff Odds Simulator

Monte Carlo simulation of the remaining season, deterministic elimination
and clinch checks, and rooting interest analysis.
"""

from .models import (
    TeamStanding,
    RemainingGame,
    TeamSchedule,
    DivisionAssignment,
    LeagueSettings,
    PlayoffProbabilities,
    EliminationResult,
    MagicNumbers,
    PlayoffProbabilityReport,
    InvalidLeagueError,
    H2HDict,
    validate_league,
)
from .tiebreakers import compare_teams, sort_by_tiebreakers, explain_tiebreaker, get_h2h_record
from .seeding import assign_seeds, determine_division_winners
from .sampler import OutcomeSampler, ScoreEstimator, matchup_win_probability, expected_wins
from .engine import simulate, rollout_once, collect_remaining_games, apply_outcome
from .elimination import check_elimination
from .magic_numbers import calculate_magic_numbers, magic_number, elimination_number, UNREACHABLE
from .reports import simulate_league
from .rooting import analyze_rooting_interests, has_relevant_rooting_interests, RootingAnalysis, RootingInterest
from .scenarios import (
    generate_clinch_scenarios,
    weekly_clinch_scenarios,
    get_playoff_picture,
    calculate_best_case_scenario,
    calculate_worst_case_scenario,
    calculate_most_likely_scenario,
    calculate_scenario_probability,
    ScenarioResult,
    PlayoffPicture,
)

__all__ = [
    # Models
    "TeamStanding",
    "RemainingGame",
    "TeamSchedule",
    "DivisionAssignment",
    "LeagueSettings",
    "PlayoffProbabilities",
    "EliminationResult",
    "MagicNumbers",
    "PlayoffProbabilityReport",
    "InvalidLeagueError",
    "H2HDict",
    "validate_league",
    # Tiebreakers
    "compare_teams",
    "sort_by_tiebreakers",
    "explain_tiebreaker",
    "get_h2h_record",
    # Seeding
    "assign_seeds",
    "determine_division_winners",
    # Sampling
    "OutcomeSampler",
    "ScoreEstimator",
    "matchup_win_probability",
    "expected_wins",
    # Engine
    "simulate",
    "rollout_once",
    "collect_remaining_games",
    "apply_outcome",
    # Elimination and magic numbers
    "check_elimination",
    "calculate_magic_numbers",
    "magic_number",
    "elimination_number",
    "UNREACHABLE",
    # Reports
    "simulate_league",
    # Rooting
    "analyze_rooting_interests",
    "has_relevant_rooting_interests",
    "RootingAnalysis",
    "RootingInterest",
    # Scenarios
    "generate_clinch_scenarios",
    "weekly_clinch_scenarios",
    "get_playoff_picture",
    "calculate_best_case_scenario",
    "calculate_worst_case_scenario",
    "calculate_most_likely_scenario",
    "calculate_scenario_probability",
    "ScenarioResult",
    "PlayoffPicture",
]
