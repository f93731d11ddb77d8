"""
Per-team playoff reports: simulated odds plus the deterministic verdicts.
"""

import logging
from typing import Callable, List, Optional

from ..core.config import SimulationConfig
from .elimination import build_outlooks, check_elimination, season_lengths
from .engine import simulate
from .magic_numbers import calculate_magic_numbers
from .models import (
    DivisionAssignment,
    LeagueSettings,
    PlayoffProbabilityReport,
    TeamSchedule,
    TeamStanding,
)
from .scenarios import generate_clinch_scenarios


logger = logging.getLogger(__name__)


def simulate_league(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None,
    progress_callback: Optional[Callable[[float], None]] = None
) -> List[PlayoffProbabilityReport]:
    """
    Simulate the rest of the season and build a report for every team.

    Args:
        standings: Current standings
        schedules: Remaining schedule per team
        divisions: Division membership
        settings: Playoff format
        config: Monte Carlo settings
        progress_callback: Optional callback receiving percent complete

    Returns:
        Reports sorted by playoff probability, highest first
    """
    settings = settings or LeagueSettings()

    odds = simulate(standings, schedules, divisions, settings, config,
                    progress_callback=progress_callback)
    numbers = calculate_magic_numbers(standings, schedules, divisions, settings)
    outlooks = build_outlooks(standings, schedules, divisions)

    lengths = season_lengths(standings, outlooks)
    if len(lengths) > 1:
        logger.warning(
            "Teams finish with different numbers of games (%s); elimination and magic "
            "numbers compare win totals and may be approximate",
            ", ".join(str(n) for n in sorted(lengths))
        )

    reports = []
    for team in standings:
        fid = team.franchise_id
        team_odds = odds[fid]
        elimination = check_elimination(fid, standings, schedules, divisions, settings, outlooks)
        magic = numbers[fid]

        if elimination.eliminated and team_odds.playoff_count > 0:
            logger.warning(
                "%s is eliminated but qualified in %d simulations",
                fid, team_odds.playoff_count
            )

        reports.append(PlayoffProbabilityReport(
            franchise_id=fid,
            playoff_probability=team_odds.playoff_probability,
            division_win_probability=team_odds.division_win_probability,
            wildcard_probability=team_odds.wildcard_probability,
            seed_probabilities=team_odds.seed_probabilities,
            average_seed=team_odds.average_seed,
            magic_number=magic.magic_number,
            elimination_number=magic.elimination_number,
            is_eliminated=elimination.eliminated,
            elimination_reason=elimination.reason,
            elimination_details=elimination.details,
            clinch_scenarios=generate_clinch_scenarios(
                team_odds.playoff_probability,
                team_odds.division_win_probability,
                magic.magic_number,
                magic.elimination_number,
                outlooks[fid].games_left
            ),
            tiebreak_exhausted=team_odds.unresolved_tie_iterations > 0
        ))

    reports.sort(key=lambda r: r.playoff_probability, reverse=True)
    return reports
