"""
Async service facade over the simulator.

Fetches league snapshots from a StandingsProvider and runs the CPU-bound
simulation work in a worker thread so callers' event loops stay responsive.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from .api.schemas import (
    EliminationOut,
    PlayoffOddsResponse,
    PlayoffProbabilityOut,
    RootingAnalysisOut,
    ScenarioOut,
)
from .core.config import (
    ROOTING_BASELINE_ITERATIONS,
    ROOTING_ITERATIONS,
    ROOTING_MAX_WORKERS,
    SCENARIO_ITERATIONS,
    SimulationConfig,
)
from .providers import StandingsProvider
from .simulator import (
    analyze_rooting_interests,
    calculate_best_case_scenario,
    calculate_most_likely_scenario,
    calculate_worst_case_scenario,
    check_elimination,
    simulate_league,
    weekly_clinch_scenarios,
)


logger = logging.getLogger(__name__)


class PlayoffOddsService:
    """Playoff odds, elimination and rooting analysis for provider-backed leagues."""

    def __init__(self, provider: StandingsProvider, config: Optional[SimulationConfig] = None):
        self.provider = provider
        self.config = config or SimulationConfig.from_env()

    async def playoff_probabilities(
        self,
        league_id: str,
        progress_callback: Optional[Callable[[float], None]] = None
    ) -> PlayoffOddsResponse:
        """
        Simulate the rest of a league's season.

        Raises:
            LeagueNotFoundError: If the provider doesn't know the league
            ProviderError: If the provider can't supply valid data
            InvalidLeagueError: If the league structure is inconsistent
        """
        snapshot = await self.provider.fetch_snapshot(league_id)
        logger.info(
            "Running playoff odds for league %s (%s, week %d)",
            league_id, self.provider.provider_name, snapshot.current_week
        )

        reports = await asyncio.to_thread(
            simulate_league,
            snapshot.standings,
            snapshot.schedules,
            snapshot.divisions,
            snapshot.settings,
            self.config,
            progress_callback
        )
        clinch, elimination = await asyncio.to_thread(
            weekly_clinch_scenarios,
            snapshot.standings,
            snapshot.schedules,
            snapshot.divisions,
            snapshot.current_week,
            snapshot.settings
        )

        return PlayoffOddsResponse(
            league_id=snapshot.league_id,
            league_name=snapshot.league_name,
            current_week=snapshot.current_week,
            iterations=self.config.iterations,
            teams=[PlayoffProbabilityOut.model_validate(r) for r in reports],
            clinch_scenarios=clinch,
            elimination_scenarios=elimination
        )

    async def elimination_status(self, league_id: str, franchise_id: str) -> EliminationOut:
        """Deterministic elimination check for one team."""
        snapshot = await self.provider.fetch_snapshot(league_id)
        result = check_elimination(
            franchise_id,
            snapshot.standings,
            snapshot.schedules,
            snapshot.divisions,
            snapshot.settings
        )
        return EliminationOut.model_validate(result)

    async def rooting_interests(
        self,
        league_id: str,
        franchise_id: str,
        iterations: int = ROOTING_ITERATIONS,
        baseline_iterations: int = ROOTING_BASELINE_ITERATIONS,
        max_workers: int = ROOTING_MAX_WORKERS
    ) -> RootingAnalysisOut:
        """Which results in other teams' games help `franchise_id`."""
        snapshot = await self.provider.fetch_snapshot(league_id)
        analysis = await asyncio.to_thread(
            analyze_rooting_interests,
            franchise_id,
            snapshot.standings,
            snapshot.schedules,
            snapshot.divisions,
            snapshot.current_week,
            snapshot.settings,
            iterations,
            baseline_iterations,
            self.config.seed,
            max_workers
        )
        return RootingAnalysisOut.model_validate(analysis)

    async def scenarios(self, league_id: str, franchise_id: str) -> List[ScenarioOut]:
        """Best case, most likely and worst case outlooks for one team."""
        snapshot = await self.provider.fetch_snapshot(league_id)

        config = SimulationConfig(iterations=SCENARIO_ITERATIONS, workers=1, seed=self.config.seed)

        def _run():
            args = (franchise_id, snapshot.standings, snapshot.schedules,
                    snapshot.divisions, snapshot.settings, config)
            return [
                calculate_best_case_scenario(*args),
                calculate_most_likely_scenario(*args),
                calculate_worst_case_scenario(*args),
            ]

        results = await asyncio.to_thread(_run)
        return [ScenarioOut.model_validate(r) for r in results]
