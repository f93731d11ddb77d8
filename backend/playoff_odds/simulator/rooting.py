"""
Rooting interest analysis.

For every remaining game the target team is not playing in, compares the
target's playoff odds if one side wins against the odds if the other side
wins, and ranks the games by how much that result moves the target.
"""

import logging
import random
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..core.config import (
    ROOTING_BASELINE_ITERATIONS,
    ROOTING_ITERATIONS,
    SimulationConfig,
)
from .engine import apply_outcome, collect_remaining_games, remaining_game_counts, simulate
from .models import (
    DivisionAssignment,
    InvalidLeagueError,
    LeagueSettings,
    ScheduledGame,
    TeamSchedule,
    TeamStanding,
)


logger = logging.getLogger(__name__)

IMPORTANCE_CRITICAL = "critical"
IMPORTANCE_IMPORTANT = "important"
IMPORTANCE_MODERATE = "moderate"
IMPORTANCE_MINOR = "minor"

CONTEXT_DIVISION = "division-race"
CONTEXT_WILDCARD = "wildcard-race"
CONTEXT_TIEBREAKER = "tiebreaker"
CONTEXT_INDIRECT = "indirect"

CERTAINTY_HIGH = "high"
CERTAINTY_MEDIUM = "medium"
CERTAINTY_LOW = "low"

MAX_TOP_MATCHUPS = 10


@dataclass
class MatchupSide:
    franchise_id: str
    name: str
    current_record: str

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "name": self.name,
            "current_record": self.current_record
        }


@dataclass
class RootingInterest:
    """How one game between two other teams moves the target's odds."""

    week: int
    team_a: MatchupSide
    team_b: MatchupSide
    root_for: str
    importance: str
    if_root_for_wins: float
    if_root_for_loses: float
    swing: float
    explanation: str
    context: str

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "team_a": self.team_a.to_dict(),
            "team_b": self.team_b.to_dict(),
            "root_for": self.root_for,
            "importance": self.importance,
            "impact": {
                "if_root_for_wins": self.if_root_for_wins,
                "if_root_for_loses": self.if_root_for_loses,
                "swing": self.swing
            },
            "explanation": self.explanation,
            "context": self.context
        }


@dataclass
class RootingAnalysis:
    """All rooting interests for one team."""

    franchise_id: str
    baseline_probability: float
    certainty_level: str
    top_matchups: List[RootingInterest] = field(default_factory=list)
    all_matchups: List[RootingInterest] = field(default_factory=list)
    weekly_breakdown: Dict[int, List[RootingInterest]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "baseline_probability": self.baseline_probability,
            "certainty_level": self.certainty_level,
            "top_matchups": [m.to_dict() for m in self.top_matchups],
            "all_matchups": [m.to_dict() for m in self.all_matchups],
            "weekly_breakdown": {
                week: [m.to_dict() for m in games]
                for week, games in self.weekly_breakdown.items()
            }
        }


def has_relevant_rooting_interests(playoff_probability: float, is_eliminated: bool) -> bool:
    """Other results only matter to a team that is neither clinched nor eliminated."""
    return not is_eliminated and playoff_probability < 99.0


def classify_importance(swing: float) -> str:
    if swing >= 10:
        return IMPORTANCE_CRITICAL
    if swing >= 5:
        return IMPORTANCE_IMPORTANT
    if swing >= 2:
        return IMPORTANCE_MODERATE
    return IMPORTANCE_MINOR


def classify_context(target_id: str, team_a: str, team_b: str, swing: float,
                     divisions: DivisionAssignment) -> str:
    if divisions.same_division(target_id, team_a) or divisions.same_division(target_id, team_b):
        return CONTEXT_DIVISION
    if swing >= 3:
        return CONTEXT_WILDCARD
    if swing >= 1:
        return CONTEXT_TIEBREAKER
    return CONTEXT_INDIRECT


def certainty_level(games_left: int) -> str:
    if games_left <= 3:
        return CERTAINTY_HIGH
    if games_left <= 5:
        return CERTAINTY_MEDIUM
    return CERTAINTY_LOW


def explain(target: TeamStanding, root_against: TeamStanding, swing: float,
            divisions: DivisionAssignment) -> str:
    """One-line reason to root against `root_against`."""
    name = root_against.display_name
    if divisions.same_division(target.franchise_id, root_against.franchise_id):
        return f"{name} is your division rival - need them to lose"

    gap = root_against.effective_wins - target.effective_wins
    if gap > 0:
        if gap == 1:
            return f"{name} is 1 game ahead - loss helps you catch them"
        return f"{name} is {gap:g} games ahead - need them to drop games"
    if gap == 0:
        return f"{name} is tied with you in standings - loss benefits tiebreaker"

    if swing >= 5:
        return "Significantly impacts wildcard race"
    return "Indirectly affects playoff positioning"


def _evaluate_matchup(
    target_id: str,
    game: ScheduledGame,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: LeagueSettings,
    iterations: int,
    seed: int
) -> Tuple[ScheduledGame, float, float]:
    """
    Target's playoff odds with team_a winning and with team_b winning.

    Module-level so it can run in a worker process. Both branches share one
    seed so the rest of the season is drawn from the same stream.
    """
    results = []
    for winner_id in (game.team_a, game.team_b):
        after_standings, after_schedules = apply_outcome(
            standings, schedules, divisions, [(game, winner_id)]
        )
        config = SimulationConfig(iterations=iterations, workers=1, seed=seed)
        odds = simulate(after_standings, after_schedules, divisions, settings, config)
        results.append(odds[target_id].playoff_probability)
    return game, results[0], results[1]


def analyze_rooting_interests(
    target_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    current_week: int,
    settings: Optional[LeagueSettings] = None,
    iterations: int = ROOTING_ITERATIONS,
    baseline_iterations: int = ROOTING_BASELINE_ITERATIONS,
    seed: Optional[int] = None,
    max_workers: int = 1,
    progress_callback: Optional[Callable[[float], None]] = None
) -> RootingAnalysis:
    """
    Work out which results in other teams' games help the target.

    Args:
        target_id: Team to analyze for
        standings: Current standings
        schedules: Remaining schedules
        divisions: Division membership
        current_week: Games before this week are ignored
        settings: Playoff format
        iterations: Simulations per hypothetical outcome
        baseline_iterations: Simulations for the unchanged league
        seed: Fixes every derived simulation seed
        max_workers: Process pool size for matchup evaluation
        progress_callback: Optional callback receiving percent complete

    Returns:
        RootingAnalysis with matchups ranked by swing
    """
    settings = settings or LeagueSettings()
    by_id = {t.franchise_id: t for t in standings}
    if target_id not in by_id:
        raise InvalidLeagueError(f"Unknown franchise: {target_id}")

    master = random.Random(seed)
    logger.info("Calculating rooting interests for %s", target_id)

    baseline_config = SimulationConfig(
        iterations=baseline_iterations, workers=1, seed=master.getrandbits(64)
    )
    baseline = simulate(standings, schedules, divisions, settings, baseline_config)
    baseline_probability = baseline[target_id].playoff_probability
    logger.debug("Baseline playoff probability for %s: %.1f%%", target_id, baseline_probability)

    games = [
        g for g in collect_remaining_games(standings, schedules)
        if g.week >= current_week and not g.involves(target_id)
    ]
    jobs = [(g, master.getrandbits(64)) for g in games]
    logger.info("Analyzing %d remaining matchups", len(jobs))

    evaluated = []
    done = 0

    def _on_result() -> None:
        nonlocal done
        done += 1
        if done % 20 == 0:
            logger.debug("Analyzed %d/%d matchups", done, len(jobs))
        if progress_callback:
            progress_callback(done / len(jobs) * 100)

    ran_parallel = False
    if max_workers > 1 and len(jobs) > 1:
        try:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    executor.submit(
                        _evaluate_matchup, target_id, game, standings, schedules,
                        divisions, settings, iterations, game_seed
                    )
                    for game, game_seed in jobs
                ]
                for future in as_completed(futures):
                    evaluated.append(future.result())
                    _on_result()
            ran_parallel = True
        except (RuntimeError, OSError) as e:
            logger.warning("Process pool unavailable (%s); analyzing sequentially", e)
            evaluated = []
            done = 0

    if not ran_parallel:
        for game, game_seed in jobs:
            evaluated.append(_evaluate_matchup(
                target_id, game, standings, schedules, divisions, settings, iterations, game_seed
            ))
            _on_result()

    target = by_id[target_id]
    interests = []
    for game, prob_a, prob_b in evaluated:
        team_a = by_id[game.team_a]
        team_b = by_id[game.team_b]
        swing = abs(prob_a - prob_b)
        a_preferred = prob_a > prob_b
        root_for, root_against = (team_a, team_b) if a_preferred else (team_b, team_a)

        interests.append(RootingInterest(
            week=game.week,
            team_a=MatchupSide(team_a.franchise_id, team_a.display_name, team_a.record_str),
            team_b=MatchupSide(team_b.franchise_id, team_b.display_name, team_b.record_str),
            root_for=root_for.franchise_id,
            importance=classify_importance(swing),
            if_root_for_wins=prob_a if a_preferred else prob_b,
            if_root_for_loses=prob_b if a_preferred else prob_a,
            swing=swing,
            explanation=explain(target, root_against, swing, divisions),
            context=classify_context(target_id, game.team_a, game.team_b, swing, divisions)
        ))

    interests.sort(key=lambda m: (-m.swing, m.week, m.team_a.franchise_id, m.team_b.franchise_id))

    weekly = defaultdict(list)
    for interest in interests:
        weekly[interest.week].append(interest)

    top = [
        m for m in interests if m.importance in (IMPORTANCE_CRITICAL, IMPORTANCE_IMPORTANT)
    ][:MAX_TOP_MATCHUPS]

    games_left = remaining_game_counts(standings, schedules)[target_id]

    logger.info(
        "Rooting analysis complete: %d critical/important of %d matchups",
        len(top), len(interests)
    )

    return RootingAnalysis(
        franchise_id=target_id,
        baseline_probability=baseline_probability,
        certainty_level=certainty_level(games_left),
        top_matchups=top,
        all_matchups=interests,
        weekly_breakdown=dict(sorted(weekly.items()))
    )
