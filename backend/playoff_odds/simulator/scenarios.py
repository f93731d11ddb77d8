"""
Clinch narratives, the playoff picture, and what-if scenarios.

The narratives turn simulated odds and magic numbers into short readable
lines. The what-if scenarios fix a team's remaining results (win out, lose
out, most likely, or user chosen) and rerun the simulation on the result.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.config import SCENARIO_ITERATIONS, SimulationConfig
from .elimination import check_elimination
from .engine import apply_outcome, collect_remaining_games, simulate
from .magic_numbers import UNREACHABLE, magic_number
from .models import (
    DivisionAssignment,
    InvalidLeagueError,
    LeagueSettings,
    PlayoffProbabilityReport,
    ScheduledGame,
    TeamSchedule,
    TeamStanding,
    format_record,
)
from .sampler import matchup_win_probability


logger = logging.getLogger(__name__)

CLINCHED_PCT = 99.9
ELIMINATED_PCT = 1.0

STATUS_CLINCHED = "clinched"
STATUS_LIKELY = "likely"
STATUS_BUBBLE = "bubble"
STATUS_ELIMINATED = "eliminated"


def _plural(n: int, word: str, plural: str) -> str:
    return word if n == 1 else plural


def generate_clinch_scenarios(
    playoff_probability: float,
    division_win_probability: float,
    magic: int,
    elimination: int,
    remaining_games: int
) -> List[str]:
    """
    Generate human-readable clinching lines for one team.

    Lines depend on which probability band the team sits in: clinched
    (99.9%+), very likely (80%+), likely (50%+), bubble (20%+), long shot
    (1%+) or eliminated.
    """
    scenarios = []

    if playoff_probability >= CLINCHED_PCT:
        if division_win_probability >= CLINCHED_PCT:
            scenarios.append("Clinched division title")
        else:
            scenarios.append("Clinched playoff spot")
        if remaining_games > 0:
            prefix = "division title and " if division_win_probability < CLINCHED_PCT else ""
            scenarios.append(f"Playing for {prefix}seeding")
        return scenarios

    if playoff_probability < ELIMINATED_PCT:
        scenarios.append("Eliminated from playoff contention")
        return scenarios

    if playoff_probability >= 80:
        if 0 < magic < UNREACHABLE:
            scenarios.append(
                f"Magic number: {magic} (win {magic} {_plural(magic, 'game', 'games')} to clinch)"
            )
        if division_win_probability >= 50:
            scenarios.append("Leading division race")
        wins_needed = math.ceil(remaining_games * 4 / 10)
        if wins_needed > 0:
            scenarios.append(f"Win {wins_needed} of next {remaining_games} games to secure spot")
        return scenarios

    if playoff_probability >= 50:
        wins_needed = math.ceil(remaining_games * 6 / 10)
        scenarios.append(f"Win {wins_needed} of {remaining_games} remaining games")
        if division_win_probability >= 30:
            scenarios.append("In division race - key games ahead")
        else:
            scenarios.append("Competing for wildcard spot")
        return scenarios

    if playoff_probability >= 20:
        wins_needed = math.ceil(remaining_games * 3 / 4)
        scenarios.append(f"Must win {wins_needed} of {remaining_games} remaining games")
        scenarios.append("Need help from other teams")
        if 0 < elimination < UNREACHABLE:
            scenarios.append(
                f"{elimination} {_plural(elimination, 'loss', 'losses')} eliminates"
            )
        return scenarios

    if remaining_games > 0:
        scenarios.append(f"Must win out ({remaining_games} games)")
        scenarios.append("Requires multiple upsets by other teams")
    if elimination == 1:
        scenarios.append("Any loss eliminates")
    return scenarios


def weekly_clinch_scenarios(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    week: int,
    settings: Optional[LeagueSettings] = None
) -> Tuple[List[str], List[str]]:
    """
    Clinch and elimination lines for one week's games.

    For each game that week, fixes each possible result and asks the
    deterministic checks whether the winner has now clinched or the loser is
    now eliminated. Teams already clinched or eliminated are skipped.

    Returns:
        Tuple of (clinch lines, elimination lines)
    """
    settings = settings or LeagueSettings()
    by_id = {t.franchise_id: t for t in standings}
    week_games = [g for g in collect_remaining_games(standings, schedules) if g.week == week]

    clinch_lines = []
    elimination_lines = []

    for game in week_games:
        for winner_id, loser_id in ((game.team_a, game.team_b), (game.team_b, game.team_a)):
            winner = by_id[winner_id]
            loser = by_id[loser_id]
            after_standings, after_schedules = apply_outcome(
                standings, schedules, divisions, [(game, winner_id)]
            )

            if magic_number(winner_id, standings, schedules, divisions, settings) > 0:
                if magic_number(winner_id, after_standings, after_schedules, divisions, settings) == 0:
                    clinch_lines.append(
                        f"{winner.display_name} clinches playoff spot with a WIN vs {loser.display_name}"
                    )

            if not check_elimination(loser_id, standings, schedules, divisions, settings).eliminated:
                if check_elimination(loser_id, after_standings, after_schedules, divisions, settings).eliminated:
                    elimination_lines.append(
                        f"{loser.display_name} eliminated from playoffs with a LOSS to {winner.display_name}"
                    )

    return clinch_lines, elimination_lines


@dataclass
class PictureEntry:
    """One row of the playoff picture."""

    rank: int
    franchise_id: str
    wins: int
    losses: int
    ties: int
    win_pct: float
    points_for: float
    playoff_probability: float
    status: str

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "franchise_id": self.franchise_id,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "win_pct": self.win_pct,
            "points_for": self.points_for,
            "playoff_probability": self.playoff_probability,
            "status": self.status
        }


@dataclass
class PlayoffPicture:
    """Current standings annotated with playoff odds."""

    standings: List[PictureEntry] = field(default_factory=list)
    division_leaders: List[str] = field(default_factory=list)
    wildcard_race: List[str] = field(default_factory=list)
    cutoff_probability: float = 0.0

    def to_dict(self) -> dict:
        return {
            "standings": [e.to_dict() for e in self.standings],
            "division_leaders": list(self.division_leaders),
            "wildcard_race": list(self.wildcard_race),
            "cutoff_probability": self.cutoff_probability
        }


def picture_status(playoff_probability: float) -> str:
    if playoff_probability >= 99:
        return STATUS_CLINCHED
    if playoff_probability >= 70:
        return STATUS_LIKELY
    if playoff_probability < 5:
        return STATUS_ELIMINATED
    return STATUS_BUBBLE


def get_playoff_picture(
    standings: List[TeamStanding],
    reports: List[PlayoffProbabilityReport],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None
) -> PlayoffPicture:
    """
    Build the playoff picture from standings and simulated odds.

    Teams are ranked by win percentage, then points for. The wildcard race
    lists the best non-leaders, twice as many as there are wildcard places,
    and the cutoff probability is the odds of the team holding the last
    playoff place today.
    """
    settings = settings or LeagueSettings()
    odds = {r.franchise_id: r.playoff_probability for r in reports}

    ranked = sorted(standings, key=lambda t: (-round(t.win_pct, 3), -t.points_for))
    entries = [
        PictureEntry(
            rank=i + 1,
            franchise_id=t.franchise_id,
            wins=t.wins,
            losses=t.losses,
            ties=t.ties,
            win_pct=t.win_pct,
            points_for=t.points_for,
            playoff_probability=odds.get(t.franchise_id, 0.0),
            status=picture_status(odds.get(t.franchise_id, 0.0))
        )
        for i, t in enumerate(ranked)
    ]

    leaders = []
    for division_id in divisions.division_names:
        for entry in entries:
            if divisions.division_of(entry.franchise_id) == division_id:
                leaders.append(entry.franchise_id)
                break

    wildcard_race = [
        e.franchise_id for e in entries if e.franchise_id not in leaders
    ][:settings.num_wildcards * 2]

    cutoff_index = settings.playoff_spots(divisions) - 1
    cutoff = entries[cutoff_index].playoff_probability if cutoff_index < len(entries) else 0.0

    return PlayoffPicture(
        standings=entries,
        division_leaders=leaders,
        wildcard_race=wildcard_race,
        cutoff_probability=cutoff
    )


@dataclass
class ScenarioResult:
    """A fixed set of results for one team and the odds that follow."""

    franchise_id: str
    record: str
    seed: int
    probability: float
    description: str
    playoff_probability: float

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "record": self.record,
            "seed": self.seed,
            "probability": self.probability,
            "description": self.description,
            "playoff_probability": self.playoff_probability
        }


def _team_games(franchise_id: str, standings: List[TeamStanding],
                schedules: List[TeamSchedule]) -> List[ScheduledGame]:
    if franchise_id not in {t.franchise_id for t in standings}:
        raise InvalidLeagueError(f"Unknown franchise: {franchise_id}")
    return [g for g in collect_remaining_games(standings, schedules) if g.involves(franchise_id)]


def _opponent(game: ScheduledGame, franchise_id: str) -> str:
    return game.team_b if game.team_a == franchise_id else game.team_a


def _run_scenario(
    franchise_id: str,
    wins: List[ScheduledGame],
    losses: List[ScheduledGame],
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings],
    config: Optional[SimulationConfig]
) -> Tuple[TeamStanding, float, int]:
    """Fix the given results, rerun the simulation, return (team, odds, seed)."""
    outcomes = [(g, franchise_id) for g in wins]
    outcomes += [(g, _opponent(g, franchise_id)) for g in losses]
    new_standings, new_schedules = apply_outcome(standings, schedules, divisions, outcomes)

    config = config or SimulationConfig(iterations=SCENARIO_ITERATIONS)
    results = simulate(new_standings, new_schedules, divisions, settings, config)
    odds = results[franchise_id]
    team = next(t for t in new_standings if t.franchise_id == franchise_id)
    return team, odds.playoff_probability, round(odds.average_seed)


def calculate_best_case_scenario(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None
) -> ScenarioResult:
    """Team wins every remaining game."""
    games = _team_games(franchise_id, standings, schedules)
    by_id = {t.franchise_id: t for t in standings}
    me = by_id[franchise_id]

    chance = 1.0
    for game in games:
        chance *= matchup_win_probability(me, by_id[_opponent(game, franchise_id)])

    team, odds, seed = _run_scenario(
        franchise_id, games, [], standings, schedules, divisions, settings, config
    )
    return ScenarioResult(
        franchise_id=franchise_id,
        record=team.record_str,
        seed=seed,
        probability=chance * 100,
        description=(f"Win out ({len(games)}-0) to finish {team.record_str}"
                     if games else "Season complete"),
        playoff_probability=odds
    )


def calculate_worst_case_scenario(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None
) -> ScenarioResult:
    """Team loses every remaining game."""
    games = _team_games(franchise_id, standings, schedules)
    by_id = {t.franchise_id: t for t in standings}
    me = by_id[franchise_id]

    chance = 1.0
    for game in games:
        chance *= 1 - matchup_win_probability(me, by_id[_opponent(game, franchise_id)])

    team, odds, seed = _run_scenario(
        franchise_id, [], games, standings, schedules, divisions, settings, config
    )
    return ScenarioResult(
        franchise_id=franchise_id,
        record=team.record_str,
        seed=seed,
        probability=chance * 100,
        description=(f"Lose out (0-{len(games)}) to finish {team.record_str}"
                     if games else "Season complete"),
        playoff_probability=odds
    )


def _exact_wins_probability(probabilities: List[float], k: int) -> float:
    """Chance of exactly k successes across independent games."""
    dist = [1.0]
    for p in probabilities:
        nxt = [0.0] * (len(dist) + 1)
        for wins, mass in enumerate(dist):
            nxt[wins] += mass * (1 - p)
            nxt[wins + 1] += mass * p
        dist = nxt
    return dist[k] if 0 <= k < len(dist) else 0.0


def calculate_most_likely_scenario(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None
) -> ScenarioResult:
    """
    Team wins its expected number of games (rounded), taking the games it is
    most likely to win.
    """
    games = _team_games(franchise_id, standings, schedules)
    by_id = {t.franchise_id: t for t in standings}
    me = by_id[franchise_id]

    chances = [matchup_win_probability(me, by_id[_opponent(g, franchise_id)]) for g in games]
    projected = round(sum(chances))

    ordered = sorted(zip(chances, games), key=lambda pair: (-pair[0], pair[1].key))
    wins = [g for _, g in ordered[:projected]]
    losses = [g for _, g in ordered[projected:]]

    team, odds, seed = _run_scenario(
        franchise_id, wins, losses, standings, schedules, divisions, settings, config
    )
    return ScenarioResult(
        franchise_id=franchise_id,
        record=team.record_str,
        seed=seed,
        probability=_exact_wins_probability(chances, projected) * 100,
        description=(f"Go {len(wins)}-{len(losses)} to finish {team.record_str}"
                     if games else "Season complete"),
        playoff_probability=odds
    )


def calculate_scenario_probability(
    franchise_id: str,
    game_results: Dict[int, Optional[str]],
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None
) -> ScenarioResult:
    """
    Playoff odds for user-chosen results.

    Args:
        franchise_id: Team the results belong to
        game_results: Week -> 'W', 'L' or None (None leaves the game to chance)

    Raises:
        ValueError: If a result is not 'W', 'L' or None
    """
    games = _team_games(franchise_id, standings, schedules)
    by_id = {t.franchise_id: t for t in standings}
    me = by_id[franchise_id]

    wins, losses = [], []
    chance = 1.0
    for game in games:
        result = game_results.get(game.week)
        if result is None:
            continue
        p = matchup_win_probability(me, by_id[_opponent(game, franchise_id)])
        if result == "W":
            wins.append(game)
            chance *= p
        elif result == "L":
            losses.append(game)
            chance *= 1 - p
        else:
            raise ValueError(f"Result for week {game.week} must be 'W', 'L' or None, got {result!r}")

    team, odds, seed = _run_scenario(
        franchise_id, wins, losses, standings, schedules, divisions, settings, config
    )
    logger.debug("Custom scenario for %s: %d-%d fixed, %.1f%% playoff odds",
                 franchise_id, len(wins), len(losses), odds)

    return ScenarioResult(
        franchise_id=franchise_id,
        record=team.record_str,
        seed=seed,
        probability=chance * 100,
        description=f"Go {format_record(len(wins), len(losses), 0)} in chosen games "
                    f"to stand at {team.record_str}",
        playoff_probability=odds
    )
