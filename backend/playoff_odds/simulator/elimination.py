"""
Deterministic (no randomness) elimination checks.

A team is eliminated only when it can neither win its division nor finish
inside the wildcard places, even if it wins every remaining game.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from .engine import remaining_game_counts
from .models import (
    DivisionAssignment,
    EliminationResult,
    InvalidLeagueError,
    LeagueSettings,
    TeamSchedule,
    TeamStanding,
    format_record,
)
from .sampler import ScoreEstimator
from .tiebreakers import POINTS_EPSILON


@dataclass(frozen=True)
class TeamOutlook:
    """Best and current position of a team for deterministic comparisons."""

    franchise_id: str
    division_id: str
    current_wins: float
    max_wins: float
    current_points_for: float
    max_points_for: float
    games_left: int


def build_outlooks(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    estimator: Optional[ScoreEstimator] = None
) -> Dict[str, TeamOutlook]:
    """Current and best-case wins/points for every team."""
    estimator = estimator or ScoreEstimator()
    games_left = remaining_game_counts(standings, schedules)

    outlooks = {}
    for team in standings:
        left = games_left[team.franchise_id]
        outlooks[team.franchise_id] = TeamOutlook(
            franchise_id=team.franchise_id,
            division_id=divisions.division_of(team.franchise_id),
            current_wins=team.effective_wins,
            max_wins=team.effective_wins + left,
            current_points_for=team.points_for,
            max_points_for=team.points_for + estimator.ceiling(team.avg_points_for, left),
            games_left=left
        )
    return outlooks


def finishes_ahead(rival: TeamOutlook, wins: float, points_ceiling: float) -> bool:
    """
    True if `rival` is certain to finish above a team that ends on at most
    `wins` wins and `points_ceiling` points.

    Rival wins only go up, so its current total is its floor. Win totals
    stand in for win percentage, which holds only when every team finishes
    with the same number of games (see season_lengths).
    """
    if rival.current_wins > wins:
        return True
    return (rival.current_wins == wins
            and rival.current_points_for > points_ceiling + POINTS_EPSILON)


def season_lengths(standings: List[TeamStanding], outlooks: Dict[str, TeamOutlook]) -> Set[int]:
    """Distinct final game counts across the league."""
    return {t.games_played + outlooks[t.franchise_id].games_left for t in standings}


def wildcards_taken(ahead: List[TeamOutlook]) -> int:
    """
    How many of `ahead` must land in the wildcard pool.

    Within each division one of them may take the division title instead, so
    the best of each division is not counted.
    """
    per_division = defaultdict(int)
    for outlook in ahead:
        per_division[outlook.division_id] += 1
    return sum(max(0, count - 1) for count in per_division.values())


def _paths_closed(
    team: TeamOutlook,
    outlooks: Dict[str, TeamOutlook],
    num_wildcards: int,
    max_wins: float
):
    rivals = [o for fid, o in outlooks.items() if fid != team.franchise_id]
    division_rivals = [o for o in rivals if o.division_id == team.division_id]

    leader = None
    if division_rivals:
        leader = max(division_rivals, key=lambda o: (o.current_wins, o.current_points_for))

    division_closed = leader is not None and finishes_ahead(leader, max_wins, team.max_points_for)

    ranked = sorted(rivals, key=lambda o: (o.max_wins, o.max_points_for), reverse=True)
    ahead = [o for o in ranked if finishes_ahead(o, max_wins, team.max_points_for)]
    taken = wildcards_taken(ahead)
    wildcard_closed = taken >= num_wildcards

    return division_closed, wildcard_closed, leader, ahead, taken


def check_elimination(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    outlooks: Optional[Dict[str, TeamOutlook]] = None
) -> EliminationResult:
    """
    Deterministically check whether a team is mathematically eliminated.

    Args:
        franchise_id: Team to check
        standings: Current standings
        schedules: Remaining schedules
        divisions: Division membership
        settings: Playoff format
        outlooks: Precomputed outlooks (optional, saves rebuilding per team)

    Returns:
        EliminationResult with the verdict and a readable breakdown
    """
    settings = settings or LeagueSettings()
    by_id = {t.franchise_id: t for t in standings}
    if franchise_id not in by_id:
        raise InvalidLeagueError(f"Unknown franchise: {franchise_id}")

    if outlooks is None:
        outlooks = build_outlooks(standings, schedules, divisions)

    team = by_id[franchise_id]
    outlook = outlooks[franchise_id]
    best_wins = team.wins + outlook.games_left
    division_name = divisions.name_of(outlook.division_id)

    details = [
        f"Current record: {team.record_str}",
        f"Best possible record: {format_record(best_wins, team.losses, team.ties)}",
        f"Remaining games: {outlook.games_left}",
    ]

    division_closed, wildcard_closed, leader, ahead, taken = _paths_closed(
        outlook, outlooks, settings.num_wildcards, outlook.max_wins
    )

    if division_closed:
        if leader.current_wins > outlook.max_wins:
            details.append(
                f"Cannot catch division leader ({leader.current_wins:g} wins) - "
                f"finishes {leader.current_wins - outlook.max_wins:g} short at best"
            )
        else:
            details.append(
                f"Tied in max wins with division leader, but lose tiebreaker "
                f"(points for: {outlook.max_points_for:.1f} vs {leader.current_points_for:.1f})"
            )

    details.append(f"Division path: {'Eliminated' if division_closed else 'Still possible'}")
    details.append(f"Wildcard path: {'Eliminated' if wildcard_closed else 'Still possible'}")
    details.append(f"Teams definitely ahead: {len(ahead)} ({taken} certain to hold wildcard places)")

    eliminated = division_closed and wildcard_closed
    reason = ""
    if eliminated:
        reason = (
            f"Cannot win {division_name} (leader has {leader.current_wins:g}+ wins) and "
            f"{taken} teams are certain to finish ahead in the wildcard race "
            f"for {settings.num_wildcards} spots"
        )

    return EliminationResult(
        franchise_id=franchise_id,
        eliminated=eliminated,
        reason=reason,
        details=details,
        division_path_open=not division_closed,
        wildcard_path_open=not wildcard_closed,
        teams_definitely_ahead=len(ahead)
    )


def is_eliminated_with(
    outlook: TeamOutlook,
    outlooks: Dict[str, TeamOutlook],
    num_wildcards: int,
    max_wins: float
) -> bool:
    """Elimination verdict if the team could reach at most `max_wins`."""
    division_closed, wildcard_closed, _, _, _ = _paths_closed(
        outlook, outlooks, num_wildcards, max_wins
    )
    return division_closed and wildcard_closed
