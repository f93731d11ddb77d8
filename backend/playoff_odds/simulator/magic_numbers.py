"""
Magic number calculations for clinching and elimination.

Magic number = additional wins that guarantee a playoff spot (0 if clinched).
Elimination number = additional losses that end playoff hopes (0 if
eliminated). Both are capped at the games a team has left. UNREACHABLE marks
the case that can no longer happen: a magic number for an eliminated team or
an elimination number for a clinched one. A team with no games left whose
fate rests on other results also gets UNREACHABLE for both.
"""

import math
from typing import Dict, List, Optional

from .elimination import TeamOutlook, build_outlooks, is_eliminated_with, wildcards_taken
from .models import (
    DivisionAssignment,
    InvalidLeagueError,
    LeagueSettings,
    MagicNumbers,
    TeamSchedule,
    TeamStanding,
)
from .tiebreakers import POINTS_EPSILON


UNREACHABLE = 99


def _wins_to_pass(team: TeamOutlook, rival: TeamOutlook, rival_max: float) -> int:
    """
    Additional wins `team` needs so `rival` cannot finish above it.

    If team's current points already beat anything the rival can score, a
    tie in wins is enough; otherwise it must finish strictly ahead.
    """
    gap = rival_max - team.current_wins
    owns_tiebreaker = team.current_points_for > rival.max_points_for + POINTS_EPSILON
    if owns_tiebreaker:
        return 0 if gap <= 0 else math.ceil(gap)
    return 0 if gap < 0 else math.ceil(gap + 0.001)


def _clinched_with(team: TeamOutlook, needed: Dict[str, int], outlooks: Dict[str, TeamOutlook],
                   num_wildcards: int, extra_wins: int) -> bool:
    """True if `extra_wins` more wins guarantee a division title or wildcard."""
    threats = [outlooks[fid] for fid, n in needed.items() if n > extra_wins]
    if not any(t.division_id == team.division_id for t in threats):
        return True
    return wildcards_taken(threats) < num_wildcards


def magic_number(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    outlooks: Optional[Dict[str, TeamOutlook]] = None
) -> int:
    """
    Wins still needed to guarantee a playoff spot.

    For each rival the requirement is max(0, rival max wins + 1 - our wins),
    dropping the +1 when our points already win the tiebreak. A rival we have
    not yet passed is a threat; the spot is guaranteed once no division
    rival is a threat, or once too few threats can land in the wildcard pool
    to fill it.

    If even winning out is not enough on these conservative assumptions,
    the answer is capped at the games remaining: the team must win out and
    still needs help.

    Returns:
        0 if clinched, UNREACHABLE if eliminated (or undecided with no games
        left), otherwise 1..games remaining
    """
    settings = settings or LeagueSettings()
    if outlooks is None:
        outlooks = build_outlooks(standings, schedules, divisions)
    if franchise_id not in outlooks:
        raise InvalidLeagueError(f"Unknown franchise: {franchise_id}")

    team = outlooks[franchise_id]
    if is_eliminated_with(team, outlooks, settings.num_wildcards, team.max_wins):
        return UNREACHABLE

    rivals = [o for fid, o in outlooks.items() if fid != franchise_id]
    needed = {r.franchise_id: _wins_to_pass(team, r, r.max_wins) for r in rivals}

    for extra in range(team.games_left + 1):
        if _clinched_with(team, needed, outlooks, settings.num_wildcards, extra):
            return extra

    if team.games_left == 0:
        return UNREACHABLE
    return team.games_left


def elimination_number(
    franchise_id: str,
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    outlooks: Optional[Dict[str, TeamOutlook]] = None,
    magic: Optional[int] = None
) -> int:
    """
    Additional losses that would eliminate the team, rivals frozen at their
    current records.

    Returns:
        0 if already eliminated, UNREACHABLE if clinched (or undecided with
        no games left), otherwise 1..games remaining. The cap applies even
        when losing out alone would not eliminate the team.
    """
    settings = settings or LeagueSettings()
    if outlooks is None:
        outlooks = build_outlooks(standings, schedules, divisions)
    if franchise_id not in outlooks:
        raise InvalidLeagueError(f"Unknown franchise: {franchise_id}")

    if magic is None:
        magic = magic_number(franchise_id, standings, schedules, divisions, settings, outlooks)
    if magic == 0:
        return UNREACHABLE

    team = outlooks[franchise_id]
    for losses in range(team.games_left + 1):
        if is_eliminated_with(team, outlooks, settings.num_wildcards, team.max_wins - losses):
            return losses

    if team.games_left == 0:
        return UNREACHABLE
    return team.games_left


def calculate_magic_numbers(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None
) -> Dict[str, MagicNumbers]:
    """
    Calculate magic and elimination numbers for every team.

    Returns:
        Dict mapping franchise id -> MagicNumbers
    """
    settings = settings or LeagueSettings()
    outlooks = build_outlooks(standings, schedules, divisions)

    results = {}
    for team in standings:
        fid = team.franchise_id
        magic = magic_number(fid, standings, schedules, divisions, settings, outlooks)
        results[fid] = MagicNumbers(
            franchise_id=fid,
            magic_number=magic,
            elimination_number=elimination_number(
                fid, standings, schedules, divisions, settings, outlooks, magic
            )
        )
    return results
