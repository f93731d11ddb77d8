"""
Tiebreaker resolution for playoff seeding.

Tiebreaker order:
1. Overall winning percentage (ties count as half a win)
2. Total points scored
3. Head-to-head record (skipped when either team has no head-to-head data)
4. Division winning percentage
5. Reverse order of opponent points scored (skipped when unknown)

Teams still level after step 5 are a true tie. That is extremely rare; it is
logged and the input order is kept, never broken arbitrarily.
"""

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Optional, Tuple

from .models import H2HRecord


logger = logging.getLogger(__name__)

PCT_EPSILON = 0.001
POINTS_EPSILON = 0.01


@dataclass(frozen=True)
class TiebreakerResult:
    winner: str
    loser: str
    reason: str
    step: int

    def to_dict(self) -> dict:
        return {"winner": self.winner, "loser": self.loser, "reason": self.reason, "step": self.step}


def get_h2h_record(team, opponent) -> Optional[H2HRecord]:
    """
    Head-to-head record for team vs opponent as (wins, losses, ties).

    Returns None when either side has no head-to-head map. When only the
    opponent's map mentions the pairing, it is mirrored.
    """
    if team.head_to_head is None or opponent.head_to_head is None:
        return None

    record = team.head_to_head.get(opponent.franchise_id)
    if record is not None:
        return (record[0], record[1], record[2])

    mirrored = opponent.head_to_head.get(team.franchise_id)
    if mirrored is not None:
        return (mirrored[1], mirrored[0], mirrored[2])

    return (0, 0, 0)


def _result(a, b, a_wins: bool, reason: str, step: int) -> TiebreakerResult:
    if a_wins:
        return TiebreakerResult(a.franchise_id, b.franchise_id, reason, step)
    return TiebreakerResult(b.franchise_id, a.franchise_id, reason, step)


def compare_teams(team_a, team_b) -> Optional[TiebreakerResult]:
    """
    Apply the tiebreaker cascade to two team records.

    Works on anything exposing franchise_id, win_pct, points_for,
    head_to_head, division_win_pct and opponent_points_for (TeamStanding or
    SimulatedStanding).

    Returns:
        The first rule that separates the teams, or None if every rule is
        exhausted.
    """
    # Step 1: overall winning percentage
    pct_a, pct_b = team_a.win_pct, team_b.win_pct
    if abs(pct_a - pct_b) > PCT_EPSILON:
        high, low = max(pct_a, pct_b), min(pct_a, pct_b)
        return _result(
            team_a, team_b, pct_a > pct_b,
            f"Better winning percentage ({high * 100:.1f}% vs {low * 100:.1f}%)", 1
        )

    # Step 2: total points scored
    pf_a, pf_b = team_a.points_for, team_b.points_for
    if abs(pf_a - pf_b) > POINTS_EPSILON:
        high, low = max(pf_a, pf_b), min(pf_a, pf_b)
        return _result(
            team_a, team_b, pf_a > pf_b,
            f"More total points ({high:.2f} vs {low:.2f})", 2
        )

    # Step 3: head-to-head
    h2h = get_h2h_record(team_a, team_b)
    if h2h is not None and h2h[0] != h2h[1]:
        wins, losses, ties = h2h
        a_wins = wins > losses
        best, worst = (wins, losses) if a_wins else (losses, wins)
        tie_str = f"-{ties}" if ties else ""
        return _result(team_a, team_b, a_wins, f"Won head-to-head ({best}-{worst}{tie_str})", 3)

    # Step 4: division winning percentage
    div_a, div_b = team_a.division_win_pct, team_b.division_win_pct
    if abs(div_a - div_b) > PCT_EPSILON:
        high, low = max(div_a, div_b), min(div_a, div_b)
        return _result(
            team_a, team_b, div_a > div_b,
            f"Better division record ({high * 100:.1f}% vs {low * 100:.1f}%)", 4
        )

    # Step 5: weaker opponents (lower opponent points) wins
    opp_a, opp_b = team_a.opponent_points_for, team_b.opponent_points_for
    if opp_a is not None and opp_b is not None and abs(opp_a - opp_b) > POINTS_EPSILON:
        low, high = min(opp_a, opp_b), max(opp_a, opp_b)
        return _result(
            team_a, team_b, opp_a < opp_b,
            f"Weaker opponents ({low:.2f} vs {high:.2f} opp pts)", 5
        )

    logger.debug(
        "Tiebreakers exhausted between %s and %s; keeping input order",
        team_a.franchise_id, team_b.franchise_id
    )
    return None


def sort_by_tiebreakers(
    teams: List,
    unresolved: Optional[List[Tuple[str, str]]] = None
) -> List:
    """
    Sort teams best to worst using the tiebreaker cascade as comparator.

    The sort is stable, so teams the cascade cannot separate keep their input
    order. If `unresolved` is given, every exhausted pairing the sort ran into
    is appended to it.
    """
    def _cmp(a, b) -> int:
        result = compare_teams(a, b)
        if result is None:
            if unresolved is not None:
                pair = (a.franchise_id, b.franchise_id)
                if pair not in unresolved and pair[::-1] not in unresolved:
                    unresolved.append(pair)
            return 0
        return -1 if result.winner == a.franchise_id else 1

    return sorted(teams, key=cmp_to_key(_cmp))


def explain_tiebreaker(team_a, team_b) -> str:
    """One-line explanation of how two teams are ordered."""
    result = compare_teams(team_a, team_b)
    if result is None:
        return "Teams are completely tied (extremely rare)"
    return f"{result.winner} beats {result.loser}: {result.reason}"
