"""
Playoff seeding: division winners first, then wildcards.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from .models import DivisionAssignment, InvalidLeagueError, Seed, SeedAssignment
from .tiebreakers import sort_by_tiebreakers


def determine_division_winners(
    records: List,
    divisions: DivisionAssignment,
    unresolved: Optional[List[Tuple[str, str]]] = None
) -> List[str]:
    """
    Find the winner of each division.

    A division with a single team crowns that team regardless of record.

    Returns:
        Division winner ids, in division id order
    """
    by_division: Dict[str, List] = defaultdict(list)
    for record in records:
        division_id = divisions.division_of(record.franchise_id)
        if division_id is None:
            raise InvalidLeagueError(f"Franchise {record.franchise_id} has no division assignment")
        by_division[division_id].append(record)

    winners = []
    for division_id, div_records in sorted(by_division.items()):
        ranked = sort_by_tiebreakers(div_records, unresolved)
        winners.append(ranked[0].franchise_id)

    return winners


def assign_seeds(
    records: List,
    divisions: DivisionAssignment,
    num_division_seeds: int,
    num_wildcards: int
) -> SeedAssignment:
    """
    Partition a league into division winners and wildcards and seed them.

    Args:
        records: Team records (TeamStanding or SimulatedStanding)
        divisions: Division membership
        num_division_seeds: Seeds reserved for division winners
        num_wildcards: Seeds available to the best non-winners

    Returns:
        SeedAssignment with winners at 1..num_division_seeds and wildcards after
    """
    unresolved: List[Tuple[str, str]] = []
    winner_ids = determine_division_winners(records, divisions, unresolved)

    if len(winner_ids) != num_division_seeds:
        raise InvalidLeagueError(
            f"League has {len(winner_ids)} division winners but "
            f"{num_division_seeds} division seeds"
        )

    winner_set = set(winner_ids)
    winners = [r for r in records if r.franchise_id in winner_set]
    pool = [r for r in records if r.franchise_id not in winner_set]

    assignment = SeedAssignment(unresolved_ties=unresolved)

    for record in sort_by_tiebreakers(winners, unresolved):
        assignment.seeds.append(Seed(
            seed=len(assignment.seeds) + 1,
            franchise_id=record.franchise_id,
            is_division_winner=True
        ))

    for record in sort_by_tiebreakers(pool, unresolved)[:num_wildcards]:
        assignment.seeds.append(Seed(
            seed=len(assignment.seeds) + 1,
            franchise_id=record.franchise_id,
            is_division_winner=False
        ))

    return assignment
