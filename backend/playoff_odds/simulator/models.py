"""
Data models for the playoff odds simulator.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional


# Head-to-head record against one opponent: (wins, losses, ties)
H2HRecord = Tuple[int, int, int]
H2HDict = Dict[str, H2HRecord]

DEFAULT_NUM_WILDCARDS = 3


class InvalidLeagueError(ValueError):
    """Raised when league input is structurally invalid."""
    pass


def _pct(wins: float, losses: float, ties: float) -> float:
    total = wins + losses + ties
    if total == 0:
        return 0.0
    return (wins + 0.5 * ties) / total


def format_record(wins: int, losses: int, ties: int) -> str:
    if ties:
        return f"{wins}-{losses}-{ties}"
    return f"{wins}-{losses}"


@dataclass(frozen=True)
class TeamStanding:
    """Current standing of one franchise. Never mutated by the simulator."""

    franchise_id: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    division_wins: int = 0
    division_losses: int = 0
    division_ties: int = 0
    avg_points_for: float = 0.0
    name: Optional[str] = None
    head_to_head: Optional[H2HDict] = None
    opponent_points_for: Optional[float] = None

    @property
    def display_name(self) -> str:
        return self.name or self.franchise_id

    @property
    def record_str(self) -> str:
        return format_record(self.wins, self.losses, self.ties)

    @property
    def division_record_str(self) -> str:
        return format_record(self.division_wins, self.division_losses, self.division_ties)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def effective_wins(self) -> float:
        return self.wins + 0.5 * self.ties

    @property
    def win_pct(self) -> float:
        return _pct(self.wins, self.losses, self.ties)

    @property
    def division_win_pct(self) -> float:
        return _pct(self.division_wins, self.division_losses, self.division_ties)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "franchise_id": self.franchise_id,
            "name": self.display_name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "division_wins": self.division_wins,
            "division_losses": self.division_losses,
            "division_ties": self.division_ties,
            "avg_points_for": self.avg_points_for,
            "record": self.record_str,
            "division_record": self.division_record_str,
            "win_pct": self.win_pct,
            "division_win_pct": self.division_win_pct,
        }


@dataclass(frozen=True)
class RemainingGame:
    """One unplayed game on a team's schedule."""

    week: int
    opponent_id: str
    is_home: bool = False

    def to_dict(self) -> dict:
        return {"week": self.week, "opponent_id": self.opponent_id, "is_home": self.is_home}


@dataclass(frozen=True)
class TeamSchedule:
    """Remaining schedule for a single franchise."""

    franchise_id: str
    remaining_games: Tuple[RemainingGame, ...] = ()
    completed_games: int = 0
    total_games: int = 0

    @property
    def games_left(self) -> int:
        return len(self.remaining_games)

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "remaining_games": [g.to_dict() for g in self.remaining_games],
            "completed_games": self.completed_games,
            "total_games": self.total_games,
        }


@dataclass(frozen=True)
class DivisionAssignment:
    """Division membership: franchise id -> division id, division id -> name."""

    division_map: Dict[str, str]
    division_names: Dict[str, str]

    def division_of(self, franchise_id: str) -> Optional[str]:
        return self.division_map.get(franchise_id)

    def name_of(self, division_id: str) -> str:
        return self.division_names.get(division_id, f"Division {division_id}")

    def teams_in(self, division_id: str) -> List[str]:
        return [fid for fid, div in self.division_map.items() if div == division_id]

    def same_division(self, team1_id: str, team2_id: str) -> bool:
        div = self.division_map.get(team1_id)
        return div is not None and div == self.division_map.get(team2_id)

    @property
    def num_divisions(self) -> int:
        return len(self.division_names)


@dataclass(frozen=True)
class ScheduledGame:
    """A league-level pairing, discovered once regardless of which side listed it."""

    week: int
    team_a: str
    team_b: str

    @property
    def key(self) -> Tuple[int, str, str]:
        low, high = sorted((self.team_a, self.team_b))
        return (self.week, low, high)

    def involves(self, franchise_id: str) -> bool:
        return franchise_id in (self.team_a, self.team_b)


@dataclass
class SimulatedStanding:
    """
    Mutable working copy of a TeamStanding for a single rollout.

    Exposes the same attributes the tiebreaker resolver reads from a
    TeamStanding, so either can be ranked.
    """

    base: TeamStanding
    wins: int = 0
    losses: int = 0
    ties: int = 0
    division_wins: int = 0
    division_losses: int = 0
    division_ties: int = 0
    points_for_delta: float = 0.0
    points_against_delta: float = 0.0
    head_to_head: Optional[Dict[str, List[int]]] = None

    @classmethod
    def from_standing(cls, standing: TeamStanding) -> 'SimulatedStanding':
        h2h = None
        if standing.head_to_head is not None:
            h2h = {opp: list(rec) for opp, rec in standing.head_to_head.items()}
        return cls(
            base=standing,
            wins=standing.wins,
            losses=standing.losses,
            ties=standing.ties,
            division_wins=standing.division_wins,
            division_losses=standing.division_losses,
            division_ties=standing.division_ties,
            head_to_head=h2h
        )

    @property
    def franchise_id(self) -> str:
        return self.base.franchise_id

    @property
    def points_for(self) -> float:
        return self.base.points_for + self.points_for_delta

    @property
    def points_against(self) -> float:
        return self.base.points_against + self.points_against_delta

    @property
    def opponent_points_for(self) -> Optional[float]:
        return self.base.opponent_points_for

    @property
    def win_pct(self) -> float:
        return _pct(self.wins, self.losses, self.ties)

    @property
    def division_win_pct(self) -> float:
        return _pct(self.division_wins, self.division_losses, self.division_ties)

    def record_result(self, opponent_id: str, won: bool, points_for: float,
                      points_against: float, is_division_game: bool) -> None:
        """Apply one simulated game result."""
        if won:
            self.wins += 1
            if is_division_game:
                self.division_wins += 1
        else:
            self.losses += 1
            if is_division_game:
                self.division_losses += 1

        self.points_for_delta += points_for
        self.points_against_delta += points_against

        if self.head_to_head is not None:
            record = self.head_to_head.setdefault(opponent_id, [0, 0, 0])
            record[0 if won else 1] += 1


@dataclass(frozen=True)
class Seed:
    seed: int
    franchise_id: str
    is_division_winner: bool

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "franchise_id": self.franchise_id,
            "is_division_winner": self.is_division_winner
        }


@dataclass
class SeedAssignment:
    """Playoff field in seed order."""

    seeds: List[Seed] = field(default_factory=list)
    unresolved_ties: List[Tuple[str, str]] = field(default_factory=list)

    def seed_of(self, franchise_id: str) -> Optional[Seed]:
        for seed in self.seeds:
            if seed.franchise_id == franchise_id:
                return seed
        return None

    @property
    def franchise_ids(self) -> List[str]:
        return [s.franchise_id for s in self.seeds]

    @property
    def division_winners(self) -> List[str]:
        return [s.franchise_id for s in self.seeds if s.is_division_winner]

    def to_dict(self) -> dict:
        return {
            "seeds": [s.to_dict() for s in self.seeds],
            "unresolved_ties": [list(pair) for pair in self.unresolved_ties]
        }


@dataclass
class LeagueSettings:
    """Playoff format: N division winners + M wildcards."""

    num_wildcards: int = DEFAULT_NUM_WILDCARDS
    num_division_seeds: Optional[int] = None

    def division_seeds(self, divisions: DivisionAssignment) -> int:
        if self.num_division_seeds is None:
            return divisions.num_divisions
        return self.num_division_seeds

    def playoff_spots(self, divisions: DivisionAssignment) -> int:
        return self.division_seeds(divisions) + self.num_wildcards


@dataclass
class PlayoffProbabilities:
    """Monte Carlo counts for one team, with derived percentages."""

    franchise_id: str
    iterations: int
    playoff_count: int = 0
    division_win_count: int = 0
    wildcard_count: int = 0
    seed_counts: List[int] = field(default_factory=list)
    total_seed: int = 0
    unresolved_tie_iterations: int = 0

    def _pct(self, count: int) -> float:
        if self.iterations == 0:
            return 0.0
        return count / self.iterations * 100

    @property
    def playoff_probability(self) -> float:
        return self._pct(self.playoff_count)

    @property
    def division_win_probability(self) -> float:
        return self._pct(self.division_win_count)

    @property
    def wildcard_probability(self) -> float:
        return self._pct(self.wildcard_count)

    @property
    def seed_probabilities(self) -> List[float]:
        return [self._pct(c) for c in self.seed_counts]

    @property
    def average_seed(self) -> float:
        if self.playoff_count == 0:
            return 0.0
        return self.total_seed / self.playoff_count

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "iterations": self.iterations,
            "playoff_probability": self.playoff_probability,
            "division_win_probability": self.division_win_probability,
            "wildcard_probability": self.wildcard_probability,
            "seed_probabilities": self.seed_probabilities,
            "average_seed": self.average_seed,
        }


@dataclass
class EliminationResult:
    """Outcome of the deterministic elimination check."""

    franchise_id: str
    eliminated: bool
    reason: str = ""
    details: List[str] = field(default_factory=list)
    division_path_open: bool = True
    wildcard_path_open: bool = True
    teams_definitely_ahead: int = 0

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "eliminated": self.eliminated,
            "reason": self.reason,
            "details": list(self.details),
            "division_path_open": self.division_path_open,
            "wildcard_path_open": self.wildcard_path_open,
            "teams_definitely_ahead": self.teams_definitely_ahead
        }


@dataclass
class MagicNumbers:
    """Magic and elimination numbers for a team."""

    franchise_id: str
    magic_number: int
    elimination_number: int

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "magic_number": self.magic_number,
            "elimination_number": self.elimination_number
        }


@dataclass
class PlayoffProbabilityReport:
    """Per-team output combining simulation and deterministic analysis."""

    franchise_id: str
    playoff_probability: float
    division_win_probability: float
    wildcard_probability: float
    seed_probabilities: List[float]
    average_seed: float
    magic_number: int
    elimination_number: int
    is_eliminated: bool
    elimination_reason: str = ""
    elimination_details: List[str] = field(default_factory=list)
    clinch_scenarios: List[str] = field(default_factory=list)
    tiebreak_exhausted: bool = False

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "playoff_probability": self.playoff_probability,
            "division_win_probability": self.division_win_probability,
            "wildcard_probability": self.wildcard_probability,
            "seed_probabilities": list(self.seed_probabilities),
            "average_seed": self.average_seed,
            "magic_number": self.magic_number,
            "elimination_number": self.elimination_number,
            "is_eliminated": self.is_eliminated,
            "elimination_reason": self.elimination_reason,
            "elimination_details": list(self.elimination_details),
            "clinch_scenarios": list(self.clinch_scenarios),
            "tiebreak_exhausted": self.tiebreak_exhausted
        }


@dataclass
class LeagueSnapshot:
    """Everything needed to simulate a league at one point in the season."""

    standings: List[TeamStanding]
    schedules: List[TeamSchedule]
    divisions: DivisionAssignment
    settings: LeagueSettings = field(default_factory=LeagueSettings)
    current_week: int = 1
    league_id: Optional[str] = None
    league_name: Optional[str] = None

    def team(self, franchise_id: str) -> Optional[TeamStanding]:
        for standing in self.standings:
            if standing.franchise_id == franchise_id:
                return standing
        return None


def validate_league(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None
) -> None:
    """
    Reject structurally invalid league input before any simulation starts.

    Raises:
        InvalidLeagueError: On duplicate ids, missing or empty divisions,
            negative records or a mismatched division seed count.
    """
    settings = settings or LeagueSettings()

    seen = set()
    for team in standings:
        if team.franchise_id in seen:
            raise InvalidLeagueError(f"Duplicate franchise id in standings: {team.franchise_id}")
        seen.add(team.franchise_id)

        if min(team.wins, team.losses, team.ties) < 0:
            raise InvalidLeagueError(f"Negative record for franchise {team.franchise_id}")

        division_id = divisions.division_of(team.franchise_id)
        if division_id is None:
            raise InvalidLeagueError(f"Franchise {team.franchise_id} has no division assignment")
        if division_id not in divisions.division_names:
            raise InvalidLeagueError(
                f"Franchise {team.franchise_id} assigned to unknown division {division_id}"
            )

    members = defaultdict(int)
    for fid in seen:
        members[divisions.division_map[fid]] += 1
    for division_id in divisions.division_names:
        if members[division_id] == 0:
            raise InvalidLeagueError(f"Division {division_id} has no teams")

    scheduled = set()
    for schedule in schedules:
        if schedule.franchise_id in scheduled:
            raise InvalidLeagueError(f"Duplicate schedule for franchise {schedule.franchise_id}")
        scheduled.add(schedule.franchise_id)

    if settings.num_wildcards < 0:
        raise InvalidLeagueError("Number of wildcards cannot be negative")
    if settings.division_seeds(divisions) != divisions.num_divisions:
        raise InvalidLeagueError(
            f"Expected {divisions.num_divisions} division seeds, "
            f"got {settings.division_seeds(divisions)}"
        )
