"""
Pydantic schemas for validating league input and shaping results.
"""

from typing import Optional, List, Dict, Tuple
from pydantic import BaseModel, Field, model_validator

from ..core.config import NUM_WILDCARDS
from ..simulator.models import (
    DivisionAssignment,
    LeagueSettings,
    LeagueSnapshot,
    RemainingGame,
    TeamSchedule,
    TeamStanding,
)


# ============== Input Schemas ==============

class TeamStandingIn(BaseModel):
    """Current standing of one franchise."""
    franchise_id: str = Field(..., min_length=1, max_length=50)
    name: Optional[str] = Field(None, max_length=255)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    ties: int = Field(default=0, ge=0)
    points_for: float = Field(default=0.0, ge=0)
    points_against: float = Field(default=0.0, ge=0)
    division_wins: int = Field(default=0, ge=0)
    division_losses: int = Field(default=0, ge=0)
    division_ties: int = Field(default=0, ge=0)
    avg_points_for: Optional[float] = Field(None, ge=0)  # Derived from points_for when omitted
    head_to_head: Optional[Dict[str, Tuple[int, int, int]]] = None
    opponent_points_for: Optional[float] = Field(None, ge=0)

    def to_domain(self) -> TeamStanding:
        avg = self.avg_points_for
        if avg is None:
            games = self.wins + self.losses + self.ties
            avg = self.points_for / games if games else 0.0

        return TeamStanding(
            franchise_id=self.franchise_id,
            name=self.name,
            wins=self.wins,
            losses=self.losses,
            ties=self.ties,
            points_for=self.points_for,
            points_against=self.points_against,
            division_wins=self.division_wins,
            division_losses=self.division_losses,
            division_ties=self.division_ties,
            avg_points_for=avg,
            head_to_head=dict(self.head_to_head) if self.head_to_head is not None else None,
            opponent_points_for=self.opponent_points_for
        )


class RemainingGameIn(BaseModel):
    """One unplayed game."""
    week: int = Field(..., ge=1)
    opponent_id: str = Field(..., min_length=1, max_length=50)
    is_home: bool = False


class TeamScheduleIn(BaseModel):
    """Remaining schedule for one franchise."""
    franchise_id: str = Field(..., min_length=1, max_length=50)
    remaining_games: List[RemainingGameIn] = Field(default_factory=list)
    completed_games: int = Field(default=0, ge=0)
    total_games: int = Field(default=0, ge=0)

    def to_domain(self) -> TeamSchedule:
        return TeamSchedule(
            franchise_id=self.franchise_id,
            remaining_games=tuple(
                RemainingGame(week=g.week, opponent_id=g.opponent_id, is_home=g.is_home)
                for g in self.remaining_games
            ),
            completed_games=self.completed_games,
            total_games=self.total_games
        )


class DivisionsIn(BaseModel):
    """Division membership."""
    division_map: Dict[str, str]  # franchise id -> division id
    division_names: Dict[str, str]  # division id -> display name

    def to_domain(self) -> DivisionAssignment:
        return DivisionAssignment(
            division_map=dict(self.division_map),
            division_names=dict(self.division_names)
        )


class LeagueSnapshotIn(BaseModel):
    """A league's standings, schedules and divisions at one point in time."""
    league_id: Optional[str] = Field(None, max_length=50)
    league_name: Optional[str] = Field(None, max_length=255)
    current_week: int = Field(default=1, ge=1)
    num_wildcards: int = Field(default=NUM_WILDCARDS, ge=0)
    standings: List[TeamStandingIn] = Field(..., min_length=1)
    schedules: List[TeamScheduleIn] = Field(default_factory=list)
    divisions: DivisionsIn

    @model_validator(mode="after")
    def check_league_structure(self) -> "LeagueSnapshotIn":
        ids = [t.franchise_id for t in self.standings]
        duplicates = sorted({fid for fid in ids if ids.count(fid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate franchise ids in standings: {', '.join(duplicates)}")

        unassigned = [fid for fid in ids if fid not in self.divisions.division_map]
        if unassigned:
            raise ValueError(f"Franchises without a division: {', '.join(unassigned)}")

        unknown = sorted({
            div for div in self.divisions.division_map.values()
            if div not in self.divisions.division_names
        })
        if unknown:
            raise ValueError(f"Unknown division ids: {', '.join(unknown)}")

        return self

    def to_domain(self) -> LeagueSnapshot:
        return LeagueSnapshot(
            standings=[t.to_domain() for t in self.standings],
            schedules=[s.to_domain() for s in self.schedules],
            divisions=self.divisions.to_domain(),
            settings=LeagueSettings(num_wildcards=self.num_wildcards),
            current_week=self.current_week,
            league_id=self.league_id,
            league_name=self.league_name
        )


# ============== Result Schemas ==============

class PlayoffProbabilityOut(BaseModel):
    """Simulated odds and deterministic verdicts for a single team."""
    franchise_id: str
    playoff_probability: float
    division_win_probability: float
    wildcard_probability: float
    seed_probabilities: List[float]
    average_seed: float
    magic_number: int
    elimination_number: int
    is_eliminated: bool
    elimination_reason: str
    elimination_details: List[str]
    clinch_scenarios: List[str]
    tiebreak_exhausted: bool

    class Config:
        from_attributes = True


class PlayoffOddsResponse(BaseModel):
    """Full playoff odds for a league."""
    league_id: Optional[str] = None
    league_name: Optional[str] = None
    current_week: int
    iterations: int
    teams: List[PlayoffProbabilityOut]
    clinch_scenarios: List[str]
    elimination_scenarios: List[str]


class EliminationOut(BaseModel):
    """Deterministic elimination check for a single team."""
    franchise_id: str
    eliminated: bool
    reason: str
    details: List[str]
    division_path_open: bool
    wildcard_path_open: bool
    teams_definitely_ahead: int

    class Config:
        from_attributes = True


class MatchupSideOut(BaseModel):
    franchise_id: str
    name: str
    current_record: str

    class Config:
        from_attributes = True


class RootingInterestOut(BaseModel):
    """How one game between other teams moves the target's odds."""
    week: int
    team_a: MatchupSideOut
    team_b: MatchupSideOut
    root_for: str
    importance: str  # critical, important, moderate, minor
    if_root_for_wins: float
    if_root_for_loses: float
    swing: float
    explanation: str
    context: str  # division-race, wildcard-race, tiebreaker, indirect

    class Config:
        from_attributes = True


class RootingAnalysisOut(BaseModel):
    """All rooting interests for one team."""
    franchise_id: str
    baseline_probability: float
    certainty_level: str  # high, medium, low
    top_matchups: List[RootingInterestOut]
    all_matchups: List[RootingInterestOut]
    weekly_breakdown: Dict[int, List[RootingInterestOut]]

    class Config:
        from_attributes = True


class ScenarioOut(BaseModel):
    """Odds under a fixed set of results for one team."""
    franchise_id: str
    record: str
    seed: int
    probability: float
    description: str
    playoff_probability: float

    class Config:
        from_attributes = True
