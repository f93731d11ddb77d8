"""
API module: pydantic schemas at the package boundary.
"""

from .schemas import (
    TeamStandingIn,
    RemainingGameIn,
    TeamScheduleIn,
    DivisionsIn,
    LeagueSnapshotIn,
    PlayoffProbabilityOut,
    PlayoffOddsResponse,
    EliminationOut,
    MatchupSideOut,
    RootingInterestOut,
    RootingAnalysisOut,
    ScenarioOut,
)

__all__ = [
    "TeamStandingIn",
    "RemainingGameIn",
    "TeamScheduleIn",
    "DivisionsIn",
    "LeagueSnapshotIn",
    "PlayoffProbabilityOut",
    "PlayoffOddsResponse",
    "EliminationOut",
    "MatchupSideOut",
    "RootingInterestOut",
    "RootingAnalysisOut",
    "ScenarioOut",
]
