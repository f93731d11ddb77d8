"""
In-memory standings provider.

Holds raw league payloads (as they would arrive over the wire) and validates
them on every fetch.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from .base import StandingsProvider, LeagueNotFoundError, ProviderError
from ..api.schemas import LeagueSnapshotIn
from ..simulator.models import LeagueSnapshot


class InMemoryStandingsProvider(StandingsProvider):
    """Serves league snapshots from a dict of raw payloads."""

    def __init__(self, payloads: Optional[Dict[str, Dict[str, Any]]] = None):
        self._payloads: Dict[str, Dict[str, Any]] = dict(payloads or {})

    @property
    def provider_name(self) -> str:
        return "memory"

    def put(self, league_id: str, payload: Dict[str, Any]) -> None:
        """Store or replace the payload for a league."""
        self._payloads[league_id] = payload

    async def fetch_snapshot(self, league_id: str) -> LeagueSnapshot:
        payload = self._payloads.get(league_id)
        if payload is None:
            raise LeagueNotFoundError(f"League {league_id} not found")

        try:
            snapshot = LeagueSnapshotIn.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(f"Invalid league data for {league_id}: {e}")

        result = snapshot.to_domain()
        if result.league_id is None:
            result.league_id = league_id
        return result
