"""
HTTP feed standings provider.

Fetches a league snapshot, already in the normalized JSON shape, from a
feed service: GET {base_url}/leagues/{league_id}/snapshot.
"""

import httpx
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .base import StandingsProvider, LeagueNotFoundError, ProviderError
from ..api.schemas import LeagueSnapshotIn
from ..simulator.models import LeagueSnapshot


class FeedStandingsProvider(StandingsProvider):
    """Reads league snapshots from a JSON feed."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the feed provider.

        Args:
            base_url: Feed root URL
            timeout: HTTP request timeout in seconds
            headers: Extra request headers (e.g. an API key)
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}
        self.transport = transport

    @property
    def provider_name(self) -> str:
        return "feed"

    async def _fetch_json(self, endpoint: str) -> Any:
        """
        Fetch JSON data from the feed.

        Raises:
            LeagueNotFoundError: If the resource doesn't exist
            ProviderError: If there's an HTTP or network error
        """
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self.headers, transport=self.transport
        ) as client:
            try:
                response = await client.get(url)

                if response.status_code == 404:
                    raise LeagueNotFoundError(f"Resource not found: {endpoint}")

                # Some feeds answer 200 with a null body for unknown leagues
                if response.status_code == 200 and response.text == "null":
                    raise LeagueNotFoundError(f"League not found: {endpoint}")

                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                raise ProviderError(f"Feed error: {e}")
            except httpx.RequestError as e:
                raise ProviderError(f"Network error: {e}")
            except ValueError as e:
                raise ProviderError(f"Feed returned invalid JSON: {e}")

    async def fetch_snapshot(self, league_id: str) -> LeagueSnapshot:
        payload = await self._fetch_json(f"/leagues/{league_id}/snapshot")

        try:
            snapshot = LeagueSnapshotIn.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(f"Invalid league data for {league_id}: {e}")

        result = snapshot.to_domain()
        if result.league_id is None:
            result.league_id = league_id
        return result
