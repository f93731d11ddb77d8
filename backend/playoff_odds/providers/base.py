"""
Abstract base class for standings providers.

A provider supplies the normalized league snapshot (standings, remaining
schedules, divisions) the simulator works from, whatever the upstream source.
"""

from abc import ABC, abstractmethod

from ..simulator.models import LeagueSnapshot


class StandingsProvider(ABC):
    """Abstract base class for league standings sources."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'memory', 'feed')."""
        pass

    @abstractmethod
    async def fetch_snapshot(self, league_id: str) -> LeagueSnapshot:
        """
        Fetch the current state of a league.

        Args:
            league_id: The league identifier

        Returns:
            LeagueSnapshot ready for simulation

        Raises:
            LeagueNotFoundError: If the league doesn't exist
            ProviderError: If the data can't be fetched or is malformed
        """
        pass


class LeagueNotFoundError(Exception):
    """Raised when a league cannot be found."""
    pass


class ProviderError(Exception):
    """Raised when league data can't be fetched or parsed."""
    pass
