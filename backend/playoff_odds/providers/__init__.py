"""
Standings providers.

Provides a unified interface for getting league snapshots from different
sources.
"""

from typing import Optional

from .base import (
    StandingsProvider,
    LeagueNotFoundError,
    ProviderError
)
from .memory import InMemoryStandingsProvider
from .feed import FeedStandingsProvider
from ..core.config import FEED_BASE_URL


def get_provider(name: str, base_url: Optional[str] = None) -> StandingsProvider:
    """
    Get a standings provider by name.

    Args:
        name: Provider name ('memory' or 'feed')
        base_url: Feed root URL (defaults to PLAYOFF_FEED_URL)

    Returns:
        Provider instance

    Raises:
        ValueError: If the provider is not supported or the feed URL is missing
    """
    name_lower = name.lower()

    if name_lower == "memory":
        return InMemoryStandingsProvider()

    if name_lower == "feed":
        url = base_url or FEED_BASE_URL
        if not url:
            raise ValueError("A feed URL is required (set PLAYOFF_FEED_URL)")
        return FeedStandingsProvider(url)

    raise ValueError(f"Unsupported provider: {name}. Supported: memory, feed")


__all__ = [
    "StandingsProvider",
    "LeagueNotFoundError",
    "ProviderError",
    "InMemoryStandingsProvider",
    "FeedStandingsProvider",
    "get_provider",
]
