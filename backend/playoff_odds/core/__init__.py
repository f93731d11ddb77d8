"""
Core configuration.
"""

from .config import SimulationConfig, NUM_WILDCARDS, FEED_BASE_URL

__all__ = [
    "SimulationConfig",
    "NUM_WILDCARDS",
    "FEED_BASE_URL",
]
