"""
Simulation configuration.

Defaults come from environment variables so deployments can tune iteration
counts and parallelism without code changes.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


SIMULATION_ITERATIONS = _env_int("PLAYOFF_SIM_ITERATIONS", 10000)
SIMULATION_WORKERS = _env_int("PLAYOFF_SIM_WORKERS", 1)
SIMULATION_BATCH_SIZE = _env_int("PLAYOFF_SIM_BATCH_SIZE", 1000)
SIMULATION_SEED = _env_optional_int("PLAYOFF_SIM_SEED")

NUM_WILDCARDS = _env_int("PLAYOFF_NUM_WILDCARDS", 3)

FEED_BASE_URL = os.getenv("PLAYOFF_FEED_URL", "")

# Rooting analysis reruns the simulation twice per matchup, so it uses far
# fewer iterations per run.
ROOTING_ITERATIONS = _env_int("ROOTING_ITERATIONS", 500)
ROOTING_BASELINE_ITERATIONS = _env_int("ROOTING_BASELINE_ITERATIONS", 1000)
ROOTING_MAX_WORKERS = _env_int("ROOTING_MAX_WORKERS", 1)

# What-if scenarios rerun the simulation once per scenario.
SCENARIO_ITERATIONS = _env_int("SCENARIO_ITERATIONS", 1000)


@dataclass
class SimulationConfig:
    """Per-call Monte Carlo settings."""

    iterations: int = SIMULATION_ITERATIONS
    workers: int = SIMULATION_WORKERS
    batch_size: int = SIMULATION_BATCH_SIZE
    seed: Optional[int] = SIMULATION_SEED

    def __post_init__(self):
        if self.iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {self.iterations}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")

    @classmethod
    def from_env(cls) -> 'SimulationConfig':
        """Build a config from the current environment."""
        return cls(
            iterations=_env_int("PLAYOFF_SIM_ITERATIONS", 10000),
            workers=_env_int("PLAYOFF_SIM_WORKERS", 1),
            batch_size=_env_int("PLAYOFF_SIM_BATCH_SIZE", 1000),
            seed=_env_optional_int("PLAYOFF_SIM_SEED")
        )
