"""
Single-game outcome sampling and simulated score estimation.
"""

import random
from typing import Optional

from .models import TeamStanding


MIN_MATCHUP_PROBABILITY = 0.1
MAX_MATCHUP_PROBABILITY = 0.9
GAME_NOISE = 0.1
MIN_GAME_PROBABILITY = 0.05
MAX_GAME_PROBABILITY = 0.95


def recent_form_multiplier(team: TeamStanding) -> float:
    """Scale 0.8 - 1.2 from overall win percentage."""
    return 0.8 + team.win_pct * 0.4


def matchup_win_probability(team_a: TeamStanding, team_b: TeamStanding) -> float:
    """
    Probability that team_a beats team_b before per-game noise.

    Each side's strength is its average points scaled by recent form; the
    probability is team_a's share of the combined strength, kept between
    10% and 90% since no game is a lock.
    """
    avg_a = team_a.avg_points_for
    avg_b = team_b.avg_points_for
    if avg_a <= 0 and avg_b <= 0:
        return 0.5

    strength_a = max(avg_a, 0.0) * recent_form_multiplier(team_a)
    strength_b = max(avg_b, 0.0) * recent_form_multiplier(team_b)
    probability = strength_a / (strength_a + strength_b)

    return max(MIN_MATCHUP_PROBABILITY, min(MAX_MATCHUP_PROBABILITY, probability))


class ScoreEstimator:
    """
    Estimates points for simulated games.

    Points never decide a game; they only feed the points-for tiebreaker.
    """

    low = 0.9
    high = 1.1

    def estimate(self, avg_points: float, rng: random.Random) -> float:
        """Points for one simulated game: average scaled by U(0.9, 1.1)."""
        return avg_points * rng.uniform(self.low, self.high)

    def ceiling(self, avg_points: float, games: int) -> float:
        """Largest total estimate() can add over `games` games."""
        return max(avg_points, 0.0) * self.high * games

    def settled(self, avg_points: float, won: bool) -> float:
        """Points credited when a hypothetical result is fixed in place."""
        return avg_points * (self.high if won else self.low)


class OutcomeSampler:
    """Draws winners for remaining games."""

    def __init__(self, score_estimator: Optional[ScoreEstimator] = None):
        self.score_estimator = score_estimator or ScoreEstimator()

    def game_probability(self, team_a: TeamStanding, team_b: TeamStanding,
                         rng: random.Random) -> float:
        """Matchup probability with +/-10% noise, clamped to [0.05, 0.95]."""
        base = matchup_win_probability(team_a, team_b)
        noise = rng.uniform(-GAME_NOISE, GAME_NOISE)
        return max(MIN_GAME_PROBABILITY, min(MAX_GAME_PROBABILITY, base + noise))

    def simulate_game(self, team_a: TeamStanding, team_b: TeamStanding,
                      rng: random.Random) -> str:
        """Returns 'A' if team_a wins, 'B' otherwise."""
        probability = self.game_probability(team_a, team_b, rng)
        return "A" if rng.random() < probability else "B"


def expected_wins(team: TeamStanding, opponents: list) -> float:
    """Expected wins over a list of opponent standings, without noise."""
    return sum(matchup_win_probability(team, opp) for opp in opponents)
