"""
Shared fixtures: small leagues built from compact team and game tables.
"""

import random

import pytest

from playoff_odds.simulator.models import (
    DivisionAssignment,
    LeagueSettings,
    RemainingGame,
    TeamSchedule,
    TeamStanding,
)


def make_team(fid, wins, losses, ties=0, points_for=None, division_wins=0,
              division_losses=0, head_to_head=None, opponent_points_for=None, name=None):
    """TeamStanding with a plausible points total when none is given."""
    games = wins + losses + ties
    if points_for is None:
        points_for = 100.0 * games + 5.0 * wins
    return TeamStanding(
        franchise_id=fid,
        name=name,
        wins=wins,
        losses=losses,
        ties=ties,
        points_for=points_for,
        points_against=100.0 * games,
        division_wins=division_wins,
        division_losses=division_losses,
        avg_points_for=points_for / games if games else 0.0,
        head_to_head=head_to_head,
        opponent_points_for=opponent_points_for
    )


def build_league(teams, games, division_names=None, both_sides=True):
    """
    Build (standings, schedules, divisions).

    Args:
        teams: (fid, division_id, wins, losses, points_for or None) rows
        games: (week, team_a, team_b) rows
        both_sides: List each game on both teams' schedules
    """
    standings = [make_team(fid, w, l, points_for=pf) for fid, _, w, l, pf in teams]
    division_map = {fid: div for fid, div, _, _, _ in teams}
    if division_names is None:
        division_names = {div: f"Division {div}" for div in sorted(set(division_map.values()))}

    remaining = {fid: [] for fid, _, _, _, _ in teams}
    for week, a, b in games:
        remaining[a].append(RemainingGame(week=week, opponent_id=b, is_home=True))
        if both_sides:
            remaining[b].append(RemainingGame(week=week, opponent_id=a))

    schedules = []
    for team in standings:
        games_left = remaining[team.franchise_id]
        schedules.append(TeamSchedule(
            franchise_id=team.franchise_id,
            remaining_games=tuple(games_left),
            completed_games=team.games_played,
            total_games=team.games_played + len(games_left)
        ))

    return standings, schedules, DivisionAssignment(division_map, division_names)


# Three divisions of four, two games left. X is 10-2 and has outscored
# everyone by more than they can make up; nobody else can pass 10 wins.
CLINCH_TEAMS = [
    ("X", "A", 10, 2, 1500.0),
    ("A2", "A", 8, 4, 1000.0),
    ("A3", "A", 4, 8, 900.0),
    ("A4", "A", 3, 9, 850.0),
    ("B1", "B", 8, 4, 1100.0),
    ("B2", "B", 7, 5, 1050.0),
    ("B3", "B", 5, 7, 950.0),
    ("B4", "B", 4, 8, 900.0),
    ("C1", "C", 8, 4, 1080.0),
    ("C2", "C", 6, 6, 1000.0),
    ("C3", "C", 5, 7, 980.0),
    ("C4", "C", 2, 10, 800.0),
]

LATE_SEASON_GAMES = [
    (13, "X", "A2"), (13, "A3", "A4"), (13, "B1", "B2"),
    (13, "B3", "B4"), (13, "C1", "C2"), (13, "C3", "C4"),
    (14, "X", "A3"), (14, "A2", "A4"), (14, "B1", "B3"),
    (14, "B2", "B4"), (14, "C1", "C3"), (14, "C2", "C4"),
]

# Y is 2-10 with two left; nine teams already have more wins than Y can
# reach, at least two of them outside each division's lead.
ELIMINATION_TEAMS = [
    ("A1", "A", 9, 3, None),
    ("A2", "A", 8, 4, None),
    ("A3", "A", 7, 5, None),
    ("Y", "A", 2, 10, None),
    ("B1", "B", 10, 2, None),
    ("B2", "B", 9, 3, None),
    ("B3", "B", 6, 6, None),
    ("B4", "B", 3, 9, None),
    ("C1", "C", 11, 1, None),
    ("C2", "C", 7, 5, None),
    ("C3", "C", 5, 7, None),
    ("C4", "C", 1, 11, None),
]

ELIMINATION_GAMES = [
    (13, "Y", "C4"), (13, "A1", "A2"), (13, "B1", "B2"),
    (14, "Y", "B4"), (14, "A3", "C2"), (14, "B3", "C3"),
]

# Two divisions of three, three games left each, two wildcards.
SMALL_TEAMS = [
    ("a", "east", 5, 3, 880.0),
    ("b", "east", 4, 4, 840.0),
    ("c", "east", 3, 5, 790.0),
    ("d", "west", 6, 2, 910.0),
    ("e", "west", 4, 4, 850.0),
    ("f", "west", 2, 6, 760.0),
]

SMALL_GAMES = [
    (9, "a", "b"), (9, "c", "d"), (9, "e", "f"),
    (10, "a", "c"), (10, "b", "e"), (10, "d", "f"),
    (11, "a", "d"), (11, "b", "f"), (11, "c", "e"),
]


@pytest.fixture
def clinch_league():
    return build_league(CLINCH_TEAMS, LATE_SEASON_GAMES)


@pytest.fixture
def elimination_league():
    return build_league(ELIMINATION_TEAMS, ELIMINATION_GAMES)


@pytest.fixture
def small_league():
    return build_league(SMALL_TEAMS, SMALL_GAMES)


@pytest.fixture
def small_settings():
    return LeagueSettings(num_wildcards=2)


@pytest.fixture
def team_factory():
    return make_team


@pytest.fixture
def league_factory():
    return build_league


@pytest.fixture
def small_tables():
    return SMALL_TEAMS, SMALL_GAMES


@pytest.fixture
def league_payload():
    """The small league as a raw JSON-style payload."""
    standings, schedules, divisions = build_league(SMALL_TEAMS, SMALL_GAMES)
    return {
        "league_id": "L1",
        "league_name": "Test League",
        "current_week": 9,
        "num_wildcards": 2,
        "standings": [
            {
                "franchise_id": t.franchise_id,
                "wins": t.wins,
                "losses": t.losses,
                "points_for": t.points_for,
            }
            for t in standings
        ],
        "schedules": [s.to_dict() for s in schedules],
        "divisions": {
            "division_map": dict(divisions.division_map),
            "division_names": dict(divisions.division_names),
        },
    }


def random_late_season(seed):
    """Twelve teams in three divisions, equal-length seasons, one or two weeks left."""
    rng = random.Random(seed)
    ids = [f"t{i}" for i in range(12)]
    played = 12
    teams = []
    for i, fid in enumerate(ids):
        wins = rng.randint(0, played)
        teams.append((fid, "ABC"[i % 3], wins, played - wins, round(rng.uniform(1000, 1400), 1)))

    games = []
    weeks_left = rng.choice([1, 2])
    for week in range(13, 13 + weeks_left):
        order = ids[:]
        rng.shuffle(order)
        games.extend((week, order[j], order[j + 1]) for j in range(0, 12, 2))

    return build_league(teams, games)


@pytest.fixture
def late_season_factory():
    return random_late_season
