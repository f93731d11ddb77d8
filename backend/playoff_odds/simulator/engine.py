"""
Monte Carlo simulation engine for playoff probability calculations.
"""

import logging
import random
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from ..core.config import SimulationConfig
from .models import (
    DivisionAssignment,
    LeagueSettings,
    PlayoffProbabilities,
    ScheduledGame,
    SeedAssignment,
    SimulatedStanding,
    TeamSchedule,
    TeamStanding,
    validate_league,
)
from .sampler import OutcomeSampler, ScoreEstimator
from .seeding import assign_seeds


logger = logging.getLogger(__name__)

# Per-team tally layout inside a batch: [playoff, division, wildcard, seed_total, unresolved, *seeds]
_PLAYOFF, _DIVISION, _WILDCARD, _SEED_TOTAL, _UNRESOLVED, _SEEDS = range(6)


def collect_remaining_games(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule]
) -> List[ScheduledGame]:
    """
    Flatten per-team schedules into unique league games.

    A game listed by both participants is kept once, keyed by week and the
    sorted pair of ids. Games that reference a franchise missing from the
    standings are skipped with a warning.
    """
    known = {t.franchise_id for t in standings}
    games: Dict[Tuple[int, str, str], ScheduledGame] = {}
    skipped = 0

    for schedule in schedules:
        for game in schedule.remaining_games:
            if schedule.franchise_id not in known or game.opponent_id not in known:
                skipped += 1
                logger.warning(
                    "Skipping week %s game %s vs %s: franchise missing from standings",
                    game.week, schedule.franchise_id, game.opponent_id
                )
                continue
            if game.opponent_id == schedule.franchise_id:
                logger.warning(
                    "Skipping week %s game: %s scheduled against itself",
                    game.week, schedule.franchise_id
                )
                continue

            scheduled = ScheduledGame(game.week, schedule.franchise_id, game.opponent_id)
            games.setdefault(scheduled.key, scheduled)

    if skipped:
        logger.warning("Skipped %d scheduled games with unknown franchises", skipped)

    return sorted(games.values(), key=lambda g: g.key)


def remaining_game_counts(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule]
) -> Dict[str, int]:
    """Remaining (deduplicated) games per franchise."""
    counts = {t.franchise_id: 0 for t in standings}
    for game in collect_remaining_games(standings, schedules):
        counts[game.team_a] += 1
        counts[game.team_b] += 1
    return counts


def apply_outcome(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    outcomes: List[Tuple[ScheduledGame, str]],
    estimator: Optional[ScoreEstimator] = None
) -> Tuple[List[TeamStanding], List[TeamSchedule]]:
    """
    Fix the result of specific games and return the updated league.

    Each winner gets a win and each loser a loss; points are settled with the
    estimator, division and head-to-head records follow, and the game leaves
    both teams' schedules. The inputs are not modified.

    Args:
        standings: Current standings
        schedules: Remaining schedules
        divisions: Division membership
        outcomes: (game, winner id) pairs
        estimator: Score estimator used to credit points

    Returns:
        Tuple of (new standings, new schedules)
    """
    estimator = estimator or ScoreEstimator()
    teams = {t.franchise_id: t for t in standings}
    settled_games = defaultdict(set)

    for game, winner_id in outcomes:
        if not game.involves(winner_id):
            raise ValueError(f"{winner_id} did not play in week {game.week} game {game.key}")
        loser_id = game.team_b if winner_id == game.team_a else game.team_a
        winner = teams[winner_id]
        loser = teams[loser_id]
        winner_points = estimator.settled(winner.avg_points_for, True)
        loser_points = estimator.settled(loser.avg_points_for, False)
        is_division_game = divisions.same_division(winner_id, loser_id)

        teams[winner_id] = _settle(winner, loser_id, True, winner_points, loser_points, is_division_game)
        teams[loser_id] = _settle(loser, winner_id, False, loser_points, winner_points, is_division_game)

        settled_games[winner_id].add((game.week, loser_id))
        settled_games[loser_id].add((game.week, winner_id))

    new_schedules = []
    for schedule in schedules:
        done = settled_games.get(schedule.franchise_id)
        if not done:
            new_schedules.append(schedule)
            continue
        kept = tuple(g for g in schedule.remaining_games if (g.week, g.opponent_id) not in done)
        new_schedules.append(replace(
            schedule,
            remaining_games=kept,
            completed_games=schedule.completed_games + len(schedule.remaining_games) - len(kept)
        ))

    return [teams[t.franchise_id] for t in standings], new_schedules


def _settle(team: TeamStanding, opponent_id: str, won: bool, points_for: float,
            points_against: float, is_division_game: bool) -> TeamStanding:
    wins = team.wins + (1 if won else 0)
    losses = team.losses + (0 if won else 1)
    total_points = team.points_for + points_for
    games = wins + losses + team.ties

    h2h = team.head_to_head
    if h2h is not None:
        h2h = dict(h2h)
        record = list(h2h.get(opponent_id, (0, 0, 0)))
        record[0 if won else 1] += 1
        h2h[opponent_id] = tuple(record)

    return replace(
        team,
        wins=wins,
        losses=losses,
        points_for=total_points,
        points_against=team.points_against + points_against,
        division_wins=team.division_wins + (1 if won and is_division_game else 0),
        division_losses=team.division_losses + (1 if not won and is_division_game else 0),
        avg_points_for=total_points / games,
        head_to_head=h2h
    )


def rollout_once(
    standings: List[TeamStanding],
    games: List[ScheduledGame],
    divisions: DivisionAssignment,
    settings: LeagueSettings,
    rng: random.Random,
    sampler: Optional[OutcomeSampler] = None
) -> SeedAssignment:
    """
    Play out every remaining game once and seed the resulting standings.

    Works on fresh SimulatedStanding copies; the inputs are left untouched so
    callers can reuse them across thousands of rollouts.
    """
    sampler = sampler or OutcomeSampler()
    estimator = sampler.score_estimator
    by_id = {t.franchise_id: t for t in standings}
    sim = {fid: SimulatedStanding.from_standing(t) for fid, t in by_id.items()}

    for game in games:
        team_a = by_id[game.team_a]
        team_b = by_id[game.team_b]
        a_won = sampler.simulate_game(team_a, team_b, rng) == "A"

        points_a = estimator.estimate(team_a.avg_points_for, rng)
        points_b = estimator.estimate(team_b.avg_points_for, rng)
        is_division_game = divisions.same_division(game.team_a, game.team_b)

        sim[game.team_a].record_result(game.team_b, a_won, points_a, points_b, is_division_game)
        sim[game.team_b].record_result(game.team_a, not a_won, points_b, points_a, is_division_game)

    return assign_seeds(
        list(sim.values()),
        divisions,
        settings.division_seeds(divisions),
        settings.num_wildcards
    )


def _new_tally(spots: int) -> List[int]:
    return [0] * (_SEEDS + spots)


def _record_rollout(
    tallies: Dict[str, List[int]],
    assignment: SeedAssignment,
    weight: int = 1
) -> None:
    for seed in assignment.seeds:
        tally = tallies[seed.franchise_id]
        tally[_PLAYOFF] += weight
        if seed.is_division_winner:
            tally[_DIVISION] += weight
        else:
            tally[_WILDCARD] += weight
        tally[_SEEDS + seed.seed - 1] += weight
        tally[_SEED_TOTAL] += seed.seed * weight

    involved = {fid for pair in assignment.unresolved_ties for fid in pair}
    for fid in involved:
        tallies[fid][_UNRESOLVED] += weight


def _run_batch(
    n_iterations: int,
    seed: int,
    standings: List[TeamStanding],
    games: List[ScheduledGame],
    divisions: DivisionAssignment,
    settings: LeagueSettings,
    sampler: OutcomeSampler
) -> Dict[str, List[int]]:
    """
    Run a batch of rollouts with its own random stream.

    Module-level so it can be shipped to worker processes. Returns local
    per-team tallies to be summed by the caller.
    """
    rng = random.Random(seed)
    spots = settings.playoff_spots(divisions)
    tallies = {t.franchise_id: _new_tally(spots) for t in standings}

    for _ in range(n_iterations):
        assignment = rollout_once(standings, games, divisions, settings, rng, sampler)
        _record_rollout(tallies, assignment)

    return tallies


def _merge_tallies(total: Dict[str, List[int]], batch: Dict[str, List[int]]) -> None:
    for fid, counts in batch.items():
        running = total[fid]
        for i, value in enumerate(counts):
            running[i] += value


def simulate(
    standings: List[TeamStanding],
    schedules: List[TeamSchedule],
    divisions: DivisionAssignment,
    settings: Optional[LeagueSettings] = None,
    config: Optional[SimulationConfig] = None,
    sampler: Optional[OutcomeSampler] = None,
    progress_callback: Optional[Callable[[float], None]] = None
) -> Dict[str, PlayoffProbabilities]:
    """
    Run Monte Carlo simulation of the remaining season.

    Iterations are split into fixed-size batches, each seeded from
    config.seed, so a fixed seed gives identical counts whatever the worker
    count. With more than one worker the batches run on a process pool and
    their tallies are summed once every batch has finished.

    Args:
        standings: Current standings
        schedules: Remaining schedule per team
        divisions: Division membership
        settings: Playoff format
        config: Iterations, workers, batch size and seed
        sampler: Outcome sampler (defaults to OutcomeSampler())
        progress_callback: Optional callback receiving percent complete

    Returns:
        Dict mapping franchise id -> PlayoffProbabilities
    """
    settings = settings or LeagueSettings()
    config = config or SimulationConfig()
    sampler = sampler or OutcomeSampler()

    validate_league(standings, schedules, divisions, settings)

    iterations = config.iterations
    spots = settings.playoff_spots(divisions)
    games = collect_remaining_games(standings, schedules)
    tallies = {t.franchise_id: _new_tally(spots) for t in standings}
    master = random.Random(config.seed)

    logger.info(
        "Starting Monte Carlo simulation: %d iterations, %d games, %d teams",
        iterations, len(games), len(standings)
    )

    if not games:
        # Nothing left to play: the current standings are the only outcome.
        assignment = rollout_once(standings, games, divisions, settings, master, sampler)
        _record_rollout(tallies, assignment, weight=iterations)
        if progress_callback:
            progress_callback(100)
    else:
        batches = []
        remaining = iterations
        while remaining > 0:
            size = min(config.batch_size, remaining)
            batches.append((size, master.getrandbits(64)))
            remaining -= size

        completed = 0

        def _on_batch(size: int) -> None:
            nonlocal completed
            completed += size
            logger.debug("Completed %d/%d simulations", completed, iterations)
            if progress_callback:
                progress_callback(completed / iterations * 100)

        ran_parallel = False
        if config.workers > 1 and len(batches) > 1:
            try:
                with ProcessPoolExecutor(max_workers=config.workers) as executor:
                    futures = {
                        executor.submit(
                            _run_batch, size, seed, standings, games,
                            divisions, settings, sampler
                        ): size
                        for size, seed in batches
                    }
                    for future in as_completed(futures):
                        _merge_tallies(tallies, future.result())
                        _on_batch(futures[future])
                ran_parallel = True
            except (RuntimeError, OSError) as e:
                logger.warning("Process pool unavailable (%s); running sequentially", e)
                tallies = {t.franchise_id: _new_tally(spots) for t in standings}
                completed = 0

        if not ran_parallel:
            for size, seed in batches:
                batch = _run_batch(size, seed, standings, games, divisions, settings, sampler)
                _merge_tallies(tallies, batch)
                _on_batch(size)

    logger.info("Monte Carlo simulation complete")

    return {
        fid: PlayoffProbabilities(
            franchise_id=fid,
            iterations=iterations,
            playoff_count=tally[_PLAYOFF],
            division_win_count=tally[_DIVISION],
            wildcard_count=tally[_WILDCARD],
            seed_counts=tally[_SEEDS:],
            total_seed=tally[_SEED_TOTAL],
            unresolved_tie_iterations=tally[_UNRESOLVED]
        )
        for fid, tally in tallies.items()
    }
