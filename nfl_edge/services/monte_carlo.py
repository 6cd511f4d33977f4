"""
Monte Carlo orchestration: the engine's public entry point.

:class:`MonteCarloOrchestrator` validates the request, resolves the
favourite from the moneylines, seeds a generator and hands everything
to the :class:`~nfl_edge.services.calibration.MarketCalibrator`.

:func:`simulate_slate` runs a batch of games concurrently.  Games are
independent, so they fan out across a thread pool with one generator
each (spawned from a single ``SeedSequence``, so a seeded slate is
reproducible regardless of scheduling).  A game that raises is logged
and reported on its own :class:`SlateEntry`; the rest of the slate
still completes.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from nfl_edge import settings
from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.odds_math import resolve_favorite
from nfl_edge.core.sim_interface import (
    MarketLine,
    RandomSource,
    SimulationResult,
    TeamStatisticalProfile,
    WeatherConditions,
)
from nfl_edge.services.calibration import MarketCalibrator

logger = logging.getLogger(__name__)


class MonteCarloOrchestrator:
    """
    Single public surface for simulating one matchup.

    Usage::

        orchestrator = MonteCarloOrchestrator()
        result = orchestrator.run(home, away, market, iterations=10_000, seed=7)
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        calibrator: Optional[MarketCalibrator] = None,
    ):
        self.config = config or EngineConfig.nfl()
        self.calibrator = calibrator or MarketCalibrator(self.config)

    def run(
        self,
        home: TeamStatisticalProfile,
        away: TeamStatisticalProfile,
        market: MarketLine,
        weather: Optional[WeatherConditions] = None,
        iterations: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ) -> SimulationResult:
        """
        Simulate ``home`` vs ``away`` and calibrate against ``market``.

        Args:
            home: Fully populated home profile.
            away: Fully populated away profile.
            market: Posted spread, total and moneylines.
            weather: Kickoff weather; None is weather-neutral.
            iterations: Replays to run.  None uses ``SIMULATION_ITERATIONS``
                (or the config default).  An explicit value is never clamped.
            seed: Seed for a fresh ``numpy`` generator.  None falls back to
                ``SIMULATION_SEED``, then to OS entropy.
            rng: Injected generator; takes precedence over ``seed``.

        Raises:
            ValueError: If ``iterations`` is not positive.
        """
        if iterations is None:
            iterations = settings.default_iterations(self.config)
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations!r}")

        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else settings.default_seed())

        for note in market.warnings:
            logger.warning("%s @ %s: %s", away.team, home.team, note)

        favorite = resolve_favorite(market.home_moneyline, market.away_moneyline)

        start = time.perf_counter()
        result = self.calibrator.run_calibrated(
            home,
            away,
            spread=market.spread,
            total=market.total,
            weather=weather,
            favorite_is_home=favorite.favorite_is_home,
            iterations=iterations,
            rng=rng,
        )
        result.validate()

        logger.info(
            "%s @ %s: %d sims in %.2fs | home %.1f%% away %.1f%% | fav(%s) cover %.1f%% | "
            "over %.1f%% | pred %d-%d",
            away.team, home.team, iterations, time.perf_counter() - start,
            result.home_win_probability, result.away_win_probability,
            favorite.favorite_side, result.favorite_cover_probability,
            result.over_probability, result.predicted_home_score, result.predicted_away_score,
        )
        return result


# ---------------------------------------------------------------------------
# Slate (batch) simulation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SlateGame:
    """One game of a batch request."""

    game_id: str
    home: TeamStatisticalProfile
    away: TeamStatisticalProfile
    market: MarketLine
    weather: Optional[WeatherConditions] = None


@dataclass(frozen=True)
class SlateEntry:
    """Outcome of one slate game: a result, or the error that stopped it."""

    game_id: str
    result: Optional[SimulationResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def simulate_slate(
    games: Sequence[SlateGame],
    *,
    iterations: Optional[int] = None,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    orchestrator: Optional[MonteCarloOrchestrator] = None,
) -> List[SlateEntry]:
    """
    Simulate every game of a slate concurrently.

    Args:
        games: Games to simulate.
        iterations: Replays per game (None → environment default).
        seed: Root seed; each game gets an independent child stream.
        max_workers: Thread count (None → ``SLATE_MAX_WORKERS``).
        orchestrator: Shared orchestrator; components are stateless so
            one instance serves every worker.

    Returns:
        One :class:`SlateEntry` per game, in input order.
    """
    if not games:
        return []

    orchestrator = orchestrator or MonteCarloOrchestrator()
    workers = max_workers if max_workers is not None else settings.slate_max_workers()
    if seed is None:
        seed = settings.default_seed()
    children = np.random.SeedSequence(seed).spawn(len(games))

    def _run_one(game: SlateGame, seed_seq: np.random.SeedSequence) -> SlateEntry:
        try:
            result = orchestrator.run(
                game.home,
                game.away,
                game.market,
                weather=game.weather,
                iterations=iterations,
                rng=np.random.default_rng(seed_seq),
            )
        except Exception as exc:
            logger.error("Slate game %s failed: %s", game.game_id, exc, exc_info=True)
            return SlateEntry(game_id=game.game_id, error=f"{type(exc).__name__}: {exc}")
        return SlateEntry(game_id=game.game_id, result=result)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        entries = list(executor.map(_run_one, games, children))

    failed = sum(1 for e in entries if not e.ok)
    logger.info("Slate complete: %d games, %d failed", len(entries), failed)
    return entries
