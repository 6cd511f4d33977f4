"""
Market calibration of simulated score distributions.

The raw simulator is not trusted to hit the market's mean: the posted
spread and total already price in injuries, rest and situational factors
the box-score profile cannot see.  Instead of competing on the mean, the
calibrator keeps the simulated *shape* and recentres it on the market:

    total_offset  = mean(home + away)              − market total
    margin_offset = mean(favourite − underdog)     − |spread|

    over   ⇔  (home + away) − total_offset         >  total
    cover  ⇔  (fav − dog)   − margin_offset        >  |spread|

Pushes land in "under" and "underdog cover", so each pair sums to 100.

Win, loss and tie probabilities are read from the **unshifted** scores.
The moneyline is the one market where the model is allowed to disagree
with the market price, and that disagreement is the signal the product
reports.  Predicted scores are the raw means, rounded.

Run tests with::

    pytest tests/test_calibration.py -v
"""

import logging
from typing import Optional

import numpy as np
from scipy.stats import norm

from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.sim_interface import (
    CalibrationSummary,
    RandomSource,
    SimulationResult,
    TeamStatisticalProfile,
    WeatherConditions,
)
from nfl_edge.services.game_sim import GameSimulator

logger = logging.getLogger(__name__)


def _score_interval(scores: np.ndarray, z: float) -> tuple:
    """Normal-approximation interval on a team score, floored at zero."""
    mean = float(np.mean(scores))
    sd = float(np.std(scores))
    return max(0.0, mean - z * sd), mean + z * sd


class MarketCalibrator:
    """Run replays and recentre spread/total outcomes on the market line."""

    def __init__(self, config: EngineConfig, game_simulator: Optional[GameSimulator] = None):
        self.config = config
        self.game_simulator = game_simulator or GameSimulator(config)

    def calibrate(
        self,
        home_scores: np.ndarray,
        away_scores: np.ndarray,
        spread: float,
        total: float,
        favorite_is_home: bool,
    ) -> SimulationResult:
        """
        Turn recorded replay scores into a calibrated result.

        Args:
            home_scores: Home score of every replay.
            away_scores: Away score of every replay, same length.
            spread: Posted spread; only its magnitude is used, the
                orientation comes from ``favorite_is_home``.
            total: Posted total.
            favorite_is_home: Orients margins as favourite − underdog.

        Raises:
            ValueError: If the arrays are empty or of different lengths.
        """
        home = np.asarray(home_scores, dtype=float)
        away = np.asarray(away_scores, dtype=float)
        if home.size == 0 or home.shape != away.shape:
            raise ValueError(
                f"Need matching, non-empty score arrays (got {home.shape} and {away.shape})."
            )
        n = int(home.size)
        line = abs(spread)

        totals = home + away
        margins = home - away if favorite_is_home else away - home

        raw_mean_total = float(np.mean(totals))
        raw_mean_margin = float(np.mean(margins))
        total_offset = raw_mean_total - total
        margin_offset = raw_mean_margin - line

        # Shift the total evenly across both sides; the sum is what is tested.
        calibrated_totals = (home - total_offset / 2.0) + (away - total_offset / 2.0)
        calibrated_margins = margins - margin_offset

        over_pct = 100.0 * float(np.mean(calibrated_totals > total))
        cover_pct = 100.0 * float(np.mean(calibrated_margins > line))

        home_win_pct = 100.0 * int(np.count_nonzero(home > away)) / n
        away_win_pct = 100.0 * int(np.count_nonzero(away > home)) / n
        tie_pct = 100.0 * int(np.count_nonzero(home == away)) / n

        z = float(norm.ppf(0.5 + self.config.score_interval_confidence / 2.0))

        summary = CalibrationSummary(
            raw_mean_total=raw_mean_total,
            raw_mean_margin=raw_mean_margin,
            total_offset=total_offset,
            margin_offset=margin_offset,
            calibrated_mean_total=float(np.mean(calibrated_totals)),
            calibrated_mean_margin=float(np.mean(calibrated_margins)),
        )
        logger.debug(
            "Calibration: raw total %.2f (offset %+.2f), raw margin %.2f (offset %+.2f)",
            raw_mean_total, total_offset, raw_mean_margin, margin_offset,
        )

        return SimulationResult(
            home_win_probability=home_win_pct,
            away_win_probability=away_win_pct,
            tie_probability=tie_pct,
            favorite_cover_probability=cover_pct,
            underdog_cover_probability=100.0 - cover_pct,
            over_probability=over_pct,
            under_probability=100.0 - over_pct,
            predicted_home_score=max(0, int(round(float(np.mean(home))))),
            predicted_away_score=max(0, int(round(float(np.mean(away))))),
            iterations=n,
            favorite_is_home=favorite_is_home,
            calibration=summary,
            margin_sd=float(np.std(margins)),
            total_sd=float(np.std(totals)),
            home_score_interval=_score_interval(home, z),
            away_score_interval=_score_interval(away, z),
        )

    def run_calibrated(
        self,
        home: TeamStatisticalProfile,
        away: TeamStatisticalProfile,
        spread: float,
        total: float,
        weather: Optional[WeatherConditions],
        favorite_is_home: bool,
        iterations: int,
        rng: RandomSource,
    ) -> SimulationResult:
        """
        Play ``iterations`` replays, then calibrate them in one pass.

        Raises:
            ValueError: If ``iterations`` is not positive.
        """
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations!r}")

        sim = self.game_simulator
        base = sim.base_strengths(home, away)

        home_scores = np.zeros(iterations, dtype=np.int32)
        away_scores = np.zeros(iterations, dtype=np.int32)
        for i in range(iterations):
            score = sim.simulate_one_game(home, away, weather, rng, base=base)
            home_scores[i] = score.home_score
            away_scores[i] = score.away_score

        return self.calibrate(home_scores, away_scores, spread, total, favorite_is_home)
