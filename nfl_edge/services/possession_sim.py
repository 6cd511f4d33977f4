"""
Drive-level possession simulator.

Each offensive possession resolves through a three-stage cascade:

    BALL → TURNOVER                      (0 pts)
         → NO SCORE                      (0 pts)
         → SCORING RANGE → TOUCHDOWN     (7 pts)
                         → FIELD GOAL    (3 pts)
                         → STALLED       (0 pts)

Every stage is gated by a different statistical category, so turnover
tendencies, overall efficiency and red-zone finishing each move the
outcome independently:

    turnover    mean of the offence's giveaways per play and the
                defence's takeaways per play
    score       70% strength ratio O / (O + D), 30% yards-per-play ratio
    TD / FG     red-zone % and offensive touchdowns per game set the
                touchdown threshold; a fixed band above it is field goals

Usage::

    sim = PossessionSimulator(EngineConfig.nfl())
    points = sim.simulate(home_profile, away_profile, adjustment, rng)
"""

from dataclasses import dataclass
from typing import Optional

from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.numeric import clamp, safe_divide
from nfl_edge.core.sim_interface import (
    RandomSource,
    TeamStatisticalProfile,
    WeatherAdjustment,
)
from nfl_edge.services.strength import StrengthCalculator

TOUCHDOWN_POINTS = 7
FIELD_GOAL_POINTS = 3


@dataclass(frozen=True)
class PossessionOdds:
    """
    Per-possession transition probabilities for one offence/defence pair.

    ``td_threshold`` and ``fg_threshold`` are percentages on the 0–100
    scale of the TD/FG roll; a roll under ``td_threshold`` is a
    touchdown, under ``fg_threshold`` a field goal.
    """

    turnover_prob: float
    scoring_prob: float
    td_threshold: float
    fg_threshold: float


class PossessionSimulator:
    """Simulate single possessions as a turnover → score → TD/FG cascade."""

    def __init__(self, config: EngineConfig,
                 strength_calculator: Optional[StrengthCalculator] = None):
        self.config = config
        self.strength_calculator = strength_calculator or StrengthCalculator(config)

    def _turnover_rate(self, offence: TeamStatisticalProfile,
                       defence: TeamStatisticalProfile) -> float:
        """
        Per-possession turnover probability.

        Both sides' per-game turnover counts are converted to per-play
        rates.  A profile with no plays recorded falls back to the league
        per-play rate for its half of the average.
        """
        league_rate = self.config.league.turnovers_per_play
        lost = safe_divide(offence.turnovers_lost, offence.total_plays, league_rate)
        forced = safe_divide(defence.turnovers_forced, defence.def_total_plays, league_rate)
        return clamp((lost + forced) / 2.0, 0.0, 1.0)

    def compute_odds(
        self,
        offence: TeamStatisticalProfile,
        defence: TeamStatisticalProfile,
        adjustment: Optional[WeatherAdjustment] = None,
    ) -> PossessionOdds:
        """
        Transition probabilities for ``offence`` attacking ``defence``.

        When ``adjustment`` is given its (weather-adjusted) strengths are
        used; otherwise base strengths are computed from the profiles.
        """
        cfg = self.config

        if adjustment is not None:
            off_strength = adjustment.adjusted_offense
            def_strength = adjustment.adjusted_defense
        else:
            off_strength = self.strength_calculator.offensive_strength(offence)
            def_strength = self.strength_calculator.defensive_strength(defence)

        # Two zero strengths (or zero yards per play on both sides) carry
        # no information either way: treat as an even matchup.
        strength_ratio = safe_divide(off_strength, off_strength + def_strength, 0.5)
        efficiency_ratio = safe_divide(
            offence.yards_per_play,
            offence.yards_per_play + defence.def_yards_per_play_allowed,
            0.5,
        )
        scoring_prob = clamp(
            cfg.strength_blend * strength_ratio + (1.0 - cfg.strength_blend) * efficiency_ratio,
            cfg.scoring_prob_floor,
            cfg.scoring_prob_ceiling,
        )

        offensive_tds = offence.passing_tds + offence.rushing_tds
        td_threshold = (
            offence.red_zone_efficiency * cfg.red_zone_td_weight
            + offensive_tds * cfg.offensive_td_weight
        )

        return PossessionOdds(
            turnover_prob=self._turnover_rate(offence, defence),
            scoring_prob=scoring_prob,
            td_threshold=td_threshold,
            fg_threshold=td_threshold + cfg.field_goal_band,
        )

    @staticmethod
    def resolve(odds: PossessionOdds, rng: RandomSource) -> int:
        """Draw one possession outcome from pre-computed odds."""
        if rng.random() < odds.turnover_prob:
            return 0
        if rng.random() >= odds.scoring_prob:
            return 0

        roll = rng.random() * 100.0
        if roll < odds.td_threshold:
            return TOUCHDOWN_POINTS
        if roll < odds.fg_threshold:
            return FIELD_GOAL_POINTS
        return 0

    def simulate(
        self,
        offence: TeamStatisticalProfile,
        defence: TeamStatisticalProfile,
        adjustment: Optional[WeatherAdjustment],
        rng: RandomSource,
    ) -> int:
        """
        Simulate one possession.

        Returns:
            Points scored: 0, 3 or 7.
        """
        return self.resolve(self.compute_odds(offence, defence, adjustment), rng)

    def expected_points(
        self,
        offence: TeamStatisticalProfile,
        defence: TeamStatisticalProfile,
        adjustment: Optional[WeatherAdjustment] = None,
    ) -> float:
        """Analytic expected points of one possession (no sampling)."""
        odds = self.compute_odds(offence, defence, adjustment)
        p_td = clamp(odds.td_threshold / 100.0, 0.0, 1.0)
        p_fg = clamp(odds.fg_threshold / 100.0, 0.0, 1.0) - p_td
        reach = (1.0 - odds.turnover_prob) * odds.scoring_prob
        return reach * (p_td * TOUCHDOWN_POINTS + p_fg * FIELD_GOAL_POINTS)
