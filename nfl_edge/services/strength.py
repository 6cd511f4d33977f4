"""
Team strength scoring.

Box-score statistics come in incompatible units (yards, percentages,
per-game counts).  The calculator turns each one into a ratio against
the league baseline, so a league-average statistic contributes exactly
1.0, then folds the ratios into four weighted sub-scores on a
50-is-average index:

    offence:  passing (40%)   yards, Y/A, comp %, pass TDs, INTs thrown
              rushing (30%)   yards, Y/C, rush TDs
              efficiency (20%) Y/play, first downs, 3rd-down %, red-zone %
              turnovers (10%)  giveaways, takeaways, penalty yards

    defence:  the same structure built from "allowed" statistics, where
              allowing less raises the score.

A direct scoring-rate index (points for, or points allowed) is blended
in at ``StrengthWeights.scoring``.  The blended raw value is mapped
linearly from the band ``[raw_floor, raw_ceiling]`` onto ``[0, 100]``
and clamped, which pins a league-average team at 50 and keeps merely
good teams well away from the ends of the scale.

Usage::

    calc = StrengthCalculator(EngineConfig.nfl())
    calc.offensive_strength(profile)   # → 0..100
"""

import logging
from typing import Sequence

from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.numeric import clamp, safe_divide
from nfl_edge.core.sim_interface import TeamStatisticalProfile, TeamStrength

logger = logging.getLogger(__name__)

_INDEX_AVERAGE = 50.0


class StrengthCalculator:
    """Pure, deterministic offensive/defensive strength scoring."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self._league = config.league
        self._weights = config.strength

    # ------------------------------------------------------------------ #
    #  Ratio helpers                                                       #
    # ------------------------------------------------------------------ #

    def _ratio(self, stat: float, baseline: float) -> float:
        """stat / baseline, capped.  A zero baseline is neutral (1.0)."""
        return min(self._weights.ratio_cap, safe_divide(stat, baseline, 1.0))

    def _inverse_ratio(self, stat: float, baseline: float) -> float:
        """baseline / stat, capped.  Conceding nothing earns the cap."""
        cap = self._weights.ratio_cap
        return min(cap, safe_divide(baseline, stat, cap))

    @staticmethod
    def _index(ratios: Sequence[float]) -> float:
        return _INDEX_AVERAGE * sum(ratios) / len(ratios)

    def _combine(self, passing: float, rushing: float, efficiency: float,
                 turnover: float, scoring: float) -> float:
        w = self._weights
        weighted = (
            w.passing * passing
            + w.rushing * rushing
            + w.efficiency * efficiency
            + w.turnover * turnover
        )
        return (1.0 - w.scoring) * weighted + w.scoring * scoring

    def _rescale(self, raw: float) -> float:
        w = self._weights
        scaled = (raw - w.raw_floor) / (w.raw_ceiling - w.raw_floor) * 100.0
        return clamp(scaled, 0.0, 100.0)

    # ------------------------------------------------------------------ #
    #  Raw scores                                                          #
    # ------------------------------------------------------------------ #

    def raw_offensive_score(self, p: TeamStatisticalProfile) -> float:
        """Unscaled offensive index (50 = league average)."""
        lg = self._league

        passing = self._index((
            self._ratio(p.passing_yards, lg.passing_yards),
            self._ratio(p.yards_per_pass_attempt, lg.yards_per_pass_attempt),
            self._ratio(p.pass_completion_pct, lg.pass_completion_pct),
            self._ratio(p.passing_tds, lg.passing_tds),
            self._inverse_ratio(p.interceptions_thrown, lg.interceptions),
        ))
        rushing = self._index((
            self._ratio(p.rushing_yards, lg.rushing_yards),
            self._ratio(p.yards_per_rush, lg.yards_per_rush),
            self._ratio(p.rushing_tds, lg.rushing_tds),
        ))
        efficiency = self._index((
            self._ratio(p.yards_per_play, lg.yards_per_play),
            self._ratio(p.first_downs, lg.first_downs),
            self._ratio(p.third_down_conversion_rate, lg.third_down_conversion_rate),
            self._ratio(p.red_zone_efficiency, lg.red_zone_efficiency),
        ))
        turnover = self._index((
            self._inverse_ratio(p.turnovers_lost, lg.turnovers),
            self._ratio(p.turnovers_forced, lg.turnovers),
            self._inverse_ratio(p.penalty_yards, lg.penalty_yards),
        ))
        scoring = _INDEX_AVERAGE * self._ratio(p.points_per_game, lg.points_per_game)

        return self._combine(passing, rushing, efficiency, turnover, scoring)

    def raw_defensive_score(self, p: TeamStatisticalProfile) -> float:
        """Unscaled defensive index (50 = league average)."""
        lg = self._league

        # Per-attempt rates the profile only carries as totals.  With no
        # attempts faced the league rate is used, which scores neutral.
        ypa_allowed = safe_divide(
            p.def_passing_yards_allowed, p.def_pass_attempts, lg.yards_per_pass_attempt
        )
        comp_pct_allowed = 100.0 * safe_divide(
            p.def_pass_completions_allowed, p.def_pass_attempts, lg.pass_completion_pct / 100.0
        )
        ypc_allowed = safe_divide(
            p.def_rushing_yards_allowed, p.def_rushing_attempts_allowed, lg.yards_per_rush
        )

        passing = self._index((
            self._inverse_ratio(p.def_passing_yards_allowed, lg.passing_yards),
            self._inverse_ratio(ypa_allowed, lg.yards_per_pass_attempt),
            self._inverse_ratio(comp_pct_allowed, lg.pass_completion_pct),
            self._inverse_ratio(p.def_passing_tds_allowed, lg.passing_tds),
            self._ratio(p.def_interceptions, lg.interceptions),
        ))
        rushing = self._index((
            self._inverse_ratio(p.def_rushing_yards_allowed, lg.rushing_yards),
            self._inverse_ratio(ypc_allowed, lg.yards_per_rush),
            self._inverse_ratio(p.def_rushing_tds_allowed, lg.rushing_tds),
        ))
        efficiency = self._index((
            self._inverse_ratio(p.def_yards_per_play_allowed, lg.yards_per_play),
            self._inverse_ratio(p.def_first_downs_allowed, lg.first_downs),
            self._inverse_ratio(p.def_third_down_conversion_rate, lg.third_down_conversion_rate),
            self._inverse_ratio(p.def_red_zone_efficiency, lg.red_zone_efficiency),
        ))
        turnover = self._index((
            self._ratio(p.turnovers_forced, lg.turnovers),
            self._ratio(p.fumbles_forced, lg.fumbles),
            self._inverse_ratio(p.penalty_yards, lg.penalty_yards),
        ))
        scoring = _INDEX_AVERAGE * self._inverse_ratio(p.points_allowed_per_game, lg.points_per_game)

        return self._combine(passing, rushing, efficiency, turnover, scoring)

    # ------------------------------------------------------------------ #
    #  Public API                                                          #
    # ------------------------------------------------------------------ #

    def offensive_strength(self, profile: TeamStatisticalProfile) -> float:
        """Offensive strength on ``[0, 100]``."""
        return self._rescale(self.raw_offensive_score(profile))

    def defensive_strength(self, profile: TeamStatisticalProfile) -> float:
        """Defensive strength on ``[0, 100]``."""
        return self._rescale(self.raw_defensive_score(profile))

    def strengths(self, profile: TeamStatisticalProfile) -> TeamStrength:
        strength = TeamStrength(
            offense=self.offensive_strength(profile),
            defense=self.defensive_strength(profile),
        )
        logger.debug(
            "%s strength: off=%.1f def=%.1f", profile.team, strength.offense, strength.defense
        )
        return strength
