"""
Full-game simulator.

One call plays one independent replay of a matchup:

    1. Possessions per team: 55/45 home/away blend of drives per game,
       plus an integer draw in [-2, +2], clamped to [8, 15].
    2. Day-to-day form: each of the four base strengths is multiplied
       by ``1 + U(-15%, +15%)`` and clamped to [10, 90].  This is the
       main source of upsets and is drawn fresh for every replay.
    3. Weather is applied once per side to the jittered strengths.
    4. Home field: a ~3% multiplier on home points, itself jittered by
       ``U(0.97, 1.03)`` per replay.
    5. Both offences play their possessions; home points are boosted as
       they accumulate.
    6. Chaos: with ~15% probability a defensive/special-teams score
       (2 or 7) goes to a random side.
    7. Both totals are rounded.

Nothing is carried between calls except what the caller passes in.
"""

from typing import Optional, Tuple

from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.numeric import clamp
from nfl_edge.core.sim_interface import (
    GameScore,
    RandomSource,
    TeamStatisticalProfile,
    TeamStrength,
    WeatherConditions,
)
from nfl_edge.services.possession_sim import PossessionSimulator
from nfl_edge.services.weather import WeatherAdjuster


class GameSimulator:
    """Play single randomized replays of a matchup."""

    def __init__(
        self,
        config: EngineConfig,
        possession_simulator: Optional[PossessionSimulator] = None,
        weather_adjuster: Optional[WeatherAdjuster] = None,
    ):
        self.config = config
        self.possession_simulator = possession_simulator or PossessionSimulator(config)
        self.weather_adjuster = weather_adjuster or WeatherAdjuster(config)

    @property
    def strength_calculator(self):
        return self.possession_simulator.strength_calculator

    def base_strengths(
        self, home: TeamStatisticalProfile, away: TeamStatisticalProfile
    ) -> Tuple[TeamStrength, TeamStrength]:
        """Base (un-jittered) strengths for both sides."""
        calc = self.strength_calculator
        return calc.strengths(home), calc.strengths(away)

    def possession_count(
        self, home: TeamStatisticalProfile, away: TeamStatisticalProfile, rng: RandomSource
    ) -> int:
        cfg = self.config
        pace = (
            cfg.home_pace_weight * home.drives_per_game
            + (1.0 - cfg.home_pace_weight) * away.drives_per_game
        )
        variance = int(rng.integers(-cfg.possession_variance, cfg.possession_variance + 1))
        return int(clamp(round(pace) + variance, cfg.min_possessions, cfg.max_possessions))

    def _jitter(self, strength: float, rng: RandomSource) -> float:
        cfg = self.config
        factor = 1.0 + rng.uniform(-cfg.strength_variance, cfg.strength_variance)
        return clamp(strength * factor, cfg.game_strength_floor, cfg.game_strength_ceiling)

    def _home_boost(self, rng: RandomSource) -> float:
        cfg = self.config
        return cfg.home_field_advantage * rng.uniform(
            1.0 - cfg.home_field_variance, 1.0 + cfg.home_field_variance
        )

    def _chaos(self, rng: RandomSource) -> Tuple[int, int]:
        """Points added to (home, away) by a non-offensive score, if any."""
        cfg = self.config
        if rng.random() >= cfg.chaos_probability:
            return 0, 0
        points = cfg.chaos_points[int(rng.integers(0, len(cfg.chaos_points)))]
        if rng.random() < 0.5:
            return points, 0
        return 0, points

    def simulate_one_game(
        self,
        home: TeamStatisticalProfile,
        away: TeamStatisticalProfile,
        weather: Optional[WeatherConditions],
        rng: RandomSource,
        base: Optional[Tuple[TeamStrength, TeamStrength]] = None,
    ) -> GameScore:
        """
        Play one replay.

        Args:
            home: Home team profile.
            away: Away team profile.
            weather: Kickoff weather, or None for weather-neutral.
            rng: Random source for every draw in this replay.
            base: Pre-computed ``(home, away)`` base strengths.  Callers
                running many replays pass this to avoid rescoring the
                same profiles every game.

        Returns:
            Rounded, non-negative home and away scores.
        """
        home_base, away_base = base if base is not None else self.base_strengths(home, away)

        possessions = self.possession_count(home, away, rng)

        home_off = self._jitter(home_base.offense, rng)
        home_def = self._jitter(home_base.defense, rng)
        away_off = self._jitter(away_base.offense, rng)
        away_def = self._jitter(away_base.defense, rng)

        adjuster = self.weather_adjuster
        home_adj = adjuster.adjust(weather, home_off, away_def, home.passing_yards, home.rushing_yards)
        away_adj = adjuster.adjust(weather, away_off, home_def, away.passing_yards, away.rushing_yards)

        boost = self._home_boost(rng)

        sim = self.possession_simulator
        home_odds = sim.compute_odds(home, away, home_adj)
        away_odds = sim.compute_odds(away, home, away_adj)

        home_points = 0.0
        away_points = 0.0
        for _ in range(possessions):
            home_points += sim.resolve(home_odds, rng) * boost
            away_points += sim.resolve(away_odds, rng)

        chaos_home, chaos_away = self._chaos(rng)
        home_points += chaos_home
        away_points += chaos_away

        return GameScore(home_score=int(round(home_points)), away_score=int(round(away_points)))
