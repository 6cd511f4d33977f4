"""Engine configuration: every simulation constant in one place.

This module is the **registry** for every threshold, weight and band the
simulation uses.  Nowhere else in the codebase should league averages,
weather ladders, variance windows or calibration bounds be hard-coded.

Architecture
------------
:class:`EngineConfig` is a frozen dataclass carrying all constants,
grouped into nested frozen dataclasses (:class:`LeagueBaselines`,
:class:`StrengthWeights`, :class:`WeatherThresholds`,
:class:`WeatherModifiers`).  The named constructor
:meth:`EngineConfig.nfl` returns the canonical NFL instance.  Every
component (strength calculator, weather adjuster, possession and game
simulators, calibrator) receives the config at construction, so tuning
the model means editing this table, and tests can substitute an
alternate configuration.

Typical usage::

    from nfl_edge.core.engine_config import EngineConfig

    cfg = EngineConfig.nfl()
    orchestrator = MonteCarloOrchestrator(config=cfg)

    # Override a single constant for an experiment:
    no_chaos = cfg.with_overrides(chaos_probability=0.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace


@dataclass(frozen=True)
class LeagueBaselines:
    """League-average per-game statistics (NFL 2024 season).

    Used as the denominators of every strength index, so a team whose
    statistic equals its baseline contributes a neutral ratio of 1.0.
    Defensive "allowed" statistics share these values because league
    offence and league defence are the same games seen from two sides.
    """

    points_per_game: float = 22.8
    passing_yards: float = 228.4
    yards_per_pass_attempt: float = 7.0
    pass_completion_pct: float = 66.1
    passing_tds: float = 1.6
    interceptions: float = 0.7
    rushing_yards: float = 114.5
    yards_per_rush: float = 4.4
    rushing_tds: float = 0.9
    yards_per_play: float = 5.4
    first_downs: float = 19.6
    third_down_conversion_rate: float = 39.5
    red_zone_efficiency: float = 55.2
    turnovers: float = 1.2
    fumbles: float = 0.5
    penalty_yards: float = 58.4
    drives_per_game: float = 11.0
    total_plays: float = 61.2

    #: Posted total used when a market line arrives without one.
    market_total: float = 45.0

    @property
    def turnovers_per_play(self) -> float:
        """Per-play turnover rate; the fallback when a profile has no plays."""
        return self.turnovers / self.total_plays


@dataclass(frozen=True)
class StrengthWeights:
    """Weights and rescaling band for the strength calculator.

    Attributes:
        passing: Share of the passing sub-score (offence) / pass
            defence sub-score (defence).
        rushing: Share of the rushing sub-score.
        efficiency: Share of the overall-play efficiency sub-score.
        turnover: Share of the turnover-impact sub-score.
        scoring: Blend weight of the direct scoring-rate index against
            the four weighted sub-scores.
        ratio_cap: Ceiling on any single stat-to-baseline ratio, so one
            outlier statistic cannot dominate a sub-score.
        raw_floor: Raw score mapped to strength 0.
        raw_ceiling: Raw score mapped to strength 100.  The band is
            deliberately wide so a league-average team sits at 50 and a
            good-not-great team lands around 60, not 90.
    """

    passing: float = 0.40
    rushing: float = 0.30
    efficiency: float = 0.20
    turnover: float = 0.10
    scoring: float = 0.25
    ratio_cap: float = 2.0
    raw_floor: float = 15.0
    raw_ceiling: float = 85.0


@dataclass(frozen=True)
class WeatherThresholds:
    """Ordered threshold ladders and impact-score table."""

    # Temperature ladder (°F)
    extreme_cold: float = 20.0
    freezing: float = 32.0
    cold: float = 40.0
    extreme_heat: float = 95.0

    # Wind ladder (mph, inclusive)
    wind_extreme: float = 25.0
    wind_high: float = 20.0
    wind_moderate: float = 15.0
    wind_light: float = 10.0

    # Precipitation intensity above which rain counts as heavy
    heavy_rain: float = 50.0

    # Impact scores per triggered rung
    impact_extreme_cold: int = 3
    impact_freezing: int = 2
    impact_cold: int = 1
    impact_extreme_heat: int = 1
    impact_wind_extreme: int = 4
    impact_wind_high: int = 3
    impact_wind_moderate: int = 2
    impact_wind_light: int = 1
    impact_snow: int = 3
    impact_heavy_rain: int = 2
    impact_rain: int = 1

    # Impact-score → rating cut-offs
    rating_extreme: int = 7
    rating_high: int = 5
    rating_medium: int = 3
    rating_low: int = 1


@dataclass(frozen=True)
class WeatherModifiers:
    """Multiplicative efficiency modifiers applied per weather rung."""

    pass_high_winds: float = 0.65
    pass_moderate_winds: float = 0.80
    pass_light_winds: float = 0.90
    pass_extreme_cold: float = 0.85
    pass_freezing: float = 0.92
    pass_snow: float = 0.75
    pass_heavy_rain: float = 0.85
    pass_light_rain: float = 0.95

    rush_high_winds: float = 1.10
    rush_moderate_winds: float = 1.05
    rush_extreme_cold: float = 0.95
    rush_snow: float = 0.90
    rush_heavy_rain: float = 0.95

    #: Fraction of the offence's suppression handed to the opposing defence.
    defensive_benefit: float = 0.3


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration bundle for the simulation engine.

    All fields default to the NFL values so a bare ``EngineConfig()`` is
    usable; prefer :meth:`nfl` for readability at call sites.

    Attributes:
        --- Possession model ---
        strength_blend: Weight of the strength ratio in the per-possession
            scoring probability; the remainder goes to the yards-per-play
            efficiency ratio.
        scoring_prob_floor: Lower clip on the scoring probability.
        scoring_prob_ceiling: Upper clip on the scoring probability.
        red_zone_td_weight: Multiplier on red-zone percentage in the
            touchdown threshold.
        offensive_td_weight: Percentage points added per offensive
            touchdown per game.
        field_goal_band: Width (percentage points) of the field-goal band
            above the touchdown threshold.

        --- Game model ---
        home_pace_weight: Home side's share of the drives-per-game blend.
        possession_variance: Half-width of the integer possession window.
        min_possessions / max_possessions: Plausible band per team.
        strength_variance: Per-game multiplicative jitter on strengths.
        game_strength_floor / game_strength_ceiling: Clamp after jitter.
        home_field_advantage: Base multiplicative boost to home points.
        home_field_variance: Half-width of the per-replay jitter on the
            boost (0.03 → U(0.97, 1.03)).
        chaos_probability: Chance per game of a non-offensive score.
        chaos_points: Point values a chaos event can produce.

        --- Run bounds ---
        default_iterations: Iterations when the caller supplies none.
        min_iterations / max_iterations: Band applied to environment
            supplied defaults (an explicit caller value is never clamped).
        score_interval_confidence: Coverage of the reported per-team score
            intervals.
    """

    league: LeagueBaselines = field(default_factory=LeagueBaselines)
    strength: StrengthWeights = field(default_factory=StrengthWeights)
    weather_thresholds: WeatherThresholds = field(default_factory=WeatherThresholds)
    weather_modifiers: WeatherModifiers = field(default_factory=WeatherModifiers)

    # Possession model
    strength_blend: float = 0.70
    scoring_prob_floor: float = 0.01
    scoring_prob_ceiling: float = 0.99
    red_zone_td_weight: float = 0.6
    offensive_td_weight: float = 5.0
    field_goal_band: float = 35.0

    # Game model
    home_pace_weight: float = 0.55
    possession_variance: int = 2
    min_possessions: int = 8
    max_possessions: int = 15
    strength_variance: float = 0.15
    game_strength_floor: float = 10.0
    game_strength_ceiling: float = 90.0
    home_field_advantage: float = 1.03
    home_field_variance: float = 0.03
    chaos_probability: float = 0.15
    chaos_points: tuple[int, ...] = (2, 7)

    # Run bounds
    default_iterations: int = 10_000
    min_iterations: int = 100
    max_iterations: int = 10_000
    score_interval_confidence: float = 0.90

    def __post_init__(self) -> None:
        self.validate()

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def nfl(cls) -> EngineConfig:
        """Return the canonical NFL configuration.

        Sources:
            * League baselines: NFL 2024 regular-season per-game averages.
            * Weather ladders: pooled outdoor-game scoring splits.
            * Variance constants: tuned so two league-average teams
              produce a raw mean total in the mid-to-high 40s.
        """
        return cls(
            league=LeagueBaselines(),
            strength=StrengthWeights(),
            weather_thresholds=WeatherThresholds(),
            weather_modifiers=WeatherModifiers(),
        )

    def with_overrides(self, **changes: object) -> EngineConfig:
        """Return a copy with top-level fields replaced (re-validated)."""
        return replace(self, **changes)

    # ------------------------------------------------------------------ #
    #  Validation                                                          #
    # ------------------------------------------------------------------ #

    def validate(self) -> None:
        """Reject configurations the simulation cannot run with.

        Raises:
            ValueError: On any out-of-range or inconsistent constant.
        """
        s = self.strength
        if s.raw_ceiling <= s.raw_floor:
            raise ValueError(
                f"strength.raw_ceiling ({s.raw_ceiling}) must exceed "
                f"strength.raw_floor ({s.raw_floor})."
            )
        for f in fields(s):
            if getattr(s, f.name) < 0:
                raise ValueError(f"strength.{f.name} must be ≥ 0.")
        if not 0.0 <= self.strength_blend <= 1.0:
            raise ValueError(f"strength_blend must be in [0, 1], got {self.strength_blend!r}.")
        if not 0.0 < self.scoring_prob_floor < self.scoring_prob_ceiling < 1.0:
            raise ValueError("scoring probability clip must satisfy 0 < floor < ceiling < 1.")
        if not 0.0 <= self.home_pace_weight <= 1.0:
            raise ValueError(f"home_pace_weight must be in [0, 1], got {self.home_pace_weight!r}.")
        if self.min_possessions < 1 or self.max_possessions < self.min_possessions:
            raise ValueError(
                f"possession band [{self.min_possessions}, {self.max_possessions}] is invalid."
            )
        if self.possession_variance < 0:
            raise ValueError("possession_variance must be ≥ 0.")
        if not 0.0 <= self.strength_variance < 1.0:
            raise ValueError(f"strength_variance must be in [0, 1), got {self.strength_variance!r}.")
        if not 0.0 <= self.game_strength_floor <= self.game_strength_ceiling <= 100.0:
            raise ValueError("game strength clamp must satisfy 0 ≤ floor ≤ ceiling ≤ 100.")
        if self.home_field_advantage <= 0 or not 0.0 <= self.home_field_variance < 1.0:
            raise ValueError("home-field boost must be positive with variance in [0, 1).")
        if not 0.0 <= self.chaos_probability <= 1.0:
            raise ValueError(f"chaos_probability must be in [0, 1], got {self.chaos_probability!r}.")
        if not self.chaos_points or any(p < 0 for p in self.chaos_points):
            raise ValueError("chaos_points must be a non-empty tuple of non-negative ints.")
        if not 0 < self.min_iterations <= self.default_iterations <= self.max_iterations:
            raise ValueError(
                "iteration bounds must satisfy 0 < min ≤ default ≤ max "
                f"(got {self.min_iterations}, {self.default_iterations}, {self.max_iterations})."
            )
        if not 0.0 < self.score_interval_confidence < 1.0:
            raise ValueError("score_interval_confidence must be in (0, 1).")
        if self.league.drives_per_game <= 0 or self.league.total_plays <= 0:
            raise ValueError("league.drives_per_game and league.total_plays must be positive.")

    def __repr__(self) -> str:
        return (
            f"EngineConfig(home_field={self.home_field_advantage}, "
            f"strength_var={self.strength_variance}, "
            f"chaos={self.chaos_probability})"
        )
