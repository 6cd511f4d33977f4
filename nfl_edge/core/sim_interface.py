"""Value types that flow into and out of the simulation engine.

Design choices
--------------
* Every record here is a frozen, slotted dataclass so it can be shared
  across worker threads and cached safely.  Inputs are validated once in
  ``__post_init__``; computation code never re-checks or re-defaults them.
* :class:`TeamStatisticalProfile` carries **no** defaults.  Filling
  missing statistics is the job of the team-stats boundary
  (:mod:`nfl_edge.services.team_stats`), which documents the
  league-average table.  The engine only ever sees fully populated
  profiles.
* Randomness is a dependency.  :class:`RandomSource` is the structural
  interface every component draws from; ``numpy.random.Generator``
  satisfies it, and tests substitute scripted stubs.

Run tests with::

    pytest tests/test_sim_interface.py -v
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, fields
from typing import Protocol

from nfl_edge.core.engine_config import LeagueBaselines
from nfl_edge.core.odds_math import counterpart_moneyline, estimate_moneylines_from_spread

# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------


class RandomSource(Protocol):
    """The subset of ``numpy.random.Generator`` the engine relies on.

    Shared generator state is not safe across threads; give each
    concurrently simulated game its own generator.
    """

    def random(self) -> float:
        """Uniform draw on ``[0, 1)``."""

    def integers(self, low: int, high: int) -> int:
        """Uniform integer on ``[low, high)``."""

    def uniform(self, low: float, high: float) -> float:
        """Uniform float on ``[low, high)``."""


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class TeamStatisticalProfile:
    """A team's season-to-date per-game averages.

    Percent-style rates (completion %, third-down %, red-zone %) are on a
    0–100 scale.  All other fields are per-game averages.  Every numeric
    field must be finite and non-negative except
    ``turnover_differential``, which is signed.

    The profile is read-only input: the engine never mutates it.
    """

    team: str
    games_played: float

    # Scoring
    points_per_game: float
    points_allowed_per_game: float

    # Volume
    offensive_yards_per_game: float
    defensive_yards_allowed: float

    # Passing offence
    pass_attempts: float
    pass_completions: float
    pass_completion_pct: float
    passing_yards: float
    passing_tds: float
    interceptions_thrown: float
    yards_per_pass_attempt: float

    # Rushing offence
    rushing_attempts: float
    rushing_yards: float
    rushing_tds: float
    yards_per_rush: float

    # Overall efficiency
    total_plays: float
    yards_per_play: float
    first_downs: float
    third_down_conversion_rate: float
    red_zone_efficiency: float

    # Discipline
    penalties: float
    penalty_yards: float

    # Turnovers
    turnovers_lost: float
    fumbles_lost: float
    turnovers_forced: float
    fumbles_forced: float
    turnover_differential: float

    # Pass defence
    def_pass_attempts: float
    def_pass_completions_allowed: float
    def_passing_yards_allowed: float
    def_passing_tds_allowed: float
    def_interceptions: float

    # Rush defence
    def_rushing_attempts_allowed: float
    def_rushing_yards_allowed: float
    def_rushing_tds_allowed: float

    # Overall defence
    def_total_plays: float
    def_yards_per_play_allowed: float
    def_first_downs_allowed: float
    def_third_down_conversion_rate: float
    def_red_zone_efficiency: float

    # Pace
    drives_per_game: float
    def_drives_per_game: float

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "team":
                continue
            value = getattr(self, f.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(
                    f"{self.team}: {f.name} must be a finite number, got {value!r}."
                )
            if f.name != "turnover_differential" and value < 0:
                raise ValueError(f"{self.team}: {f.name} must be ≥ 0, got {value!r}.")

    @classmethod
    def stat_fields(cls) -> tuple[str, ...]:
        """Names of every statistical field (everything except ``team``)."""
        return tuple(f.name for f in fields(cls) if f.name != "team")


#: Weather impact ratings in increasing severity.
IMPACT_RATINGS: tuple[str, ...] = ("none", "low", "medium", "high", "extreme")


class WeatherCondition(str, enum.Enum):
    """Categorical sky condition reported by the weather feed."""

    CLEAR = "clear"
    CLOUDS = "clouds"
    RAIN = "rain"
    SNOW = "snow"
    THUNDERSTORM = "thunderstorm"
    FOG = "fog"

    @classmethod
    def parse(cls, value: str | WeatherCondition) -> WeatherCondition:
        """Parse a feed string case-insensitively (``"Snow"`` → SNOW)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown weather condition {value!r}.") from None

    @property
    def is_rain(self) -> bool:
        return self in (WeatherCondition.RAIN, WeatherCondition.THUNDERSTORM)


@dataclass(slots=True, frozen=True)
class WeatherConditions:
    """Kickoff weather for one game.

    Attributes:
        temperature: Degrees Fahrenheit.
        wind_speed: Sustained wind in mph (≥ 0).
        precipitation: Relative intensity on a 0–100 scale.
        condition: Categorical sky condition; strings are parsed.
        is_dome: Indoor stadium.  A dome game is always weather-neutral.
        impact_rating: Optional pre-computed rating from the feed
            (``none|low|medium|high|extreme``).  When absent the weather
            adjuster derives it from the threshold ladders.
    """

    temperature: float = 72.0
    wind_speed: float = 0.0
    precipitation: float = 0.0
    condition: WeatherCondition = WeatherCondition.CLEAR
    is_dome: bool = False
    impact_rating: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "condition", WeatherCondition.parse(self.condition))
        if not math.isfinite(self.temperature):
            raise ValueError(f"temperature must be finite, got {self.temperature!r}.")
        if not (math.isfinite(self.wind_speed) and self.wind_speed >= 0):
            raise ValueError(f"wind_speed must be ≥ 0, got {self.wind_speed!r}.")
        if not 0.0 <= self.precipitation <= 100.0:
            raise ValueError(f"precipitation must be in [0, 100], got {self.precipitation!r}.")
        if self.impact_rating is not None and self.impact_rating not in IMPACT_RATINGS:
            raise ValueError(f"impact_rating must be one of {IMPACT_RATINGS}, got {self.impact_rating!r}.")


@dataclass(slots=True, frozen=True)
class MarketLine:
    """Posted market for one game.

    Attributes:
        spread: Handicap from the home side's perspective; negative means
            the home side is favoured (``-3.5`` → home gives 3.5).
        total: Posted over/under line (> 0).
        home_moneyline: American price on the home side winning outright.
        away_moneyline: American price on the away side.
        warnings: Human-readable notes for every fallback used to build
            this line (see :meth:`with_fallbacks`).
    """

    spread: float
    total: float
    home_moneyline: int
    away_moneyline: int
    warnings: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.spread):
            raise ValueError(f"spread must be finite, got {self.spread!r}.")
        if not (math.isfinite(self.total) and self.total > 0):
            raise ValueError(f"total must be positive, got {self.total!r}.")
        for name in ("home_moneyline", "away_moneyline"):
            price = getattr(self, name)
            if abs(price) < 100:
                raise ValueError(f"{name} {price!r} is not a valid American price (|odds| ≥ 100).")

    @classmethod
    def with_fallbacks(
        cls,
        spread: float | None,
        total: float | None,
        home_moneyline: int | None = None,
        away_moneyline: int | None = None,
        *,
        default_total: float = LeagueBaselines.market_total,
    ) -> MarketLine:
        """Build a line from a partial feed, recording every fallback.

        * Missing spread → pick'em (0).
        * Missing total → ``default_total`` (``LeagueBaselines.market_total``).
        * One moneyline missing → derived from the other with typical vig.
        * Both missing → estimated from the spread.
        """
        notes: list[str] = []
        if spread is None:
            spread = 0.0
            notes.append("Missing spread; using pick'em (0)")
        if total is None:
            total = default_total
            notes.append(f"Missing total; using league average ({default_total})")

        if home_moneyline is not None and away_moneyline is None:
            away_moneyline = counterpart_moneyline(home_moneyline)
            notes.append(f"Missing away moneyline; derived {away_moneyline:+d} from home price")
        elif away_moneyline is not None and home_moneyline is None:
            home_moneyline = counterpart_moneyline(away_moneyline)
            notes.append(f"Missing home moneyline; derived {home_moneyline:+d} from away price")
        elif home_moneyline is None and away_moneyline is None:
            home_moneyline, away_moneyline = estimate_moneylines_from_spread(spread)
            notes.append(
                f"Missing moneylines; estimated from spread: home {home_moneyline:+d}, "
                f"away {away_moneyline:+d}"
            )

        return cls(
            spread=float(spread),
            total=float(total),
            home_moneyline=int(home_moneyline),
            away_moneyline=int(away_moneyline),
            warnings=tuple(notes),
        )


# ---------------------------------------------------------------------------
# Intermediates
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class TeamStrength:
    """Offensive and defensive strength on the common 0–100 scale."""

    offense: float
    defense: float


@dataclass(slots=True, frozen=True)
class WeatherAdjustment:
    """Strengths after weather, with the modifiers that produced them.

    ``adjusted_offense`` belongs to the team with the ball;
    ``adjusted_defense`` to the team defending it.
    """

    adjusted_offense: float
    adjusted_defense: float
    passing_modifier: float = 1.0
    rushing_modifier: float = 1.0
    overall_modifier: float = 1.0
    explanation: str = "No weather impact"


@dataclass(slots=True, frozen=True)
class GameScore:
    """Final score of one simulated replay."""

    home_score: int
    away_score: int


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class CalibrationSummary:
    """How far the raw simulation sat from the market, and the shift applied.

    Attributes:
        raw_mean_total: Mean simulated combined score.
        raw_mean_margin: Mean simulated favourite-minus-underdog margin.
        total_offset: ``raw_mean_total − market total``.
        margin_offset: ``raw_mean_margin − |spread|``.
        calibrated_mean_total: Mean combined score after the shift
            (equals the market total up to floating-point error).
        calibrated_mean_margin: Mean margin after the shift (equals
            ``|spread|``).
    """

    raw_mean_total: float
    raw_mean_margin: float
    total_offset: float
    margin_offset: float
    calibrated_mean_total: float
    calibrated_mean_margin: float


@dataclass(slots=True, frozen=True)
class SimulationResult:
    """The engine's sole output for one matchup.

    All probabilities are percentages in ``[0, 100]``.  Win, loss and tie
    sum to 100; favourite and underdog cover sum to 100; over and under
    sum to 100.  Moneyline probabilities come from the raw simulation;
    cover and over/under probabilities come from the market-calibrated
    distribution.
    """

    home_win_probability: float
    away_win_probability: float
    tie_probability: float
    favorite_cover_probability: float
    underdog_cover_probability: float
    over_probability: float
    under_probability: float
    predicted_home_score: int
    predicted_away_score: int
    iterations: int
    favorite_is_home: bool

    # Diagnostics
    calibration: CalibrationSummary | None = None
    margin_sd: float | None = None
    total_sd: float | None = None
    home_score_interval: tuple[float, float] | None = None
    away_score_interval: tuple[float, float] | None = None

    def validate(self, tol: float = 1e-6) -> None:
        """Assert the probability invariants.

        Raises:
            ValueError: If any probability is outside ``[0, 100]``, any
                pair/triple does not sum to 100, or a predicted score is
                negative.
        """
        for name in (
            "home_win_probability",
            "away_win_probability",
            "tie_probability",
            "favorite_cover_probability",
            "underdog_cover_probability",
            "over_probability",
            "under_probability",
        ):
            value = getattr(self, name)
            if not (-tol <= value <= 100.0 + tol):
                raise ValueError(f"SimulationResult.{name} must be in [0, 100], got {value!r}.")
        checks = (
            ("win/loss/tie", self.home_win_probability + self.away_win_probability + self.tie_probability),
            ("cover", self.favorite_cover_probability + self.underdog_cover_probability),
            ("over/under", self.over_probability + self.under_probability),
        )
        for label, total in checks:
            if abs(total - 100.0) > tol:
                raise ValueError(f"SimulationResult {label} probabilities must sum to 100 (got {total:.6f}).")
        if self.predicted_home_score < 0 or self.predicted_away_score < 0:
            raise ValueError("Predicted scores must be non-negative.")

    def to_dict(self) -> dict:
        payload = {
            "iterations": self.iterations,
            "favorite_is_home": self.favorite_is_home,
            "home_win_probability": round(self.home_win_probability, 2),
            "away_win_probability": round(self.away_win_probability, 2),
            "tie_probability": round(self.tie_probability, 2),
            "favorite_cover_probability": round(self.favorite_cover_probability, 2),
            "underdog_cover_probability": round(self.underdog_cover_probability, 2),
            "over_probability": round(self.over_probability, 2),
            "under_probability": round(self.under_probability, 2),
            "predicted_home_score": self.predicted_home_score,
            "predicted_away_score": self.predicted_away_score,
        }
        if self.margin_sd is not None:
            payload["margin_sd"] = round(self.margin_sd, 2)
        if self.total_sd is not None:
            payload["total_sd"] = round(self.total_sd, 2)
        if self.calibration is not None:
            payload["total_offset"] = round(self.calibration.total_offset, 2)
            payload["margin_offset"] = round(self.calibration.margin_offset, 2)
        return payload

    def __repr__(self) -> str:
        return (
            f"SimulationResult(home={self.home_win_probability:.1f}%, "
            f"away={self.away_win_probability:.1f}%, "
            f"fav_cover={self.favorite_cover_probability:.1f}%, "
            f"over={self.over_probability:.1f}%, "
            f"score={self.predicted_home_score}-{self.predicted_away_score}, "
            f"n={self.iterations})"
        )
