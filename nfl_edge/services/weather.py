"""
Weather impact on offensive efficiency.

Three ordered threshold ladders (wind, temperature, precipitation) each
contribute a multiplicative modifier to passing and rushing efficiency.
Within a ladder only the most severe rung fires.  The two modifiers are
blended by the offence's own pass/rush yardage mix, so a pass-heavy team
loses more in a crosswind than a run-heavy one, and the opposing defence
receives a fixed fraction of whatever the offence lost.

A game in a dome, a game with no reported weather, or one whose impact
rating is ``"none"`` is weather-neutral: strengths pass through
unchanged and both modifiers are exactly 1.0.
"""

import logging
from typing import List, Optional

from nfl_edge.core.engine_config import EngineConfig, WeatherThresholds
from nfl_edge.core.numeric import clamp, safe_divide
from nfl_edge.core.sim_interface import (
    IMPACT_RATINGS,
    WeatherAdjustment,
    WeatherCondition,
    WeatherConditions,
)

logger = logging.getLogger(__name__)

NEUTRAL_EXPLANATION = "No weather impact"


def impact_score(weather: WeatherConditions, thresholds: WeatherThresholds) -> int:
    """Sum of the impact points for every ladder rung the weather reaches."""
    t = thresholds
    score = 0

    if weather.temperature < t.extreme_cold:
        score += t.impact_extreme_cold
    elif weather.temperature < t.freezing:
        score += t.impact_freezing
    elif weather.temperature < t.cold:
        score += t.impact_cold
    elif weather.temperature > t.extreme_heat:
        score += t.impact_extreme_heat

    if weather.wind_speed >= t.wind_extreme:
        score += t.impact_wind_extreme
    elif weather.wind_speed >= t.wind_high:
        score += t.impact_wind_high
    elif weather.wind_speed >= t.wind_moderate:
        score += t.impact_wind_moderate
    elif weather.wind_speed >= t.wind_light:
        score += t.impact_wind_light

    if weather.condition is WeatherCondition.SNOW:
        score += t.impact_snow
    elif weather.condition.is_rain:
        score += t.impact_heavy_rain if weather.precipitation > t.heavy_rain else t.impact_rain

    return score


def impact_rating(weather: Optional[WeatherConditions], thresholds: WeatherThresholds) -> str:
    """
    Rate the weather ``none | low | medium | high | extreme``.

    A dome or missing report always rates ``none``.  A rating supplied by
    the weather feed takes precedence over the computed one.
    """
    if weather is None or weather.is_dome:
        return "none"
    if weather.impact_rating is not None:
        return weather.impact_rating

    score = impact_score(weather, thresholds)
    if score >= thresholds.rating_extreme:
        return "extreme"
    if score >= thresholds.rating_high:
        return "high"
    if score >= thresholds.rating_medium:
        return "medium"
    if score >= thresholds.rating_low:
        return "low"
    return "none"


class WeatherAdjuster:
    """Apply weather ladders to a (offence, defence) strength pair."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self._thresholds = config.weather_thresholds
        self._mods = config.weather_modifiers

    def is_neutral(self, weather: Optional[WeatherConditions]) -> bool:
        return impact_rating(weather, self._thresholds) == IMPACT_RATINGS[0]

    def modifiers(self, weather: WeatherConditions):
        """
        Passing and rushing modifiers plus the sentence for each rung hit.

        Returns:
            ``(passing_modifier, rushing_modifier, reasons)``
        """
        t, m = self._thresholds, self._mods
        passing = 1.0
        rushing = 1.0
        reasons: List[str] = []

        # Wind replaces: only the strongest rung applies.
        wind = weather.wind_speed
        if wind >= t.wind_high:
            passing, rushing = m.pass_high_winds, m.rush_high_winds
            reasons.append(f"High winds ({wind:.0f} mph) severely limit passing")
        elif wind >= t.wind_moderate:
            passing, rushing = m.pass_moderate_winds, m.rush_moderate_winds
            reasons.append(f"Moderate winds ({wind:.0f} mph) affect passing accuracy")
        elif wind >= t.wind_light:
            passing = m.pass_light_winds
            reasons.append(f"Light winds ({wind:.0f} mph) slightly affect deep passing")

        temp = weather.temperature
        if temp < t.extreme_cold:
            passing *= m.pass_extreme_cold
            rushing *= m.rush_extreme_cold
            reasons.append(f"Extreme cold ({temp:.0f}°F) affects ball handling")
        elif temp < t.freezing:
            passing *= m.pass_freezing
            reasons.append(f"Freezing temperatures ({temp:.0f}°F) affect passing")

        if weather.condition is WeatherCondition.SNOW:
            passing *= m.pass_snow
            rushing *= m.rush_snow
            reasons.append("Snow conditions significantly impact all phases")
        elif weather.condition.is_rain and weather.precipitation > t.heavy_rain:
            passing *= m.pass_heavy_rain
            rushing *= m.rush_heavy_rain
            reasons.append("Heavy rain affects ball security and footing")
        elif weather.condition.is_rain:
            passing *= m.pass_light_rain
            reasons.append("Light rain slightly affects passing")

        return passing, rushing, reasons

    def adjust(
        self,
        weather: Optional[WeatherConditions],
        offense: float,
        defense: float,
        passing_yards: float,
        rushing_yards: float,
    ) -> WeatherAdjustment:
        """
        Weather-adjusted strengths for one side's offence against the
        opposing defence.

        Args:
            weather: Kickoff conditions, or None when unknown.
            offense: Offence strength (0–100) of the team with the ball.
            defense: Defence strength (0–100) of the team defending.
            passing_yards: The offence's passing yards per game.
            rushing_yards: The offence's rushing yards per game.  Together
                with ``passing_yards`` this sets the pass/rush blend; a
                team with no yardage at all is treated as 50/50.
        """
        if self.is_neutral(weather):
            return WeatherAdjustment(adjusted_offense=offense, adjusted_defense=defense)

        passing, rushing, reasons = self.modifiers(weather)

        pass_share = safe_divide(passing_yards, passing_yards + rushing_yards, 0.5)
        overall = passing * pass_share + rushing * (1.0 - pass_share)

        adjusted_offense = clamp(offense * overall, 0.0, 100.0)
        adjusted_defense = clamp(
            defense * (1.0 + (1.0 - overall) * self._mods.defensive_benefit), 0.0, 100.0
        )

        logger.debug(
            "Weather adjust: pass=%.3f rush=%.3f overall=%.3f off %.1f→%.1f def %.1f→%.1f",
            passing, rushing, overall, offense, adjusted_offense, defense, adjusted_defense,
        )

        return WeatherAdjustment(
            adjusted_offense=adjusted_offense,
            adjusted_defense=adjusted_defense,
            passing_modifier=passing,
            rushing_modifier=rushing,
            overall_modifier=overall,
            explanation="; ".join(reasons) if reasons else NEUTRAL_EXPLANATION,
        )
