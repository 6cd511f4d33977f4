"""
Tests for weather impact ratings and strength adjustment
Run with: pytest tests/test_weather.py -v
"""

import pytest

from nfl_edge.core.engine_config import EngineConfig, WeatherThresholds
from nfl_edge.core.sim_interface import WeatherConditions
from nfl_edge.services.weather import (
    NEUTRAL_EXPLANATION,
    WeatherAdjuster,
    impact_rating,
    impact_score,
)

PASS_YDS = 228.4
RUSH_YDS = 114.5


def _adjuster() -> WeatherAdjuster:
    return WeatherAdjuster(EngineConfig.nfl())


class TestImpactRating:
    """Threshold ladders map to none/low/medium/high/extreme"""

    @pytest.mark.parametrize("weather,expected", [
        (WeatherConditions(temperature=72.0, wind_speed=5.0), "none"),
        (WeatherConditions(temperature=35.0), "low"),
        (WeatherConditions(temperature=60.0, wind_speed=15.0, condition="rain"), "medium"),
        (WeatherConditions(temperature=30.0, wind_speed=20.0), "high"),
        (WeatherConditions(temperature=15.0, wind_speed=25.0), "extreme"),
        (WeatherConditions(temperature=100.0), "low"),
    ])
    def test_rating_ladder(self, weather, expected):
        assert impact_rating(weather, WeatherThresholds()) == expected

    def test_heavy_rain_scores_more_than_light(self):
        t = WeatherThresholds()
        heavy = WeatherConditions(condition="rain", precipitation=80.0)
        light = WeatherConditions(condition="rain", precipitation=20.0)
        assert impact_score(heavy, t) == 2
        assert impact_score(light, t) == 1

    def test_dome_always_none(self):
        dome = WeatherConditions(temperature=5.0, wind_speed=40.0, condition="snow", is_dome=True)
        assert impact_rating(dome, WeatherThresholds()) == "none"

    def test_missing_weather_is_none(self):
        assert impact_rating(None, WeatherThresholds()) == "none"

    def test_feed_rating_takes_precedence(self):
        calm_but_flagged = WeatherConditions(impact_rating="high")
        assert impact_rating(calm_but_flagged, WeatherThresholds()) == "high"


class TestNeutralWeather:
    """Absent, dome and calm weather leave strengths untouched"""

    def test_no_weather(self):
        adj = _adjuster().adjust(None, 62.0, 48.0, PASS_YDS, RUSH_YDS)
        assert adj.adjusted_offense == 62.0
        assert adj.adjusted_defense == 48.0
        assert adj.passing_modifier == 1.0
        assert adj.rushing_modifier == 1.0
        assert adj.explanation == NEUTRAL_EXPLANATION

    @pytest.mark.parametrize("wind,temp,condition", [
        (0.0, 72.0, "clear"),
        (35.0, 72.0, "clear"),
        (10.0, -5.0, "snow"),
        (25.0, 28.0, "thunderstorm"),
    ])
    def test_dome_is_neutral_for_any_conditions(self, wind, temp, condition):
        dome = WeatherConditions(temperature=temp, wind_speed=wind, condition=condition,
                                 precipitation=90.0, is_dome=True)
        adj = _adjuster().adjust(dome, 55.0, 45.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == 1.0
        assert adj.rushing_modifier == 1.0
        assert (adj.adjusted_offense, adj.adjusted_defense) == (55.0, 45.0)

    def test_calm_outdoor_is_neutral(self):
        calm = WeatherConditions(temperature=65.0, wind_speed=4.0)
        adj = _adjuster().adjust(calm, 55.0, 45.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == 1.0
        assert adj.adjusted_offense == 55.0


class TestLadders:
    """Each ladder moves the passing/rushing modifiers"""

    def test_high_wind_reduces_passing(self):
        calm = _adjuster().adjust(WeatherConditions(wind_speed=0.0), 50.0, 50.0, PASS_YDS, RUSH_YDS)
        windy = _adjuster().adjust(WeatherConditions(wind_speed=22.0), 50.0, 50.0, PASS_YDS, RUSH_YDS)
        assert windy.passing_modifier < calm.passing_modifier
        assert windy.passing_modifier == pytest.approx(0.65)
        assert windy.rushing_modifier == pytest.approx(1.10)

    def test_wind_rungs_are_ordered(self):
        mods = [
            _adjuster().adjust(WeatherConditions(wind_speed=w), 50.0, 50.0, PASS_YDS, RUSH_YDS).passing_modifier
            for w in (10.0, 15.0, 20.0)
        ]
        assert mods == pytest.approx([0.90, 0.80, 0.65])

    def test_extreme_cold_and_snow_compound(self):
        weather = WeatherConditions(temperature=10.0, condition="snow", precipitation=40.0)
        adj = _adjuster().adjust(weather, 50.0, 50.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == pytest.approx(0.85 * 0.75)
        assert adj.rushing_modifier == pytest.approx(0.95 * 0.90)

    def test_freezing_only_hits_passing(self):
        adj = _adjuster().adjust(WeatherConditions(temperature=28.0), 50.0, 50.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == pytest.approx(0.92)
        assert adj.rushing_modifier == 1.0

    def test_heavy_rain(self):
        weather = WeatherConditions(condition="rain", precipitation=80.0)
        adj = _adjuster().adjust(weather, 50.0, 50.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == pytest.approx(0.85)
        assert adj.rushing_modifier == pytest.approx(0.95)

    def test_light_rain(self):
        weather = WeatherConditions(condition="thunderstorm", precipitation=20.0)
        adj = _adjuster().adjust(weather, 50.0, 50.0, PASS_YDS, RUSH_YDS)
        assert adj.passing_modifier == pytest.approx(0.95)
        assert adj.rushing_modifier == 1.0

    def test_explanation_joins_every_rung(self):
        weather = WeatherConditions(temperature=10.0, wind_speed=22.0, condition="snow")
        adj = _adjuster().adjust(weather, 50.0, 50.0, PASS_YDS, RUSH_YDS)
        parts = adj.explanation.split("; ")
        assert len(parts) == 3
        assert parts[0].startswith("High winds (22 mph)")


class TestStrengthAdjustment:
    """Yardage mix blending and the defensive benefit"""

    def test_blend_and_defensive_benefit(self):
        adj = _adjuster().adjust(WeatherConditions(wind_speed=22.0), 50.0, 50.0, PASS_YDS, RUSH_YDS)
        share = PASS_YDS / (PASS_YDS + RUSH_YDS)
        overall = 0.65 * share + 1.10 * (1.0 - share)
        assert adj.overall_modifier == pytest.approx(overall)
        assert adj.adjusted_offense == pytest.approx(50.0 * overall)
        assert adj.adjusted_defense == pytest.approx(50.0 * (1.0 + (1.0 - overall) * 0.3))
        assert adj.adjusted_defense > 50.0

    def test_pass_heavy_team_hurt_more_by_wind(self):
        wind = WeatherConditions(wind_speed=22.0)
        passer = _adjuster().adjust(wind, 50.0, 50.0, 320.0, 70.0)
        runner = _adjuster().adjust(wind, 50.0, 50.0, 150.0, 180.0)
        assert passer.adjusted_offense < runner.adjusted_offense

    def test_no_yardage_splits_evenly(self):
        adj = _adjuster().adjust(WeatherConditions(wind_speed=22.0), 50.0, 50.0, 0.0, 0.0)
        assert adj.overall_modifier == pytest.approx(0.5 * 0.65 + 0.5 * 1.10)

    def test_adjusted_strengths_are_clamped(self):
        # A pure running team in wind gains, and cannot exceed 100.
        adj = _adjuster().adjust(WeatherConditions(wind_speed=22.0), 100.0, 50.0, 0.0, 150.0)
        assert adj.adjusted_offense == 100.0
        assert 0.0 <= adj.adjusted_defense <= 100.0
