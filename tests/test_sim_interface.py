"""
Tests for engine value types and their boundary validation
Run with: pytest tests/test_sim_interface.py -v
"""

import dataclasses
import math

import pytest

from nfl_edge.core.engine_config import LeagueBaselines
from nfl_edge.core.sim_interface import (
    MarketLine,
    SimulationResult,
    TeamStatisticalProfile,
    WeatherCondition,
    WeatherConditions,
)
from nfl_edge.services.team_stats import league_average_profile


def _result(**overrides) -> SimulationResult:
    values = dict(
        home_win_probability=55.0,
        away_win_probability=43.0,
        tie_probability=2.0,
        favorite_cover_probability=51.0,
        underdog_cover_probability=49.0,
        over_probability=47.5,
        under_probability=52.5,
        predicted_home_score=24,
        predicted_away_score=20,
        iterations=1000,
        favorite_is_home=True,
    )
    values.update(overrides)
    return SimulationResult(**values)


class TestTeamStatisticalProfile:
    """Profiles are validated once at construction"""

    def test_league_average_profile_is_valid(self):
        profile = league_average_profile("Bears")
        assert profile.team == "Bears"
        assert profile.points_per_game == pytest.approx(22.8)

    def test_negative_stat_raises(self):
        profile = league_average_profile("Bears")
        with pytest.raises(ValueError, match="passing_yards"):
            dataclasses.replace(profile, passing_yards=-1.0)

    def test_nan_stat_raises(self):
        profile = league_average_profile("Bears")
        with pytest.raises(ValueError, match="yards_per_play"):
            dataclasses.replace(profile, yards_per_play=math.nan)

    def test_turnover_differential_may_be_negative(self):
        profile = dataclasses.replace(league_average_profile("Bears"), turnover_differential=-0.8)
        assert profile.turnover_differential == -0.8

    def test_stat_fields_excludes_team(self):
        names = TeamStatisticalProfile.stat_fields()
        assert "team" not in names
        assert "drives_per_game" in names
        assert len(names) == 43


class TestWeatherConditions:
    """Weather parsing and range checks"""

    def test_condition_parsed_from_string(self):
        weather = WeatherConditions(condition="Snow")
        assert weather.condition is WeatherCondition.SNOW

    def test_unknown_condition_raises(self):
        with pytest.raises(ValueError):
            WeatherConditions(condition="hail")

    def test_thunderstorm_counts_as_rain(self):
        assert WeatherCondition.THUNDERSTORM.is_rain
        assert not WeatherCondition.SNOW.is_rain

    @pytest.mark.parametrize("kwargs", [
        {"wind_speed": -1.0},
        {"precipitation": 150.0},
        {"temperature": math.inf},
        {"impact_rating": "severe"},
    ])
    def test_out_of_range_raises(self, kwargs):
        with pytest.raises(ValueError):
            WeatherConditions(**kwargs)


class TestMarketLine:
    """Market validation and fallback construction"""

    def test_valid_line(self):
        line = MarketLine(spread=-3.0, total=44.5, home_moneyline=-150, away_moneyline=130)
        assert line.warnings == ()

    def test_non_positive_total_raises(self):
        with pytest.raises(ValueError):
            MarketLine(spread=-3.0, total=0.0, home_moneyline=-150, away_moneyline=130)

    def test_invalid_moneyline_raises(self):
        with pytest.raises(ValueError):
            MarketLine(spread=-3.0, total=44.0, home_moneyline=-50, away_moneyline=130)

    def test_fallbacks_for_empty_feed(self):
        line = MarketLine.with_fallbacks(None, None)
        assert line.spread == 0.0
        assert line.total == 45.0
        assert (line.home_moneyline, line.away_moneyline) == (-110, -110)
        assert len(line.warnings) == 3

    def test_moneylines_estimated_from_spread(self):
        line = MarketLine.with_fallbacks(-3.0, 44.0)
        assert (line.home_moneyline, line.away_moneyline) == (-220, 235)
        assert len(line.warnings) == 1
        assert "estimated from spread" in line.warnings[0]

    def test_missing_away_price_derived_from_home(self):
        line = MarketLine.with_fallbacks(-3.0, 44.0, home_moneyline=-150)
        assert line.away_moneyline == 162
        assert line.warnings == ("Missing away moneyline; derived +162 from home price",)

    def test_missing_home_price_derived_from_away(self):
        line = MarketLine.with_fallbacks(3.0, 44.0, away_moneyline=-150)
        assert line.home_moneyline == 162

    def test_complete_feed_has_no_warnings(self):
        line = MarketLine.with_fallbacks(-3.0, 44.0, -150, 130)
        assert line.warnings == ()

    def test_custom_default_total(self):
        assert MarketLine.with_fallbacks(0.0, None, default_total=47.5).total == 47.5

    def test_missing_total_uses_league_baseline(self):
        line = MarketLine.with_fallbacks(-3.0, None, -150, 130)
        assert line.total == LeagueBaselines().market_total
        assert line.warnings == ("Missing total; using league average (45.0)",)


class TestSimulationResult:
    """Probability invariants and serialisation"""

    def test_valid_result_passes(self):
        _result().validate()

    def test_win_probabilities_must_sum_to_100(self):
        with pytest.raises(ValueError, match="win/loss/tie"):
            _result(tie_probability=5.0).validate()

    def test_cover_probabilities_must_sum_to_100(self):
        with pytest.raises(ValueError, match="cover"):
            _result(underdog_cover_probability=40.0).validate()

    def test_probability_out_of_range(self):
        with pytest.raises(ValueError):
            _result(over_probability=120.0, under_probability=-20.0).validate()

    def test_negative_predicted_score(self):
        with pytest.raises(ValueError):
            _result(predicted_away_score=-1).validate()

    def test_to_dict_rounds(self):
        payload = _result(over_probability=47.5561, under_probability=52.4439).to_dict()
        assert payload["over_probability"] == 47.56
        assert payload["iterations"] == 1000
        assert "margin_sd" not in payload
