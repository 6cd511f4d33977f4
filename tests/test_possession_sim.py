"""
Tests for the drive-level possession simulator
Run with: pytest tests/test_possession_sim.py -v
"""

import dataclasses

import numpy as np
import pytest

from nfl_edge.core.engine_config import EngineConfig
from nfl_edge.core.sim_interface import WeatherAdjustment
from nfl_edge.services.possession_sim import PossessionOdds, PossessionSimulator
from nfl_edge.services.team_stats import league_average_profile


class ScriptedRng:
    """Returns pre-scripted draws in order."""

    def __init__(self, randoms=()):
        self._randoms = list(randoms)

    def random(self):
        return self._randoms.pop(0)

    def integers(self, low, high):
        raise AssertionError("possession simulation draws no integers")

    def uniform(self, low, high):
        raise AssertionError("possession simulation draws no uniforms")

    @property
    def exhausted(self):
        return not self._randoms


ODDS = PossessionOdds(turnover_prob=0.10, scoring_prob=0.50, td_threshold=45.0, fg_threshold=80.0)


class TestCascadeBranches:
    """A scripted generator drives each branch of the cascade"""

    def test_turnover_returns_zero(self):
        rng = ScriptedRng([0.05])
        assert PossessionSimulator.resolve(ODDS, rng) == 0
        assert rng.exhausted

    def test_failed_scoring_check_returns_zero(self):
        rng = ScriptedRng([0.50, 0.90])
        assert PossessionSimulator.resolve(ODDS, rng) == 0
        assert rng.exhausted

    def test_touchdown(self):
        rng = ScriptedRng([0.50, 0.10, 0.30])
        assert PossessionSimulator.resolve(ODDS, rng) == 7

    def test_field_goal(self):
        rng = ScriptedRng([0.50, 0.10, 0.60])
        assert PossessionSimulator.resolve(ODDS, rng) == 3

    def test_stalled_drive(self):
        rng = ScriptedRng([0.50, 0.10, 0.95])
        assert PossessionSimulator.resolve(ODDS, rng) == 0

    def test_threshold_boundaries(self):
        # Rolls exactly on a threshold fall into the next band.
        assert PossessionSimulator.resolve(ODDS, ScriptedRng([0.5, 0.1, 0.45])) == 3
        assert PossessionSimulator.resolve(ODDS, ScriptedRng([0.5, 0.1, 0.80])) == 0
        assert PossessionSimulator.resolve(ODDS, ScriptedRng([0.10, 0.1, 0.0])) == 7

    def test_simulate_from_profiles(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        assert sim.simulate(avg, avg, None, ScriptedRng([0.5, 0.1, 0.30])) == 7


class TestPossessionOdds:
    """Transition probabilities built from the two profiles"""

    def test_average_matchup(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        odds = sim.compute_odds(avg, avg)

        assert odds.turnover_prob == pytest.approx(1.2 / 61.2)
        assert odds.scoring_prob == pytest.approx(0.5, abs=0.01)
        assert odds.td_threshold == pytest.approx(55.2 * 0.6 + (1.6 + 0.9) * 5.0)
        assert odds.fg_threshold == pytest.approx(odds.td_threshold + 35.0)

    def test_turnover_rate_averages_both_sides(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        offence = dataclasses.replace(league_average_profile("O"), turnovers_lost=2.2)
        defence = dataclasses.replace(league_average_profile("D"), turnovers_forced=0.0)
        odds = sim.compute_odds(offence, defence)
        assert odds.turnover_prob == pytest.approx((2.2 / 61.2 + 0.0) / 2.0)

    def test_turnover_rate_is_per_play(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        slow = dataclasses.replace(avg, drives_per_game=8.0, def_drives_per_game=8.0)
        assert sim.compute_odds(slow, slow).turnover_prob == pytest.approx(1.2 / 61.2)
        assert sim.compute_odds(avg, avg).turnover_prob < 0.05

    def test_zero_plays_uses_league_rate(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        offence = dataclasses.replace(league_average_profile("O"), total_plays=0.0)
        defence = dataclasses.replace(league_average_profile("D"), def_total_plays=0.0)
        odds = sim.compute_odds(offence, defence)
        assert odds.turnover_prob == pytest.approx(1.2 / 61.2)

    def test_adjustment_strengths_are_used(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        adj = WeatherAdjustment(adjusted_offense=90.0, adjusted_defense=10.0)
        odds = sim.compute_odds(avg, avg, adj)
        assert odds.scoring_prob == pytest.approx(0.7 * 0.9 + 0.3 * 0.5)

    def test_scoring_probability_clipped(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        offence = league_average_profile("O")
        defence = dataclasses.replace(league_average_profile("D"), def_yards_per_play_allowed=0.0)
        adj = WeatherAdjustment(adjusted_offense=100.0, adjusted_defense=0.0)
        assert sim.compute_odds(offence, defence, adj).scoring_prob == pytest.approx(0.99)

        adj = WeatherAdjustment(adjusted_offense=0.0, adjusted_defense=100.0)
        blank = dataclasses.replace(offence, yards_per_play=0.0)
        assert sim.compute_odds(blank, league_average_profile("D"), adj).scoring_prob == pytest.approx(0.01)

    def test_zero_strengths_treated_as_even(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        adj = WeatherAdjustment(adjusted_offense=0.0, adjusted_defense=0.0)
        assert sim.compute_odds(avg, avg, adj).scoring_prob == pytest.approx(0.5)

    def test_better_red_zone_raises_td_threshold(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        finisher = dataclasses.replace(avg, red_zone_efficiency=70.0)
        assert sim.compute_odds(finisher, avg).td_threshold > sim.compute_odds(avg, avg).td_threshold


class TestOutcomeDistribution:
    """Sampled outcomes stay in {0, 3, 7} and match the analytic mean"""

    def test_outcomes_in_allowed_set(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        rng = np.random.default_rng(1)
        avg = league_average_profile("Avg")
        outcomes = {sim.simulate(avg, avg, None, rng) for _ in range(2000)}
        assert outcomes <= {0, 3, 7}
        assert outcomes == {0, 3, 7}

    def test_expected_points_for_average_matchup(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        assert 1.9 < sim.expected_points(avg, avg) < 2.2

    def test_sampled_mean_matches_expected_points(self):
        sim = PossessionSimulator(EngineConfig.nfl())
        avg = league_average_profile("Avg")
        odds = sim.compute_odds(avg, avg)
        rng = np.random.default_rng(7)
        points = [sim.resolve(odds, rng) for _ in range(20_000)]
        assert np.mean(points) == pytest.approx(sim.expected_points(avg, avg), abs=0.1)
