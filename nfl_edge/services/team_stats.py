"""
Bridge from raw team-stat records to simulation-ready profiles.

Stats providers are patchy: early in a season, or for a team the feed
does not track, some or all fields are missing.  The engine refuses
partial profiles, so this module is the one place gaps are filled.
Every missing field takes the NFL league-average value from
:data:`LEAGUE_AVERAGE_STATS`, and the caller is told which fields were
filled so the quality of a prediction can be reported alongside it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from nfl_edge.core.sim_interface import TeamStatisticalProfile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# League-average defaults (NFL 2024 regular season, per game)
# ---------------------------------------------------------------------------
# Defensive mirrors equal the offensive averages: league offence and league
# defence are the same games seen from either side.

LEAGUE_AVERAGE_STATS: Dict[str, float] = {
    "games_played": 17.0,

    "points_per_game": 22.8,
    "points_allowed_per_game": 22.8,
    "offensive_yards_per_game": 345.2,
    "defensive_yards_allowed": 345.2,

    "pass_attempts": 32.7,
    "pass_completions": 21.6,
    "pass_completion_pct": 66.1,
    "passing_yards": 228.4,
    "passing_tds": 1.6,
    "interceptions_thrown": 0.7,
    "yards_per_pass_attempt": 7.0,

    "rushing_attempts": 26.3,
    "rushing_yards": 114.5,
    "rushing_tds": 0.9,
    "yards_per_rush": 4.4,

    "total_plays": 61.2,
    "yards_per_play": 5.4,
    "first_downs": 19.6,
    "third_down_conversion_rate": 39.5,
    "red_zone_efficiency": 55.2,

    "penalties": 7.3,
    "penalty_yards": 58.4,

    "turnovers_lost": 1.2,
    "fumbles_lost": 0.5,
    "turnovers_forced": 1.2,
    "fumbles_forced": 0.5,
    "turnover_differential": 0.0,

    "def_pass_attempts": 32.7,
    "def_pass_completions_allowed": 21.6,
    "def_passing_yards_allowed": 228.4,
    "def_passing_tds_allowed": 1.6,
    "def_interceptions": 0.7,

    "def_rushing_attempts_allowed": 26.3,
    "def_rushing_yards_allowed": 114.5,
    "def_rushing_tds_allowed": 0.9,

    "def_total_plays": 61.2,
    "def_yards_per_play_allowed": 5.4,
    "def_first_downs_allowed": 19.6,
    "def_third_down_conversion_rate": 39.5,
    "def_red_zone_efficiency": 55.2,

    "drives_per_game": 11.0,
    "def_drives_per_game": 11.0,
}

QUALITY_REAL = "real"
QUALITY_PARTIAL = "partial"
QUALITY_DEFAULT = "default"


@dataclass(frozen=True)
class ProfileBuild:
    """A built profile plus a record of which fields were defaulted."""

    profile: TeamStatisticalProfile
    missing_fields: Tuple[str, ...]
    quality: str

    @property
    def used_defaults(self) -> bool:
        return bool(self.missing_fields)


def league_average_profile(team: str) -> TeamStatisticalProfile:
    """A profile where every statistic is the league average."""
    return TeamStatisticalProfile(team=team, **LEAGUE_AVERAGE_STATS)


def build_team_profile(team: str, stats: Mapping[str, Any]) -> ProfileBuild:
    """
    Build a profile from a (possibly partial) stats record.

    Keys are profile field names.  A key that is absent or maps to None
    is filled from :data:`LEAGUE_AVERAGE_STATS`; unknown keys are ignored.

    Raises:
        ValueError: If a supplied value is not numeric, or the resulting
            profile fails validation (negative or non-finite stats).
    """
    values: Dict[str, float] = {}
    missing = []

    for name in TeamStatisticalProfile.stat_fields():
        raw = stats.get(name)
        if raw is None:
            values[name] = LEAGUE_AVERAGE_STATS[name]
            missing.append(name)
            continue
        try:
            values[name] = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"{team}: {name} must be numeric, got {raw!r}") from None

    unknown = set(stats) - set(values)
    if unknown:
        logger.debug("%s: ignoring unknown stat keys %s", team, sorted(unknown))

    if not missing:
        quality = QUALITY_REAL
    elif len(missing) == len(values):
        quality = QUALITY_DEFAULT
        logger.warning("%s: no stats supplied, using league averages", team)
    else:
        quality = QUALITY_PARTIAL
        logger.warning(
            "%s: %d of %d stats missing, filled with league averages: %s",
            team, len(missing), len(values), ", ".join(missing),
        )

    return ProfileBuild(
        profile=TeamStatisticalProfile(team=team, **values),
        missing_fields=tuple(missing),
        quality=quality,
    )
