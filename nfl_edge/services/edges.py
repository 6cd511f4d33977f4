"""
Model-versus-market edges for one simulated game.

Edge is the model's probability minus the price's implied probability,
both in percentage points::

    edge = model % − 100 / decimal_odds(price)

The implied figure keeps the bookmaker's vig, so a fair coin priced at
−110 shows a −2.4 point edge.  The no-vig moneyline split is reported
alongside for reference.

:func:`recommend_picks` turns the same result into one side per market.
"""

from dataclasses import dataclass
from typing import Dict

from nfl_edge.core.odds_math import implied_prob, remove_vig_proportional
from nfl_edge.core.sim_interface import MarketLine, SimulationResult

DEFAULT_PRICE = -110

HIGH_CONFIDENCE = 65.0
MEDIUM_CONFIDENCE = 55.0


def confidence_level(probability: float) -> str:
    """Bucket a probability (percent) as ``High``, ``Medium`` or ``Low``."""
    if probability >= HIGH_CONFIDENCE:
        return "High"
    if probability >= MEDIUM_CONFIDENCE:
        return "Medium"
    return "Low"


def edge_pct(model_probability: float, american_odds: int) -> float:
    """Model probability (percent) minus the price's implied probability (percent)."""
    return model_probability - 100.0 * implied_prob(american_odds)


@dataclass(frozen=True)
class MarketEdges:
    """Edges, in percentage points, on both sides of all three markets."""

    home_moneyline: float
    away_moneyline: float
    favorite_spread: float
    underdog_spread: float
    over: float
    under: float
    market_home_no_vig: float
    market_away_no_vig: float

    def best(self) -> tuple:
        """``(market_name, edge)`` with the largest edge."""
        candidates = self.to_dict()
        candidates.pop("market_home_no_vig")
        candidates.pop("market_away_no_vig")
        name = max(candidates, key=candidates.get)
        return name, candidates[name]

    def to_dict(self) -> Dict[str, float]:
        return {
            "home_moneyline": round(self.home_moneyline, 2),
            "away_moneyline": round(self.away_moneyline, 2),
            "favorite_spread": round(self.favorite_spread, 2),
            "underdog_spread": round(self.underdog_spread, 2),
            "over": round(self.over, 2),
            "under": round(self.under, 2),
            "market_home_no_vig": round(self.market_home_no_vig, 2),
            "market_away_no_vig": round(self.market_away_no_vig, 2),
        }


def calculate_edges(
    result: SimulationResult,
    market: MarketLine,
    spread_odds: int = DEFAULT_PRICE,
    over_odds: int = DEFAULT_PRICE,
    under_odds: int = DEFAULT_PRICE,
) -> MarketEdges:
    """
    Compare a simulation result with the posted prices.

    Spread and total prices are rarely fed separately, so each defaults
    to the standard −110.  Both spread sides share ``spread_odds``.

    Raises:
        ValueError: If any price is not a valid American price.
    """
    home_no_vig, away_no_vig = remove_vig_proportional(
        market.home_moneyline, market.away_moneyline
    )
    return MarketEdges(
        home_moneyline=edge_pct(result.home_win_probability, market.home_moneyline),
        away_moneyline=edge_pct(result.away_win_probability, market.away_moneyline),
        favorite_spread=edge_pct(result.favorite_cover_probability, spread_odds),
        underdog_spread=edge_pct(result.underdog_cover_probability, spread_odds),
        over=edge_pct(result.over_probability, over_odds),
        under=edge_pct(result.under_probability, under_odds),
        market_home_no_vig=100.0 * home_no_vig,
        market_away_no_vig=100.0 * away_no_vig,
    )


# ---------------------------------------------------------------------------
# Picks
# ---------------------------------------------------------------------------

PICK_THRESHOLD = 50.0

CONFIDENCE_SCORES: Dict[str, int] = {"High": 80, "Medium": 60, "Low": 40}


def confidence_score(level: str) -> int:
    """Numeric confidence for a bucket; unknown buckets score 50."""
    return CONFIDENCE_SCORES.get(level, 50)


def format_line(line: float) -> str:
    """Signed spread label: ``-3.5``, ``+7``, or ``PK`` for a pick'em."""
    if line == 0:
        return "PK"
    return f"{line:+g}"


@dataclass(frozen=True)
class Picks:
    """One side of each market, with the model probability behind it."""

    moneyline: str
    moneyline_probability: float
    spread: str
    spread_probability: float
    total: str
    total_probability: float
    confidence_level: str
    confidence: int

    def to_dict(self) -> dict:
        return {
            "moneyline": self.moneyline,
            "moneyline_probability": round(self.moneyline_probability, 2),
            "spread": self.spread,
            "spread_probability": round(self.spread_probability, 2),
            "total": self.total,
            "total_probability": round(self.total_probability, 2),
            "confidence_level": self.confidence_level,
            "confidence": self.confidence,
        }


def recommend_picks(
    result: SimulationResult,
    market: MarketLine,
    home_team: str,
    away_team: str,
) -> Picks:
    """
    Pick a side in every market from a simulation result.

    The spread label belongs to whichever team is picked: the favourite
    when its cover probability is above 50, the underdog otherwise.  The
    market spread is quoted from the home side, so it is negated when
    the favourite (or the picked underdog) is the away team.  Confidence
    follows the moneyline probability.
    """
    if result.home_win_probability > result.away_win_probability:
        moneyline_pick = home_team
    else:
        moneyline_pick = away_team
    moneyline_prob = max(result.home_win_probability, result.away_win_probability)

    if result.favorite_is_home:
        favorite, underdog = home_team, away_team
        favorite_line = market.spread
    else:
        favorite, underdog = away_team, home_team
        favorite_line = -market.spread

    if result.favorite_cover_probability > PICK_THRESHOLD:
        spread_pick = f"{favorite} {format_line(favorite_line)}"
        spread_prob = result.favorite_cover_probability
    else:
        spread_pick = f"{underdog} {format_line(-favorite_line)}"
        spread_prob = result.underdog_cover_probability

    side = "Over" if result.over_probability > PICK_THRESHOLD else "Under"
    total_prob = max(result.over_probability, result.under_probability)

    level = confidence_level(moneyline_prob)
    return Picks(
        moneyline=moneyline_pick,
        moneyline_probability=moneyline_prob,
        spread=spread_pick,
        spread_probability=spread_prob,
        total=f"{side} {market.total:g}",
        total_probability=total_prob,
        confidence_level=level,
        confidence=confidence_score(level),
    )
