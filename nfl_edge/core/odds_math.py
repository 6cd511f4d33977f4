"""Fundamental odds mathematics: the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in services.

The pillars exposed are:

1. **Odds conversion**: American ↔ decimal ↔ implied probability.
2. **Vig removal**: proportional two-outcome normalisation.
3. **Favourite resolution**: which side the moneyline market favours.
4. **Moneyline estimation**: a spread-implied price ladder for feeds
   that post a spread but no moneyline.

Design decisions
----------------
* All functions accept ``int`` American odds because most US sportsbook
  feeds return integers.  Decimal odds must be converted by the caller.
* Favourite resolution is deliberately a pure function of the two
  prices.  The simulation uses it only to orient the margin ("favourite
  minus underdog"), so "cover" always means the favourite beat the line
  whether the favourite is at home or on the road.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: American-odds magnitude floor.  Feeds never return |odds| < 100;
#: values below this indicate a data error.
_MIN_ODDS_MAGNITUDE: Final[int] = 100

#: Price posted on both sides of a pick'em when no moneyline exists.
PICKEM_PRICE: Final[int] = -110

#: Spread below which a game is treated as a pick'em.
_PICKEM_SPREAD: Final[float] = 0.5

#: Bookmaker margin assumed when deriving a missing side's price.
TYPICAL_VIG_PCT: Final[float] = 4.5

#: Clamp bands for estimated prices.
_FAVORITE_PRICE_RANGE: Final[tuple[int, int]] = (-1000, -105)
_UNDERDOG_PRICE_RANGE: Final[tuple[int, int]] = (105, 1000)

#: Piecewise spread → favourite-price ladder:
#: (upper spread bound, base price, price per point above previous bound).
_SPREAD_PRICE_LADDER: Final[tuple[tuple[float, float, float, float], ...]] = (
    (3.0, 0.0, -100.0, 40.0),
    (7.0, 3.0, -150.0, 37.5),
    (10.0, 7.0, -300.0, 50.0),
    (float("inf"), 10.0, -450.0, 55.0),
)


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def american_to_decimal(american: int | float) -> float:
    """Convert American odds to decimal (European) format.

    Decimal odds represent the total payout per unit staked, **including**
    the return of the stake itself.  Examples::

        american_to_decimal(-110) → 1.9091   (risk 110 to win 100)
        american_to_decimal(+150) → 2.5000   (risk 100 to win 150)

    Args:
        american: American odds.  Negative = favourite, positive = underdog.

    Returns:
        Decimal odds ≥ 1.0.

    Raises:
        ValueError: If ``|american| < 100``, which is not a representable
            American odds value.
    """
    if abs(american) < _MIN_ODDS_MAGNITUDE:
        raise ValueError(
            f"Invalid American odds {american!r}: magnitude must be ≥ 100. "
            "Check upstream odds parsing for data errors."
        )
    if american > 0:
        return american / 100.0 + 1.0
    return 100.0 / abs(american) + 1.0


def implied_prob(american: int | float) -> float:
    """Raw implied probability from American odds (vig-inclusive).

    Examples::

        implied_prob(-110) → 0.5238
        implied_prob(+150) → 0.4000
    """
    return 1.0 / american_to_decimal(american)


def prob_to_american(prob: float) -> float:
    """Convert a probability in ``(0, 1)`` to an (unrounded) American price."""
    if not 0.0 < prob < 1.0:
        raise ValueError(f"Probability {prob!r} must be in (0, 1).")
    if prob >= 0.5:
        return -100.0 * prob / (1.0 - prob)
    return 100.0 / prob - 100.0


def remove_vig_proportional(odds_a: int | float, odds_b: int | float) -> tuple[float, float]:
    """No-vig probabilities for a two-outcome market by normalisation.

    Each raw implied probability is divided by the overround.  The
    returned pair sums to exactly 1.0.

    Raises:
        ValueError: If either price violates the ``|odds| ≥ 100`` contract.
    """
    raw_a = implied_prob(odds_a)
    raw_b = implied_prob(odds_b)
    total = raw_a + raw_b
    return raw_a / total, raw_b / total


# ---------------------------------------------------------------------------
# Favourite resolution
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class FavoriteInfo:
    """Which side the moneyline market favours.

    Attributes:
        favorite_is_home: True when the home side is the favourite.
        favorite_side: ``"home"`` or ``"away"``.
        underdog_side: The other side.
    """

    favorite_is_home: bool
    favorite_side: str
    underdog_side: str


def resolve_favorite(home_moneyline: int | float, away_moneyline: int | float) -> FavoriteInfo:
    """Resolve the favourite from two American moneyline prices.

    The side with the lower price (more negative, or smaller positive) is
    the favourite.  Equal prices resolve to the away side.

    Examples::

        resolve_favorite(-150, +130).favorite_is_home → True
        resolve_favorite(+120, -140).favorite_is_home → False
    """
    if home_moneyline < away_moneyline:
        return FavoriteInfo(favorite_is_home=True, favorite_side="home", underdog_side="away")
    return FavoriteInfo(favorite_is_home=False, favorite_side="away", underdog_side="home")


# ---------------------------------------------------------------------------
# Moneyline estimation
# ---------------------------------------------------------------------------


def counterpart_moneyline(price: int | float, vig_pct: float = TYPICAL_VIG_PCT) -> int:
    """Estimate the other side's price from one posted moneyline.

    The counterpart's implied probability is ``(1 − p) × (1 − vig)``,
    where ``p`` is the posted side's implied probability, converted back
    to American odds and clamped to the favourite or underdog band.

    Examples::

        counterpart_moneyline(-150) → +162
    """
    other = (1.0 - implied_prob(price)) * (1.0 - vig_pct / 100.0)
    estimate = prob_to_american(other)
    if estimate < 0:
        lo, hi = _FAVORITE_PRICE_RANGE
    else:
        lo, hi = _UNDERDOG_PRICE_RANGE
    return round(max(lo, min(hi, estimate)))


def favorite_price_from_spread(spread: float) -> int:
    """Map an absolute point spread to an estimated favourite price.

    Piecewise-linear ladder: ≤3 pts costs 40 per point from −100, ≤7 pts
    37.5 per point from −150, ≤10 pts 50 per point from −300, and 55 per
    point from −450 beyond that; clamped to ``[−1000, −105]``.
    """
    magnitude = abs(spread)
    price = float(PICKEM_PRICE)
    for upper, lower, base, per_point in _SPREAD_PRICE_LADDER:
        if magnitude <= upper:
            price = base - (magnitude - lower) * per_point
            break
    lo, hi = _FAVORITE_PRICE_RANGE
    return round(max(lo, min(hi, price)))


def estimate_moneylines_from_spread(home_spread: float) -> tuple[int, int]:
    """Estimate ``(home_moneyline, away_moneyline)`` from the home spread.

    A spread under half a point is a pick'em (−110 both sides).  A zero
    spread that is not a pick'em cannot occur; positive spreads make the
    away side the favourite.
    """
    if abs(home_spread) < _PICKEM_SPREAD:
        return PICKEM_PRICE, PICKEM_PRICE
    favorite = favorite_price_from_spread(home_spread)
    underdog = counterpart_moneyline(favorite)
    if home_spread < 0:
        return favorite, underdog
    return underdog, favorite
