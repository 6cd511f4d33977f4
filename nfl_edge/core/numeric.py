"""Numeric guards shared by every simulation component.

Box-score inputs routinely contain zeros (a team with no rushing
touchdowns, a defence that has not faced a pass attempt).  Any division
whose denominator can be zero goes through :func:`safe_divide`, which
returns a caller-documented fallback instead of ``inf`` or ``nan``.
This is a normal, silent path and never logs.
"""

from __future__ import annotations

import math


def safe_divide(numerator: float, denominator: float, fallback: float) -> float:
    """Divide, returning ``fallback`` when the result would be invalid.

    Args:
        numerator: Dividend.
        denominator: Divisor.  Zero, ``nan`` and ``±inf`` all trigger the
            fallback.
        fallback: Value returned in place of an invalid quotient.  Every
            call site documents what its fallback means.

    Returns:
        ``numerator / denominator`` when finite, else ``fallback``.

    Examples::

        safe_divide(10.0, 4.0, 0.0)          → 2.5
        safe_divide(10.0, 0.0, 1.0)          → 1.0
        safe_divide(10.0, float("nan"), 1.0) → 1.0
    """
    if denominator == 0 or not math.isfinite(denominator):
        return fallback
    result = numerator / denominator
    if not math.isfinite(result):
        return fallback
    return result


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` into ``[lo, hi]``.  ``nan`` clamps to ``lo``."""
    if math.isnan(value):
        return lo
    return max(lo, min(hi, value))
