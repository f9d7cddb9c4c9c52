"""Numeric helpers shared by the funnel stages.

Two policies coexist. Explicit availability checks look at the
raw snapshot field (None means unavailable). Every other read goes through
``parse_number``, which silently turns anything unusable into 0.0.
"""

import math
from typing import Any

# Histogram tolerance band: "almost green" / "almost red"
MACD_TOLERANCE = 0.000005

# Max EMA9/EMA20 gap, in percent, for a fresh crossover
CROSSOVER_MAX_GAP_PCT = 0.05


def parse_number(value: Any) -> float:
    """Coerce a price or indicator value to float, falling back to 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def is_bullish_macd(histogram: float | None) -> bool:
    """Histogram is at or above the near-zero tolerance band."""
    if histogram is None:
        return False
    return parse_number(histogram) > -MACD_TOLERANCE


def is_bearish_macd(histogram: float | None) -> bool:
    """Histogram is at or below the near-zero tolerance band."""
    if histogram is None:
        return False
    return parse_number(histogram) < MACD_TOLERANCE


def ema_gap_pct(ema9: Any, ema20: Any) -> float | None:
    """|EMA9 - EMA20| / EMA20 * 100, or None if either EMA reads as zero."""
    fast = parse_number(ema9)
    slow = parse_number(ema20)
    if fast == 0 or slow == 0:
        return None
    return abs(fast - slow) / slow * 100
