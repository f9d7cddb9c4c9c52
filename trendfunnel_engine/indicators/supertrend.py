"""Supertrend indicator (single-bar ATR band)."""

import logging
from dataclasses import dataclass

from trendfunnel_engine.indicators.atr import calculate_atr
from trendfunnel_engine.models.snapshot import Trend

logger = logging.getLogger(__name__)

SUPERTREND_PERIOD = 10
SUPERTREND_MULTIPLIER = 3.0


@dataclass(frozen=True)
class SupertrendResult:
    """Supertrend output: band value (None when unavailable) and direction."""

    value: float | None
    trend: Trend


_UNAVAILABLE = SupertrendResult(value=None, trend=Trend.UP)


def calculate_supertrend(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = SUPERTREND_PERIOD,
    multiplier: float = SUPERTREND_MULTIPLIER,
) -> SupertrendResult:
    """
    Calculate the Supertrend band for the latest bar.

    upper = hl2 + multiplier * ATR, lower = hl2 - multiplier * ATR, where
    hl2 is the latest bar's (high + low) / 2. The trend is UP while the
    latest close is above the lower band; the reported value is the lower
    band when UP, the upper band when DOWN.

    Never raises: short input or a math failure yields an unavailable value
    with the trend defaulted to UP.

    Args:
        highs: Valid high prices, oldest first.
        lows: Valid low prices, oldest first.
        closes: Valid close prices, oldest first.
        period: ATR period.
        multiplier: Band width in ATRs.

    Returns:
        SupertrendResult.
    """
    if len(highs) < period or len(lows) < period or len(closes) < period:
        return _UNAVAILABLE

    try:
        atr = calculate_atr(highs, lows, closes, period)
        if not atr:
            return _UNAVAILABLE

        last_index = min(len(highs), len(lows), len(closes)) - 1
        hl2 = (highs[last_index] + lows[last_index]) / 2
        upper_band = hl2 + multiplier * atr[-1]
        lower_band = hl2 - multiplier * atr[-1]
    except (ArithmeticError, TypeError, ValueError) as exc:
        logger.warning("Supertrend calculation failed: %s", exc)
        return _UNAVAILABLE

    if closes[last_index] > lower_band:
        return SupertrendResult(value=lower_band, trend=Trend.UP)
    return SupertrendResult(value=upper_band, trend=Trend.DOWN)
