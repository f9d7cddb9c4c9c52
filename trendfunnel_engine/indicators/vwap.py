"""Volume Weighted Average Price (VWAP) indicator."""

from trendfunnel_engine.models.candle import Candle


def calculate_vwap(candles: list[Candle]) -> float | None:
    """
    Calculate Volume Weighted Average Price (VWAP) over a candle window.

    VWAP = Sum(Typical_Price * Volume) / Sum(Volume)
    Typical_Price = (High + Low + Close) / 3

    Candles whose high, low, close or volume did not parse are skipped.

    Args:
        candles: List of Candle objects.

    Returns:
        The VWAP, or None when no candle is valid or total volume is zero.
    """
    cumulative_tp_vol = 0.0
    cumulative_vol = 0.0
    valid_candles = 0

    for candle in candles:
        if not candle.is_valid:
            continue
        cumulative_tp_vol += candle.typical_price * candle.volume
        cumulative_vol += candle.volume
        valid_candles += 1

    if valid_candles == 0 or cumulative_vol == 0:
        return None

    return cumulative_tp_vol / cumulative_vol
