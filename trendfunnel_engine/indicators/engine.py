"""Indicator engine: raw candle series to per-timeframe snapshots.

Each timeframe snapshot carries EMA9/20/100, the MACD(12, 26, 9) histogram,
VWAP and the Supertrend(10, 3) band with its trend flag. Values are rounded
to 6 decimals. Insufficient or malformed data never raises here; it yields
an all-unavailable snapshot instead.
"""

import logging
from collections.abc import Mapping

from trendfunnel_engine.indicators.ema import calculate_ema
from trendfunnel_engine.indicators.macd import calculate_macd
from trendfunnel_engine.indicators.supertrend import calculate_supertrend
from trendfunnel_engine.indicators.vwap import calculate_vwap
from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import AssetSnapshot, Timeframe, TimeframeSnapshot

logger = logging.getLogger(__name__)

MIN_CANDLES = 100
DECIMALS = 6

# Exchange sentinel for "no ticker"
NO_PRICE = "0"


def _round(value: float | None) -> float | None:
    return round(value, DECIMALS) if value is not None else None


def _last(values: list[float]) -> float | None:
    return values[-1] if values else None


def valid_closes(candles: list[Candle]) -> list[float]:
    """Closing prices that parsed, in series order."""
    return [c.close for c in candles if c.close is not None]


def compute_timeframe_snapshot(
    candles: list[Candle], timeframe: Timeframe
) -> TimeframeSnapshot:
    """
    Compute the indicator snapshot for one asset/timeframe.

    Args:
        candles: Candle series, oldest first.
        timeframe: Timeframe the candles belong to.

    Returns:
        TimeframeSnapshot. Every field is unavailable (trend UP) when there
        are fewer than 100 candles or valid closes, when the EMAs cannot be
        produced, or when a computation fails.
    """
    timeframe = Timeframe(timeframe)
    closes = valid_closes(candles)

    if len(closes) < MIN_CANDLES or len(candles) < MIN_CANDLES:
        return TimeframeSnapshot.unavailable(timeframe)

    try:
        ema9 = calculate_ema(closes, 9)
        ema20 = calculate_ema(closes, 20)
        ema100 = calculate_ema(closes, 100)

        if not ema9 or not ema20 or not ema100:
            return TimeframeSnapshot.unavailable(timeframe)

        macd = calculate_macd(closes, fast_period=12, slow_period=26, signal_period=9)
        vwap = calculate_vwap(candles)

        highs: list[float] = []
        lows: list[float] = []
        for candle in candles:
            if candle.high is not None and candle.low is not None:
                highs.append(candle.high)
                lows.append(candle.low)

        supertrend = calculate_supertrend(highs, lows, closes)
    except (ArithmeticError, TypeError, ValueError) as exc:
        logger.warning(
            "Indicator calculation failed for %dm timeframe: %s", timeframe.value, exc
        )
        return TimeframeSnapshot.unavailable(timeframe)

    return TimeframeSnapshot(
        timeframe=timeframe,
        ema9=_round(_last(ema9)),
        ema20=_round(_last(ema20)),
        ema100=_round(_last(ema100)),
        macd_histogram=_round(macd.last_histogram),
        vwap=_round(vwap),
        supertrend=_round(supertrend.value),
        trend=supertrend.trend,
    )


def has_full_history(candles: list[Candle]) -> bool:
    """True when the series has enough candles and valid closes."""
    return len(candles) >= MIN_CANDLES and len(valid_closes(candles)) >= MIN_CANDLES


def build_asset_snapshot(
    symbol: str,
    price: str,
    candles_by_timeframe: Mapping[Timeframe, list[Candle]],
) -> AssetSnapshot | None:
    """
    Build the full snapshot for one asset.

    Args:
        symbol: Trading symbol (e.g. ``"BTCUSDT"``).
        price: Last traded price, string-encoded as the exchange sends it.
        candles_by_timeframe: Candle series for each of the four timeframes.

    Returns:
        AssetSnapshot, or None when the price is the ``"0"`` sentinel or any
        timeframe lacks the minimum history.
    """
    if price == NO_PRICE:
        logger.debug("%s skipped: no price", symbol)
        return None

    series = {tf: list(candles_by_timeframe.get(tf, [])) for tf in Timeframe}
    short = [tf.value for tf, candles in series.items() if not has_full_history(candles)]
    if short:
        logger.warning("%s skipped: insufficient history on %s", symbol, short)
        return None

    return AssetSnapshot(
        symbol=symbol,
        price=price,
        tf3=compute_timeframe_snapshot(series[Timeframe.M3], Timeframe.M3),
        tf15=compute_timeframe_snapshot(series[Timeframe.M15], Timeframe.M15),
        tf60=compute_timeframe_snapshot(series[Timeframe.M60], Timeframe.M60),
        tf240=compute_timeframe_snapshot(series[Timeframe.M240], Timeframe.M240),
    )
