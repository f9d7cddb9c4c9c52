"""Entry-signal detector: fresh EMA9/EMA20 crossovers on 15m and 3m."""

import logging
from datetime import datetime, timezone
from typing import Literal

from trendfunnel_engine.funnel.active_filter import ActiveTokens
from trendfunnel_engine.funnel.numeric import (
    CROSSOVER_MAX_GAP_PCT,
    ema_gap_pct,
    is_bearish_macd,
    is_bullish_macd,
    parse_number,
)
from trendfunnel_engine.models.signal import Direction, SignalStrength, TradeSignal
from trendfunnel_engine.models.snapshot import AssetSnapshot, Timeframe

logger = logging.getLogger(__name__)

# Checked in this order for every asset
SIGNAL_TIMEFRAMES: tuple[tuple[Timeframe, SignalStrength], ...] = (
    (Timeframe.M15, SignalStrength.STRONG),
    (Timeframe.M3, SignalStrength.REGULAR),
)


def check_ema_crossover(
    ema9: float | str | None,
    ema20: float | str | None,
    direction: Literal["BULLISH", "BEARISH"],
) -> bool:
    """
    True when EMA9 has just crossed EMA20 in ``direction``.

    EMA9 must be on the right side of EMA20 by less than 0.05%.
    """
    gap = ema_gap_pct(ema9, ema20)
    if gap is None:
        return False

    fast = parse_number(ema9)
    slow = parse_number(ema20)
    if direction == "BULLISH":
        return fast > slow and gap < CROSSOVER_MAX_GAP_PCT
    return fast < slow and gap < CROSSOVER_MAX_GAP_PCT


def _long_fires(asset: AssetSnapshot, timeframe: Timeframe) -> bool:
    tf = asset.timeframe(timeframe)
    price = parse_number(asset.price)
    return (
        price > parse_number(tf.ema100)
        and is_bullish_macd(tf.macd_histogram)
        and check_ema_crossover(tf.ema9, tf.ema20, "BULLISH")
    )


def _short_fires(asset: AssetSnapshot, timeframe: Timeframe) -> bool:
    tf = asset.timeframe(timeframe)
    price = parse_number(asset.price)
    return (
        price < parse_number(tf.ema100)
        and is_bearish_macd(tf.macd_histogram)
        and check_ema_crossover(tf.ema9, tf.ema20, "BEARISH")
    )


def find_trades(active: ActiveTokens, now: datetime | None = None) -> list[TradeSignal]:
    """
    Detect entry signals among the active assets.

    Args:
        active: Output of the active-trend filter.
        now: Detection timestamp shared by every signal of this pass.

    Returns:
        LONG signals for active bullish assets, then SHORT signals for
        active bearish assets; 15m (STRONG) before 3m (REGULAR) per asset.
    """
    timestamp = now or datetime.now(timezone.utc)
    signals: list[TradeSignal] = []

    passes = (
        (active.active_bullish, Direction.LONG, _long_fires),
        (active.active_bearish, Direction.SHORT, _short_fires),
    )
    for assets, direction, fires in passes:
        for asset in assets:
            for timeframe, strength in SIGNAL_TIMEFRAMES:
                if fires(asset, timeframe):
                    signals.append(
                        TradeSignal(
                            symbol=asset.symbol,
                            direction=direction,
                            timeframe=timeframe,
                            price=asset.price,
                            strength=strength,
                            timestamp=timestamp,
                        )
                    )

    logger.info("🔍 Entry signals found: %d", len(signals))
    return signals
