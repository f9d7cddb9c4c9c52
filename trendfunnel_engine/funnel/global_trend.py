"""Global trend classifier (60m + 240m)."""

import logging
from dataclasses import dataclass, field

from trendfunnel_engine.funnel.numeric import parse_number
from trendfunnel_engine.models.snapshot import AssetSnapshot, TimeframeSnapshot, Trend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalTrendResult:
    """Disjoint partition of a cycle's assets by directional bias."""

    bullish: list[AssetSnapshot] = field(default_factory=list)
    bearish: list[AssetSnapshot] = field(default_factory=list)
    neutral: list[AssetSnapshot] = field(default_factory=list)


def is_bullish_on(price: float, tf: TimeframeSnapshot) -> bool:
    """Price above EMA100, EMA20 and the Supertrend band, trend UP."""
    return (
        price > parse_number(tf.ema100)
        and price > parse_number(tf.ema20)
        and price > parse_number(tf.supertrend)
        and tf.trend == Trend.UP
    )


def is_bearish_on(price: float, tf: TimeframeSnapshot) -> bool:
    """Price below EMA100, EMA20 and the Supertrend band, trend DOWN."""
    return (
        price < parse_number(tf.ema100)
        and price < parse_number(tf.ema20)
        and price < parse_number(tf.supertrend)
        and tf.trend == Trend.DOWN
    )


def classify_asset(asset: AssetSnapshot) -> str:
    """
    Classify one asset as ``"bullish"``, ``"bearish"`` or ``"neutral"``.

    The 60m view dominates unless 240m is outright opposed. The bullish
    branch is checked first.
    """
    if asset.tf60.ema100 is None or asset.tf240.ema100 is None:
        return "neutral"

    price = parse_number(asset.price)
    bullish_60 = is_bullish_on(price, asset.tf60)
    bullish_240 = is_bullish_on(price, asset.tf240)
    bearish_60 = is_bearish_on(price, asset.tf60)
    bearish_240 = is_bearish_on(price, asset.tf240)

    if (bullish_60 and bullish_240) or (bullish_60 and not bearish_240):
        return "bullish"
    if (bearish_60 and bearish_240) or (bearish_60 and not bullish_240):
        return "bearish"
    return "neutral"


def analyze_global_trend(assets: list[AssetSnapshot]) -> GlobalTrendResult:
    """
    Partition assets into bullish, bearish and neutral.

    Args:
        assets: All asset snapshots of one cycle.

    Returns:
        GlobalTrendResult preserving input order within each bucket.
    """
    result = GlobalTrendResult()
    buckets = {
        "bullish": result.bullish,
        "bearish": result.bearish,
        "neutral": result.neutral,
    }

    for asset in assets:
        buckets[classify_asset(asset)].append(asset)

    logger.info(
        "📊 Global trend: bullish=%d, bearish=%d, neutral=%d",
        len(result.bullish),
        len(result.bearish),
        len(result.neutral),
    )
    return result
