"""Active-trend filter: keeps trends that are live on 60m and 15m."""

import logging
from dataclasses import dataclass, field

from trendfunnel_engine.funnel.numeric import (
    is_bearish_macd,
    is_bullish_macd,
    parse_number,
)
from trendfunnel_engine.models.snapshot import AssetSnapshot, Trend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveTokens:
    """Subsets of the bullish/bearish buckets whose trend is live."""

    active_bullish: list[AssetSnapshot] = field(default_factory=list)
    active_bearish: list[AssetSnapshot] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.active_bullish) + len(self.active_bearish)


def _has_required_fields(asset: AssetSnapshot) -> bool:
    tf60 = asset.tf60
    return tf60.ema100 is not None and tf60.ema20 is not None and tf60.vwap is not None


def is_active_bullish(asset: AssetSnapshot) -> bool:
    """All five bullish conditions on 60m (and EMA100 on 15m) hold."""
    if not _has_required_fields(asset):
        return False

    tf60 = asset.tf60
    price = parse_number(asset.price)
    ema100_60 = parse_number(tf60.ema100)
    ema20_60 = parse_number(tf60.ema20)

    active = (
        price > ema100_60
        and price > ema20_60
        and is_bullish_macd(tf60.macd_histogram)
        and tf60.trend == Trend.UP
        and price > parse_number(tf60.vwap)
        and price > parse_number(asset.tf15.ema100)
    )

    if active:
        ema9_60 = parse_number(tf60.ema9)
        logger.debug(
            "%s active bullish (above EMA9=%s, EMA20>EMA100=%s, EMA9>EMA20=%s)",
            asset.symbol,
            price > ema9_60,
            ema20_60 > ema100_60,
            ema9_60 > ema20_60,
        )
    return active


def is_active_bearish(asset: AssetSnapshot) -> bool:
    """Mirror of ``is_active_bullish``."""
    if not _has_required_fields(asset):
        return False

    tf60 = asset.tf60
    price = parse_number(asset.price)
    ema100_60 = parse_number(tf60.ema100)
    ema20_60 = parse_number(tf60.ema20)

    active = (
        price < ema100_60
        and price < ema20_60
        and is_bearish_macd(tf60.macd_histogram)
        and tf60.trend == Trend.DOWN
        and price < parse_number(tf60.vwap)
        and price < parse_number(asset.tf15.ema100)
    )

    if active:
        ema9_60 = parse_number(tf60.ema9)
        logger.debug(
            "%s active bearish (below EMA9=%s, EMA20<EMA100=%s, EMA9<EMA20=%s)",
            asset.symbol,
            price < ema9_60,
            ema20_60 < ema100_60,
            ema9_60 < ema20_60,
        )
    return active


def filter_active_tokens(
    bullish: list[AssetSnapshot], bearish: list[AssetSnapshot]
) -> ActiveTokens:
    """
    Narrow the global-trend buckets to assets with a live trend.

    Assets missing EMA100, EMA20 or VWAP on 60m are dropped.

    Args:
        bullish: Bullish bucket from the global trend classifier.
        bearish: Bearish bucket from the global trend classifier.

    Returns:
        ActiveTokens preserving input order.
    """
    result = ActiveTokens(
        active_bullish=[asset for asset in bullish if is_active_bullish(asset)],
        active_bearish=[asset for asset in bearish if is_active_bearish(asset)],
    )

    logger.info(
        "🎯 Active tokens: bullish=%d, bearish=%d",
        len(result.active_bullish),
        len(result.active_bearish),
    )
    return result
