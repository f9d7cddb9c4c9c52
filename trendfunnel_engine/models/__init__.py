"""Data models for candles, indicator snapshots, and trade signals."""

from .candle import Candle
from .signal import Direction, SignalStrength, TradeSignal
from .snapshot import AssetSnapshot, Timeframe, TimeframeSnapshot, Trend

__all__ = [
    "AssetSnapshot",
    "Candle",
    "Direction",
    "SignalStrength",
    "Timeframe",
    "TimeframeSnapshot",
    "TradeSignal",
    "Trend",
]
