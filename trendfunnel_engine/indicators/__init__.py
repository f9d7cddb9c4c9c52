"""Technical indicators and the per-timeframe indicator engine."""

from .atr import calculate_atr
from .ema import calculate_ema
from .engine import build_asset_snapshot, compute_timeframe_snapshot
from .macd import MACDResult, calculate_macd
from .supertrend import SupertrendResult, calculate_supertrend
from .vwap import calculate_vwap

__all__ = [
    "MACDResult",
    "SupertrendResult",
    "build_asset_snapshot",
    "calculate_atr",
    "calculate_ema",
    "calculate_macd",
    "calculate_supertrend",
    "calculate_vwap",
    "compute_timeframe_snapshot",
]
