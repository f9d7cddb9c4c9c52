"""Cascading trend funnel: global trend, active filter, entry signals."""

from .active_filter import ActiveTokens, filter_active_tokens
from .entry_signals import check_ema_crossover, find_trades
from .global_trend import GlobalTrendResult, analyze_global_trend
from .numeric import is_bearish_macd, is_bullish_macd, parse_number

__all__ = [
    "ActiveTokens",
    "GlobalTrendResult",
    "analyze_global_trend",
    "check_ema_crossover",
    "filter_active_tokens",
    "find_trades",
    "is_bearish_macd",
    "is_bullish_macd",
    "parse_number",
]
