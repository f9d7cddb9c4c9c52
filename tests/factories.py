"""Builders for candles and snapshots used across the test suite."""

from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import (
    AssetSnapshot,
    Timeframe,
    TimeframeSnapshot,
    Trend,
)


def make_candle(
    close: float,
    high: float | None = None,
    low: float | None = None,
    volume: float | None = 1000.0,
) -> Candle:
    return Candle(
        timestamp=None,
        open=close,
        high=high if high is not None else close,
        low=low if low is not None else close,
        close=close,
        volume=volume,
    )


def linear_candles(count: int, start: float = 100.0, step: float = 1.0) -> list[Candle]:
    """Candles whose close rises by ``step`` each bar, with a 1.0 high/low spread."""
    closes = [start + i * step for i in range(count)]
    return [make_candle(c, high=c + 0.5, low=c - 0.5) for c in closes]


def make_tf(timeframe: Timeframe, trend: Trend = Trend.UP, **values: float) -> TimeframeSnapshot:
    return TimeframeSnapshot(timeframe=timeframe, trend=trend, **values)


def make_asset(
    symbol: str = "TESTUSDT",
    price: str = "105",
    tf3: TimeframeSnapshot | None = None,
    tf15: TimeframeSnapshot | None = None,
    tf60: TimeframeSnapshot | None = None,
    tf240: TimeframeSnapshot | None = None,
) -> AssetSnapshot:
    return AssetSnapshot(
        symbol=symbol,
        price=price,
        tf3=tf3 or TimeframeSnapshot.unavailable(Timeframe.M3),
        tf15=tf15 or TimeframeSnapshot.unavailable(Timeframe.M15),
        tf60=tf60 or TimeframeSnapshot.unavailable(Timeframe.M60),
        tf240=tf240 or TimeframeSnapshot.unavailable(Timeframe.M240),
    )


def bullish_asset(symbol: str = "BULLUSDT", price: str = "105") -> AssetSnapshot:
    """Asset from the end-to-end scenario: bullish, active, 15m LONG crossover."""
    return make_asset(
        symbol=symbol,
        price=price,
        tf15=make_tf(Timeframe.M15, ema100=103.0, ema9=100.01, ema20=100.0, macd_histogram=0.0),
        tf60=make_tf(
            Timeframe.M60,
            ema100=100.0,
            ema20=102.0,
            ema9=103.0,
            vwap=101.0,
            macd_histogram=0.0,
        ),
        tf240=make_tf(Timeframe.M240, ema100=98.0, ema20=99.0, supertrend=97.0),
    )


def bearish_asset(symbol: str = "BEARUSDT", price: str = "95") -> AssetSnapshot:
    """Mirror of ``bullish_asset``: bearish, active, 15m SHORT crossover."""
    return make_asset(
        symbol=symbol,
        price=price,
        tf15=make_tf(
            Timeframe.M15,
            trend=Trend.DOWN,
            ema100=97.0,
            ema9=99.99,
            ema20=100.0,
            macd_histogram=0.0,
        ),
        tf60=make_tf(
            Timeframe.M60,
            trend=Trend.DOWN,
            ema100=100.0,
            ema20=98.0,
            ema9=97.0,
            vwap=99.0,
            supertrend=99.5,
            macd_histogram=0.0,
        ),
        tf240=make_tf(
            Timeframe.M240,
            trend=Trend.DOWN,
            ema100=102.0,
            ema20=101.0,
            supertrend=103.0,
        ),
    )
