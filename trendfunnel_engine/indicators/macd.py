"""Moving Average Convergence Divergence (MACD) indicator."""

from dataclasses import dataclass

from trendfunnel_engine.indicators.ema import calculate_ema


@dataclass
class MACDResult:
    """Container for MACD calculation results.

    ``macd_line`` starts where the slow EMA first exists. ``signal_line``
    and ``histogram`` start ``signal_period - 1`` points later, so all
    three end on the latest input.
    """

    macd_line: list[float]
    signal_line: list[float]
    histogram: list[float]

    @property
    def last_histogram(self) -> float | None:
        """Most recent histogram value, or None if none was produced."""
        return self.histogram[-1] if self.histogram else None


def calculate_macd(
    values: list[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    Calculate MACD (Moving Average Convergence Divergence).

    MACD Line = EMA(fast) - EMA(slow)
    Signal Line = EMA(signal) of MACD Line
    Histogram = MACD Line - Signal Line

    Args:
        values: List of values (e.g., closing prices).
        fast_period: Fast EMA period (default: 12).
        slow_period: Slow EMA period (default: 26).
        signal_period: Signal EMA period (default: 9).

    Returns:
        MACDResult with macd_line, signal_line, and histogram.
        Lists are empty when there is not enough data.
    """
    if fast_period >= slow_period:
        raise ValueError("fast_period must be smaller than slow_period")

    ema_fast = calculate_ema(values, fast_period)
    ema_slow = calculate_ema(values, slow_period)

    if not ema_slow:
        return MACDResult(macd_line=[], signal_line=[], histogram=[])

    # Align the fast EMA with the slow one; both end on the latest input
    offset = slow_period - fast_period
    macd_line = [fast - slow for fast, slow in zip(ema_fast[offset:], ema_slow)]

    signal_line = calculate_ema(macd_line, signal_period)

    signal_offset = len(macd_line) - len(signal_line)
    histogram = [
        m - s for m, s in zip(macd_line[signal_offset:], signal_line)
    ]

    return MACDResult(
        macd_line=macd_line,
        signal_line=signal_line,
        histogram=histogram,
    )
