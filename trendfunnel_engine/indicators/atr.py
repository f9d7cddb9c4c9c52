"""Average True Range (ATR) indicator."""


def calculate_atr(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 10,
) -> list[float]:
    """
    Calculate Average True Range (ATR) with Wilder smoothing.

    True range starts at the second bar since it needs a previous close:
    TR[i] = max(high - low, |high - prev_close|, |low - prev_close|).

    Args:
        highs: High prices, oldest first.
        lows: Low prices, oldest first.
        closes: Close prices, oldest first.
        period: ATR period.

    Returns:
        ATR values, the first being the SMA of the first ``period`` true
        ranges. Empty when there are fewer than ``period + 1`` bars.
    """
    if period <= 0:
        raise ValueError("ATR period must be positive")

    length = min(len(highs), len(lows), len(closes))
    tr_values = [
        max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
        for i in range(1, length)
    ]

    if len(tr_values) < period:
        return []

    # 1. First ATR = SMA(TR, period)
    atr_values = [sum(tr_values[:period]) / period]

    # 2. Subsequent ATR = (Prev ATR * (n-1) + Current TR) / n
    for tr in tr_values[period:]:
        atr_values.append((atr_values[-1] * (period - 1) + tr) / period)

    return atr_values
