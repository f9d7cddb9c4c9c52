"""Exponential Moving Average (EMA) indicator."""


def calculate_ema(values: list[float], period: int) -> list[float]:
    """
    Calculate Exponential Moving Average (EMA).

    The first value is the SMA of the first ``period`` inputs; each later
    value applies ``k = 2 / (period + 1)``.

    Args:
        values: List of values (e.g., closing prices).
        period: EMA period.

    Returns:
        Only the computed EMA points: ``len(values) - period + 1`` values,
        the first aligned with ``values[period - 1]``. Empty when there are
        fewer than ``period`` inputs.
    """
    if period <= 0:
        raise ValueError("EMA period must be positive")

    if len(values) < period:
        return []

    sma = sum(values[:period]) / period
    ema_values = [sma]

    multiplier = 2.0 / (period + 1)

    for value in values[period:]:
        ema_values.append((value - ema_values[-1]) * multiplier + ema_values[-1])

    return ema_values
