"""Market data model for OHLCV candles."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def parse_field(value: Any) -> float | None:
    """Parse a numeric-or-string exchange field.

    Returns None when the value is missing, non-numeric, or not finite.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class Candle:
    """OHLCV candle data.

    Price and volume fields are None when the exchange sent something that
    does not parse as a finite number. Such candles stay in the series but
    are skipped by aggregates like VWAP.
    """

    timestamp: datetime | None
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    volume: float | None

    @classmethod
    def from_row(cls, row: list[Any] | tuple[Any, ...]) -> "Candle":
        """Build a candle from ``[open_time_ms, open, high, low, close, volume, ...]``.

        Short rows leave the missing fields as None.
        """
        fields = [row[i] if i < len(row) else None for i in range(6)]
        ts_ms = parse_field(fields[0])
        timestamp = (
            datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc)
            if ts_ms is not None
            else None
        )
        return cls(
            timestamp=timestamp,
            open=parse_field(fields[1]),
            high=parse_field(fields[2]),
            low=parse_field(fields[3]),
            close=parse_field(fields[4]),
            volume=parse_field(fields[5]),
        )

    @property
    def is_valid(self) -> bool:
        """True when high, low, close and volume are all usable numbers."""
        return None not in (self.high, self.low, self.close, self.volume)

    @property
    def typical_price(self) -> float | None:
        """(high + low + close) / 3, or None for an invalid candle."""
        if self.high is None or self.low is None or self.close is None:
            return None
        return (self.high + self.low + self.close) / 3.0
