"""Indicator snapshot models produced once per data-refresh cycle."""

from dataclasses import dataclass
from enum import Enum, IntEnum


class Timeframe(IntEnum):
    """Candle durations tracked per asset, in minutes."""

    M3 = 3
    M15 = 15
    M60 = 60
    M240 = 240

    @property
    def ccxt_code(self) -> str:
        """Timeframe string understood by ccxt (e.g. ``"15m"``, ``"4h"``)."""
        if self.value >= 60:
            return f"{self.value // 60}h"
        return f"{self.value}m"


class Trend(str, Enum):
    """Supertrend direction flag."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class TimeframeSnapshot:
    """Indicator values for one (asset, timeframe) pair.

    A field set to None is "unavailable". ``trend`` defaults to UP when the
    Supertrend could not be computed.
    """

    timeframe: Timeframe
    ema9: float | None = None
    ema20: float | None = None
    ema100: float | None = None
    macd_histogram: float | None = None
    vwap: float | None = None
    supertrend: float | None = None
    trend: Trend = Trend.UP

    @classmethod
    def unavailable(cls, timeframe: Timeframe) -> "TimeframeSnapshot":
        """Snapshot with every indicator unavailable and trend UP."""
        return cls(timeframe=Timeframe(timeframe))

    @property
    def is_available(self) -> bool:
        """True if at least one indicator field was computed."""
        return any(
            value is not None
            for value in (
                self.ema9,
                self.ema20,
                self.ema100,
                self.macd_histogram,
                self.vwap,
                self.supertrend,
            )
        )


@dataclass(frozen=True)
class AssetSnapshot:
    """One asset's price and its four timeframe snapshots.

    ``price`` keeps the exchange's string encoding; numeric reads go through
    ``funnel.numeric.parse_number``.
    """

    symbol: str
    price: str
    tf3: TimeframeSnapshot
    tf15: TimeframeSnapshot
    tf60: TimeframeSnapshot
    tf240: TimeframeSnapshot

    def __post_init__(self) -> None:
        """Validate that each slot holds the matching timeframe."""
        expected = {
            "tf3": Timeframe.M3,
            "tf15": Timeframe.M15,
            "tf60": Timeframe.M60,
            "tf240": Timeframe.M240,
        }
        for attr, timeframe in expected.items():
            if getattr(self, attr).timeframe != timeframe:
                raise ValueError(f"{attr} must hold the {timeframe.value}m snapshot")

    def timeframe(self, timeframe: Timeframe) -> TimeframeSnapshot:
        """Return the snapshot for ``timeframe``."""
        return {
            Timeframe.M3: self.tf3,
            Timeframe.M15: self.tf15,
            Timeframe.M60: self.tf60,
            Timeframe.M240: self.tf240,
        }[Timeframe(timeframe)]
