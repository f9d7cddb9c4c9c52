"""Signal models emitted by the entry-signal detector."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from trendfunnel_engine.models.snapshot import Timeframe


class Direction(str, Enum):
    """Trade direction."""

    LONG = "LONG"
    SHORT = "SHORT"


class SignalStrength(str, Enum):
    """Signal strength, determined by the detecting timeframe."""

    STRONG = "STRONG"  # 15m confirmation
    REGULAR = "REGULAR"  # 3m confirmation


@dataclass(frozen=True)
class TradeSignal:
    """Entry signal for one asset on one timeframe."""

    symbol: str
    direction: Direction
    timeframe: Timeframe
    price: str
    strength: SignalStrength
    timestamp: datetime

    def __post_init__(self) -> None:
        """Validate signal data."""
        if self.timeframe not in (Timeframe.M3, Timeframe.M15):
            raise ValueError("Signals originate from the 3m or 15m timeframe only")
