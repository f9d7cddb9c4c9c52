"""Stub market data provider for testing with deterministic data."""

from datetime import datetime, timedelta, timezone

from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import Timeframe

from .provider import MarketDataProvider


class StubMarketDataProvider(MarketDataProvider):
    """Stub provider returning fixed, gently trending market data."""

    def __init__(
        self,
        symbols: list[str] | None = None,
        base_price: float = 100.0,
        drift_pct: float = 0.05,  # per candle, signed
        volume: float = 1000.0,
    ):
        """
        Initialize stub provider with configurable parameters.

        Args:
            symbols: Symbol universe to report
            base_price: Price of the oldest candle
            drift_pct: Close-to-close change per candle in percent
            volume: Volume for candles
        """
        self.symbols = symbols if symbols is not None else ["BTCUSDT", "ETHUSDT"]
        self.base_price = base_price
        self.drift_pct = drift_pct
        self.volume = volume

    def list_symbols(self) -> list[str]:
        """Return the configured universe."""
        return list(self.symbols)

    def get_last_price(self, symbol: str) -> str:
        """Return the close of the newest 3m candle, or "0" for unknown symbols."""
        if symbol not in self.symbols:
            return "0"
        return f"{self._close_at(199):.6f}"

    def get_candles(self, symbol: str, timeframe: Timeframe, limit: int) -> list[Candle]:
        """Return deterministic candle data ending at the newest close."""
        if symbol not in self.symbols:
            return []

        candles: list[Candle] = []
        base_time = datetime.now(timezone.utc)
        minutes = int(Timeframe(timeframe))
        first = 200 - limit

        for i in range(limit):
            index = first + i
            close_price = self._close_at(index)
            open_price = self._close_at(index - 1)
            candles.append(
                Candle(
                    timestamp=base_time - timedelta(minutes=(limit - i) * minutes),
                    open=open_price,
                    high=max(open_price, close_price) * 1.001,  # +0.1%
                    low=min(open_price, close_price) * 0.999,  # -0.1%
                    close=close_price,
                    volume=self.volume,
                )
            )

        return candles

    def _close_at(self, index: int) -> float:
        return self.base_price * (1 + self.drift_pct / 100.0) ** index
