"""Abstract market data provider interface."""

from abc import ABC, abstractmethod

from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import Timeframe


class DataSourceError(RuntimeError):
    """Market data could not be fetched after exhausting retries."""


class MarketDataProvider(ABC):
    """Abstract interface for market data providers."""

    @abstractmethod
    def list_symbols(self) -> list[str]:
        """
        Fetch the tradable symbol universe.

        Returns:
            Symbol identifiers (e.g., "BTCUSDT")
        """
        ...

    @abstractmethod
    def get_last_price(self, symbol: str) -> str:
        """
        Fetch the last traded price for a symbol.

        Args:
            symbol: Symbol identifier (e.g., "BTCUSDT")

        Returns:
            String-encoded price, or "0" when the exchange has no data
        """
        ...

    @abstractmethod
    def get_candles(self, symbol: str, timeframe: Timeframe, limit: int) -> list[Candle]:
        """
        Fetch OHLCV candles for a symbol.

        Args:
            symbol: Symbol identifier (e.g., "BTCUSDT")
            timeframe: Candle timeframe
            limit: Number of candles to fetch

        Returns:
            List of candles, most recent last; empty when the exchange has no data
        """
        ...
