"""Market data providers."""

from .collector import DataCollector
from .provider import DataSourceError, MarketDataProvider
from .stub_provider import StubMarketDataProvider

__all__ = [
    "DataCollector",
    "DataSourceError",
    "MarketDataProvider",
    "StubMarketDataProvider",
]
