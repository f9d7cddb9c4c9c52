"""Rate-limited batch collection of asset snapshots.

Symbols are processed in batches. Inside a batch each symbol starts after a
fixed stagger and fetches its timeframes one by one with a pause in between;
batches are separated by a longer pause. Provider calls block, so they run
in worker threads. A failure only drops the affected symbol.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from trendfunnel_engine.config.models import FetchConfig
from trendfunnel_engine.indicators.engine import NO_PRICE, build_asset_snapshot
from trendfunnel_engine.market_data.provider import DataSourceError, MarketDataProvider
from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import AssetSnapshot, Timeframe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataCollector:
    """Collect asset snapshots from a provider with request pacing."""

    def __init__(
        self,
        provider: MarketDataProvider,
        fetch_config: FetchConfig | None = None,
        candle_limit: int = 200,
    ) -> None:
        """
        Initialize collector.

        Args:
            provider: Market data provider
            fetch_config: Batching and pacing settings
            candle_limit: Candles requested per timeframe
        """
        self.provider = provider
        self.config = fetch_config or FetchConfig()
        self.candle_limit = candle_limit

    async def collect_all(self, symbols: list[str]) -> list[AssetSnapshot]:
        """
        Collect snapshots for every symbol.

        Args:
            symbols: Symbols to process, in order

        Returns:
            Snapshots of the symbols that had complete data, in input order
        """
        results: list[AssetSnapshot] = []
        batch_size = self.config.batch_size
        total_batches = (len(symbols) + batch_size - 1) // batch_size

        logger.info(f"🔄 Collecting data for {len(symbols)} symbols...")

        for start in range(0, len(symbols), batch_size):
            batch = symbols[start : start + batch_size]
            logger.info(
                f"📊 Batch {start // batch_size + 1}/{total_batches}: {', '.join(batch)}"
            )

            outcomes = await asyncio.gather(
                *(self._collect_staggered(symbol, index) for index, symbol in enumerate(batch)),
                return_exceptions=True,
            )

            for symbol, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    logger.error(f"❌ {symbol}: {outcome}", exc_info=outcome)
                elif outcome is None:
                    logger.info(f"⚠️ {symbol}: no data")
                else:
                    results.append(outcome)

            if start + batch_size < len(symbols):
                await asyncio.sleep(self.config.batch_delay_seconds)

        logger.info(f"✅ Collected data for {len(results)}/{len(symbols)} symbols")
        return results

    async def collect_asset(self, symbol: str) -> AssetSnapshot | None:
        """
        Fetch price and candles for one symbol and build its snapshot.

        Returns:
            AssetSnapshot, or None when the symbol has no price, lacks
            history, or the data source gave up after retries
        """
        try:
            price = await self._call(self.provider.get_last_price, symbol)
            if price == NO_PRICE:
                return None

            candles: dict[Timeframe, list[Candle]] = {}
            for index, timeframe in enumerate(Timeframe):
                if index > 0:
                    await asyncio.sleep(self.config.request_delay_seconds)
                candles[timeframe] = await self._call(
                    self.provider.get_candles, symbol, timeframe, self.candle_limit
                )
        except DataSourceError as exc:
            logger.warning(f"⚠️ {symbol} skipped: {exc}")
            return None

        return build_asset_snapshot(symbol, price, candles)

    async def _collect_staggered(self, symbol: str, index: int) -> AssetSnapshot | None:
        if index:
            await asyncio.sleep(index * self.config.stagger_seconds)
        return await self.collect_asset(symbol)

    @staticmethod
    async def _call(fn: Callable[..., T], *args: object) -> T:
        return await asyncio.to_thread(fn, *args)
