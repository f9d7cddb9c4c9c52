"""Timer-driven bot coordinating data refresh, signal checks and alerts.

Four independent timers share nothing but the latest completed
``CycleContext``; a data refresh replaces that reference only once its
cycle is fully built.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from trendfunnel_engine.alerts.summary import format_signal_line
from trendfunnel_engine.alerts.telegram import TelegramAlerter
from trendfunnel_engine.config.models import BotConfig
from trendfunnel_engine.core.pipeline import CycleContext, build_cycle
from trendfunnel_engine.market_data.collector import DataCollector
from trendfunnel_engine.market_data.provider import DataSourceError, MarketDataProvider
from trendfunnel_engine.models.signal import TradeSignal

logger = logging.getLogger(__name__)


class TrendFunnelBot:
    """Runs the trend funnel on fixed schedules and reports to Telegram."""

    def __init__(
        self,
        config: BotConfig,
        market_data_provider: MarketDataProvider,
        alerter: TelegramAlerter,
    ):
        """
        Initialize bot.

        Args:
            config: Bot configuration
            market_data_provider: Market data provider
            alerter: Telegram alerter
        """
        self.config = config
        self.market_data_provider = market_data_provider
        self.alerter = alerter
        self.collector = DataCollector(
            market_data_provider,
            fetch_config=config.fetch,
            candle_limit=config.exchange.candle_limit,
        )

        self.symbols: list[str] = []
        self.context = CycleContext.empty()

        self._tasks: list[asyncio.Task[None]] = []
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    # -- Jobs ------------------------------------------------------------------

    async def refresh_universe(self) -> list[str]:
        """Reload the symbol universe; keeps the previous one on failure."""
        logger.info("🔄 Refreshing symbol universe...")
        try:
            symbols = await asyncio.to_thread(self.market_data_provider.list_symbols)
        except DataSourceError as exc:
            logger.error(f"❌ Universe refresh failed: {exc}")
            return self.symbols

        self.symbols = symbols
        logger.info(f"✅ Universe: {len(symbols)} symbols")
        return symbols

    async def refresh_data(self) -> CycleContext | None:
        """Collect fresh snapshots and build a new cycle context.

        Returns:
            The new context, or None when nothing could be collected
            (the previous context stays current).
        """
        if not self.symbols:
            logger.warning("⚠️ Symbol universe is empty, skipping data refresh")
            return None

        symbols = self.symbols[: self.config.exchange.max_symbols]
        logger.info(f"📊 Refreshing data for {len(symbols)} symbols...")
        assets = await self.collector.collect_all(symbols)

        if not assets:
            logger.warning("⚠️ No symbol produced usable data")
            return None

        self.context = build_cycle(assets)
        logger.info(f"📈 Stats: {self.get_stats()}")
        return self.context

    async def check_signals(self) -> list[TradeSignal]:
        """Run the entry detector on the latest context and alert on hits."""
        context = self.context
        if context.total_active == 0:
            return []

        signals = context.find_signals()
        if not signals:
            logger.info("📭 No trade signals")
            return signals

        for signal in signals:
            logger.info(format_signal_line(signal))
        await self.alerter.send_trade_signals(context, signals)
        return signals

    async def send_regular_update(self) -> None:
        """Send the periodic update when any token is active."""
        context = self.context
        if context.total_active > 0:
            await self.alerter.send_regular_update(context)

    async def run_cycle(self) -> list[TradeSignal]:
        """One sequential pass: universe, data, signals, regular update."""
        await self.refresh_universe()
        await self.refresh_data()
        signals = await self.check_signals()
        await self.send_regular_update()
        return signals

    def get_stats(self) -> dict[str, Any]:
        """Counts describing the current state."""
        return {
            "total_symbols": len(self.symbols),
            "assets": len(self.context.assets),
            "active_bullish": len(self.context.active.active_bullish),
            "active_bearish": len(self.context.active.active_bearish),
            "cycle_at": self.context.created_at.isoformat(),
        }

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> None:
        """Send the start notice, load initial data and start the timers."""
        if self._running:
            logger.warning("⚠️ Bot is already running")
            return

        self._running = True
        logger.info(f"🚀 Starting bot (telegram {self.alerter.status})")
        await self.alerter.send_started()

        await self.refresh_universe()
        if self.symbols:
            await self.refresh_data()

        schedule = self.config.schedule
        self._tasks = [
            self._every("universe", schedule.universe_refresh_seconds, self.refresh_universe),
            self._every("data", schedule.indicator_refresh_seconds, self.refresh_data),
            self._every("signals", schedule.signal_check_seconds, self.check_signals),
            self._every("notify", schedule.notification_seconds, self.send_regular_update),
        ]
        logger.info(
            "✅ Timers: universe=%ss, data=%ss, signals=%ss, notify=%ss",
            schedule.universe_refresh_seconds,
            schedule.indicator_refresh_seconds,
            schedule.signal_check_seconds,
            schedule.notification_seconds,
        )

    async def stop(self, reason: str | None = None) -> None:
        """Cancel the timers and send the stop notice."""
        if not self._running:
            return

        self._running = False
        logger.info("🛑 Stopping bot...")
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        await self.alerter.send_stopped(reason)
        logger.info("✅ Bot stopped")

    async def run(self, max_cycles: int | None = None) -> None:
        """
        Run the bot.

        Args:
            max_cycles: When set, run this many sequential cycles and return
                instead of starting the timers.
        """
        if max_cycles is not None:
            self._running = True
            await self.alerter.send_started()
            try:
                for cycle in range(1, max_cycles + 1):
                    logger.info(f"▶️  Cycle {cycle}/{max_cycles}")
                    await self.run_cycle()
            finally:
                await self.stop(f"Completed {max_cycles} cycles")
            return

        await self.start()
        reason = "Manual stop"
        try:
            await asyncio.gather(*self._tasks)
        except Exception as exc:
            reason = f"Emergency stop: {exc}"
            raise
        finally:
            await self.stop(reason)

    def _every(
        self,
        name: str,
        interval_seconds: float,
        job: Callable[[], Awaitable[Any]],
    ) -> "asyncio.Task[None]":
        """Run ``job`` every ``interval_seconds``; a failing run is logged."""

        async def loop() -> None:
            while True:
                await asyncio.sleep(interval_seconds)
                try:
                    await job()
                except Exception:
                    logger.exception(f"❌ Timer '{name}' job failed")

        return asyncio.create_task(loop(), name=f"trendfunnel-{name}")
