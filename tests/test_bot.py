"""Tests for the timer-driven TrendFunnelBot."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import ccxt
import pytest
from pytest import LogCaptureFixture

from trendfunnel_engine.config.models import BotConfig, ExchangeConfig, ScheduleConfig
from trendfunnel_engine.core.bot import TrendFunnelBot
from trendfunnel_engine.core.pipeline import build_cycle
from trendfunnel_engine.market_data.bybit_provider import BybitMarketDataProvider
from trendfunnel_engine.market_data.provider import DataSourceError
from trendfunnel_engine.market_data.stub_provider import StubMarketDataProvider
from trendfunnel_engine.models.signal import Direction

from tests.factories import bullish_asset, make_asset


def _alerter() -> AsyncMock:
    alerter = AsyncMock()
    alerter.status = "disabled"
    return alerter


@pytest.fixture
def bot(fast_config: BotConfig) -> TrendFunnelBot:
    return TrendFunnelBot(fast_config, StubMarketDataProvider(), _alerter())


@pytest.mark.asyncio
async def test_refresh_universe(bot: TrendFunnelBot) -> None:
    symbols = await bot.refresh_universe()
    assert symbols == ["BTCUSDT", "ETHUSDT"]
    assert bot.symbols == symbols


@pytest.mark.asyncio
async def test_refresh_universe_failure_keeps_previous(fast_config: BotConfig) -> None:
    provider = MagicMock()
    provider.list_symbols.side_effect = DataSourceError("down")
    bot = TrendFunnelBot(fast_config, provider, _alerter())
    bot.symbols = ["AUSDT"]

    assert await bot.refresh_universe() == ["AUSDT"]
    assert bot.symbols == ["AUSDT"]


@pytest.mark.asyncio
async def test_refresh_universe_exchange_rejection_keeps_previous(
    fast_config: BotConfig,
) -> None:
    exchange = MagicMock()
    exchange.load_markets.side_effect = ccxt.PermissionDenied("403 region blocked")
    provider = BybitMarketDataProvider(exchange, fast_config.exchange, fast_config.fetch)
    bot = TrendFunnelBot(fast_config, provider, _alerter())
    bot.symbols = ["BTCUSDT"]

    assert await bot.refresh_universe() == ["BTCUSDT"]
    assert bot.symbols == ["BTCUSDT"]


@pytest.mark.asyncio
async def test_refresh_data_builds_new_context(bot: TrendFunnelBot) -> None:
    await bot.refresh_universe()
    previous = bot.context

    context = await bot.refresh_data()

    assert context is bot.context
    assert context is not previous
    assert [a.symbol for a in context.assets] == ["BTCUSDT", "ETHUSDT"]
    # Steady uptrend: both assets bullish and active
    assert len(context.global_trend.bullish) == 2
    assert len(context.active.active_bullish) == 2


@pytest.mark.asyncio
async def test_refresh_data_respects_max_symbols(fast_config: BotConfig) -> None:
    config = fast_config.model_copy(update={"exchange": ExchangeConfig(max_symbols=1)})
    bot = TrendFunnelBot(config, StubMarketDataProvider(), _alerter())
    await bot.refresh_universe()

    context = await bot.refresh_data()
    assert [a.symbol for a in context.assets] == ["BTCUSDT"]


@pytest.mark.asyncio
async def test_refresh_data_without_symbols(bot: TrendFunnelBot) -> None:
    previous = bot.context
    assert await bot.refresh_data() is None
    assert bot.context is previous


@pytest.mark.asyncio
async def test_refresh_data_without_assets_keeps_context(fast_config: BotConfig) -> None:
    bot = TrendFunnelBot(fast_config, StubMarketDataProvider(symbols=[]), _alerter())
    bot.symbols = ["GONEUSDT"]
    previous = bot.context

    assert await bot.refresh_data() is None
    assert bot.context is previous


@pytest.mark.asyncio
async def test_check_signals_alerts_on_hits(bot: TrendFunnelBot) -> None:
    bot.context = build_cycle([bullish_asset("TESTUSDT")])

    signals = await bot.check_signals()

    assert [(s.symbol, s.direction) for s in signals] == [("TESTUSDT", Direction.LONG)]
    bot.alerter.send_trade_signals.assert_awaited_once_with(bot.context, signals)


@pytest.mark.asyncio
async def test_check_signals_no_active_tokens(bot: TrendFunnelBot) -> None:
    bot.context = build_cycle([make_asset("AUSDT")])

    assert await bot.check_signals() == []
    bot.alerter.send_trade_signals.assert_not_awaited()


@pytest.mark.asyncio
async def test_regular_update_only_when_active(bot: TrendFunnelBot) -> None:
    await bot.send_regular_update()
    bot.alerter.send_regular_update.assert_not_awaited()

    bot.context = build_cycle([bullish_asset()])
    await bot.send_regular_update()
    bot.alerter.send_regular_update.assert_awaited_once_with(bot.context)


@pytest.mark.asyncio
async def test_run_max_cycles(bot: TrendFunnelBot) -> None:
    await bot.run(max_cycles=2)

    bot.alerter.send_started.assert_awaited_once()
    bot.alerter.send_stopped.assert_awaited_once_with("Completed 2 cycles")
    assert len(bot.context.assets) == 2
    assert bot.alerter.send_regular_update.await_count == 2
    assert not bot.is_running


@pytest.mark.asyncio
async def test_run_max_cycles_stops_on_error(fast_config: BotConfig) -> None:
    provider = MagicMock()
    provider.list_symbols.side_effect = RuntimeError("boom")
    bot = TrendFunnelBot(fast_config, provider, _alerter())

    with pytest.raises(RuntimeError, match="boom"):
        await bot.run(max_cycles=1)

    bot.alerter.send_stopped.assert_awaited_once()
    assert not bot.is_running


@pytest.mark.asyncio
async def test_start_and_stop_timers(fast_config: BotConfig) -> None:
    schedule = ScheduleConfig(
        universe_refresh_seconds=0.01,
        indicator_refresh_seconds=0.01,
        signal_check_seconds=0.01,
        notification_seconds=0.01,
    )
    config = fast_config.model_copy(update={"schedule": schedule})
    bot = TrendFunnelBot(config, StubMarketDataProvider(), _alerter())

    await bot.start()
    assert bot.is_running
    assert len(bot._tasks) == 4
    # Initial load happens before the first tick
    assert len(bot.context.assets) == 2

    await asyncio.sleep(0.1)
    await bot.stop("Manual stop")

    assert not bot.is_running
    assert bot._tasks == []
    bot.alerter.send_started.assert_awaited_once()
    bot.alerter.send_stopped.assert_awaited_once_with("Manual stop")
    assert bot.alerter.send_regular_update.await_count >= 1


@pytest.mark.asyncio
async def test_start_twice_is_noop(bot: TrendFunnelBot) -> None:
    await bot.start()
    await bot.start()
    await bot.stop()

    bot.alerter.send_started.assert_awaited_once()


@pytest.mark.asyncio
async def test_stop_when_not_running(bot: TrendFunnelBot) -> None:
    await bot.stop("never started")
    bot.alerter.send_stopped.assert_not_awaited()


@pytest.mark.asyncio
async def test_failing_timer_job_keeps_running(
    bot: TrendFunnelBot, caplog: LogCaptureFixture
) -> None:
    job = AsyncMock(side_effect=RuntimeError("job exploded"))

    with caplog.at_level(logging.ERROR):
        task = bot._every("flaky", 0.001, job)
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    assert job.await_count >= 2
    assert "Timer 'flaky' job failed" in caplog.text


def test_get_stats(bot: TrendFunnelBot) -> None:
    stats = bot.get_stats()
    assert stats["total_symbols"] == 0
    assert stats["assets"] == 0
    assert stats["active_bullish"] == 0
    assert "cycle_at" in stats
