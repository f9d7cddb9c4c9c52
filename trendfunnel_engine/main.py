"""Main entry point for the trend funnel bot."""

import asyncio
import logging
import os

from trendfunnel_engine.alerts.telegram import TelegramAlerter, TelegramConfig
from trendfunnel_engine.config.loader import load_config
from trendfunnel_engine.config.models import BotConfig
from trendfunnel_engine.core.bot import TrendFunnelBot
from trendfunnel_engine.market_data.bybit_provider import (
    BybitMarketDataProvider,
    create_exchange,
)
from trendfunnel_engine.market_data.provider import MarketDataProvider
from trendfunnel_engine.market_data.stub_provider import StubMarketDataProvider

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_market_data_provider(config: BotConfig) -> MarketDataProvider:
    """Select the market data provider from ``TRENDFUNNEL_MARKET_DATA_PROVIDER``."""
    source = os.environ.get("TRENDFUNNEL_MARKET_DATA_PROVIDER", "bybit")
    if source == "stub":
        logger.info("✅ Market data: Stub (deterministic)")
        return StubMarketDataProvider()

    exchange = create_exchange(config.exchange, config.fetch)
    logger.info(
        f"✅ Market data: {config.exchange.exchange_id} "
        f"(testnet={config.exchange.testnet})"
    )
    return BybitMarketDataProvider(exchange, config.exchange, config.fetch)


async def _run(config: BotConfig, max_cycles: int | None) -> None:
    provider = build_market_data_provider(config)
    telegram_config = TelegramConfig.from_settings(config.telegram)
    if not telegram_config.enabled:
        logger.info("⚠️ Telegram not configured (set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID)")

    async with TelegramAlerter(telegram_config) as alerter:
        bot = TrendFunnelBot(config, provider, alerter)
        await bot.run(max_cycles=max_cycles)


def main() -> int:
    """Main entry point for the trend funnel bot."""
    logger.info("🚀 Trend funnel bot starting...")

    # Load configuration
    try:
        config = load_config()
        logger.info(
            f"✅ Configuration loaded: exchange={config.exchange.exchange_id}, "
            f"max_symbols={config.exchange.max_symbols}"
        )
    except Exception as e:
        logger.error(f"❌ Failed to load configuration: {e}")
        return 1

    max_cycles_env = os.environ.get("MAX_CYCLES")
    try:
        max_cycles = int(max_cycles_env) if max_cycles_env is not None else None
    except ValueError:
        logger.error(f"❌ Invalid MAX_CYCLES: {max_cycles_env!r} is not an integer")
        return 1

    try:
        asyncio.run(_run(config, max_cycles))
    except KeyboardInterrupt:
        logger.info("⏸️  Shutdown requested by user")
    except Exception as e:
        logger.error(f"❌ Bot error: {e}", exc_info=True)
        return 1
    finally:
        logger.info("🛑 Bot stopped")

    return 0


def cli() -> None:
    """Console script entry point."""
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover
    cli()
