"""Bybit perpetuals market data provider using CCXT.

Provides the symbol universe, last prices and candles via the Bybit v5 REST
API. Transient network failures are retried with exponential backoff;
exchange-side rejections (unknown symbol, bad request) mean "no data".
"""

import logging
import re
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

import ccxt

from trendfunnel_engine.config.models import ExchangeConfig, FetchConfig
from trendfunnel_engine.market_data.provider import DataSourceError, MarketDataProvider
from trendfunnel_engine.models.candle import Candle
from trendfunnel_engine.models.snapshot import Timeframe

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Plain <BASE>USDT contracts only (skips e.g. 1000PEPEUSDT, BTC-26DEC25)
_SYMBOL_PATTERN = "^[A-Z]+{quote}$"


def create_exchange(exchange_config: ExchangeConfig, fetch_config: FetchConfig) -> Any:
    """Build a rate-limited ccxt exchange for swap market data."""
    exchange_class = getattr(ccxt, exchange_config.exchange_id)
    exchange = exchange_class({
        "enableRateLimit": True,
        "timeout": int(fetch_config.timeout_seconds * 1000),
        "options": {
            "defaultType": "swap",
            "defaultSubType": exchange_config.category,
        },
    })
    if exchange_config.testnet:
        exchange.set_sandbox_mode(True)
    return exchange


class BybitMarketDataProvider(MarketDataProvider):
    """Real Bybit market data provider via CCXT.

    Attributes:
        exchange: CCXT exchange instance (must have ``enableRateLimit=True``).
        exchange_config: Universe filter settings.
        max_retries: Retry attempts on transient failures (after the first try).
        base_backoff_seconds: Initial backoff interval for retries.
    """

    def __init__(
        self,
        exchange: Any,
        exchange_config: ExchangeConfig | None = None,
        fetch_config: FetchConfig | None = None,
    ) -> None:
        """Initialise the provider.

        Args:
            exchange: A configured CCXT exchange instance.
            exchange_config: Universe filter settings (defaults if omitted).
            fetch_config: Retry policy (defaults if omitted).
        """
        fetch_config = fetch_config or FetchConfig()
        self.exchange = exchange
        self.exchange_config = exchange_config or ExchangeConfig()
        self.max_retries = fetch_config.max_retries
        self.base_backoff_seconds = fetch_config.base_backoff_seconds
        self._unified_symbols: dict[str, str] = {}

    # -- Public interface (MarketDataProvider) ---------------------------------

    def list_symbols(self) -> list[str]:
        """Return recently listed, active perpetuals of the configured category.

        Returns:
            Exchange market ids (e.g. ``"BTCUSDT"``), in exchange order.

        Raises:
            DataSourceError: The markets could not be loaded, including
                exchange-side rejections (geo block, bad credentials).
        """
        try:
            markets = self._retry(
                lambda: self.exchange.load_markets(True),
                context="load_markets",
            )
        except ccxt.ExchangeError as exc:
            raise DataSourceError(f"Bybit rejected load_markets: {exc}") from exc

        quote = self.exchange_config.quote_currency
        pattern = re.compile(_SYMBOL_PATTERN.format(quote=re.escape(quote)))
        cutoff = datetime.now(timezone.utc) - timedelta(
            days=self.exchange_config.max_listing_age_days
        )

        symbols: list[str] = []
        for market in markets.values():
            if not self._is_tradable(market, quote):
                continue
            market_id = market.get("id", "")
            if not pattern.match(market_id):
                continue
            if not self._listed_after(market, cutoff):
                continue
            self._unified_symbols[market_id] = market["symbol"]
            symbols.append(market_id)

        logger.info("Universe: %d symbols from %d markets", len(symbols), len(markets))
        return symbols

    def get_last_price(self, symbol: str) -> str:
        """Fetch the last price, or ``"0"`` when the exchange has none."""
        try:
            ticker = self._retry(
                lambda: self.exchange.fetch_ticker(self._unified(symbol)),
                context=f"fetch_ticker({symbol})",
            )
        except ccxt.ExchangeError as exc:
            logger.warning("No ticker for %s: %s", symbol, exc)
            return "0"

        raw_price = (ticker.get("info") or {}).get("lastPrice")
        if raw_price is None:
            raw_price = ticker.get("last")
        return str(raw_price) if raw_price is not None else "0"

    def get_candles(self, symbol: str, timeframe: Timeframe, limit: int) -> list[Candle]:
        """Fetch OHLCV candles, oldest first; empty when the exchange has none."""
        timeframe = Timeframe(timeframe)
        try:
            raw = self._retry(
                lambda: self.exchange.fetch_ohlcv(
                    self._unified(symbol), timeframe.ccxt_code, limit=limit
                ),
                context=f"fetch_ohlcv({symbol}, {timeframe.ccxt_code})",
            )
        except ccxt.ExchangeError as exc:
            logger.warning("No candles for %s/%s: %s", symbol, timeframe.ccxt_code, exc)
            return []

        return [Candle.from_row(row) for row in raw or []]

    # -- Internal helpers ------------------------------------------------------

    def _unified(self, symbol: str) -> str:
        """Map an exchange id to the ccxt unified symbol when known."""
        return self._unified_symbols.get(symbol, symbol)

    def _is_tradable(self, market: dict[str, Any], quote: str) -> bool:
        category = self.exchange_config.category
        # Inverse contracts settle in the base coin
        settle_ok = (
            market.get("settle") == quote
            if category == "linear"
            else market.get("quote") == quote
        )
        return bool(
            market.get("active")
            and market.get(category)
            and market.get("swap")
            and settle_ok
        )

    @staticmethod
    def _listed_after(market: dict[str, Any], cutoff: datetime) -> bool:
        launch_ms = (market.get("info") or {}).get("launchTime")
        try:
            launched = datetime.fromtimestamp(int(launch_ms) / 1000.0, tz=timezone.utc)
        except (TypeError, ValueError):
            return False
        return launched >= cutoff

    def _retry(self, fn: Callable[[], T], *, context: str) -> T:
        """Execute ``fn``, retrying transient network errors with backoff.

        Args:
            fn: Callable to execute.
            context: Human-readable label for log messages.

        Returns:
            Return value of ``fn``.

        Raises:
            DataSourceError: After exhausting all retries.
            ccxt.ExchangeError: Non-transient exchange rejections, unretried.
        """
        attempts = self.max_retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                return fn()
            except ccxt.NetworkError as exc:
                last_error = exc
                if attempt == attempts:
                    break
                wait = self.base_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "⚠️ Bybit network error on %s (attempt %d/%d): %s, retrying in %.1fs",
                    context,
                    attempt,
                    attempts,
                    exc,
                    wait,
                )
                time.sleep(wait)

        raise DataSourceError(
            f"Bybit API failed after {self.max_retries} retries ({context}): {last_error}"
        )
