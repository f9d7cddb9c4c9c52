"""Pydantic configuration models with type safety and validation."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class ExchangeConfig(BaseModel):
    """Exchange and symbol-universe settings."""

    exchange_id: str = Field(
        default="bybit",
        description="ccxt exchange id used for market data",
    )
    category: Literal["linear", "inverse"] = Field(
        default="linear",
        description="Perpetual contract category to scan (linear or inverse)",
    )
    quote_currency: str = Field(
        default="USDT",
        min_length=1,
        description="Settlement/quote currency of tradable symbols",
    )
    max_listing_age_days: int = Field(
        default=90,
        ge=1,
        description="Only symbols listed within this many days are scanned",
    )
    max_symbols: int = Field(
        default=50,
        ge=1,
        description="Maximum symbols processed per indicator cycle",
    )
    candle_limit: int = Field(
        default=200,
        ge=100,
        le=1000,
        description="Candles fetched per timeframe (indicators need at least 100)",
    )
    testnet: bool = Field(
        default=False,
        description="Use the exchange sandbox",
    )


class FetchConfig(BaseModel):
    """Request pacing and retry policy for the data source."""

    batch_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Symbols fetched concurrently per batch",
    )
    stagger_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Start offset between symbols inside one batch",
    )
    request_delay_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Pause between sequential timeframe requests of one symbol",
    )
    batch_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause between batches",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries on transient network errors (connection reset, timeout)",
    )
    base_backoff_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="First retry delay; doubles on every further attempt",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="HTTP timeout for exchange requests",
    )


class ScheduleConfig(BaseModel):
    """Independent timer periods."""

    universe_refresh_seconds: float = Field(
        default=6 * 60 * 60,
        gt=0.0,
        description="Symbol universe refresh period",
    )
    indicator_refresh_seconds: float = Field(
        default=10 * 60,
        gt=0.0,
        description="Candle fetch + classification period",
    )
    signal_check_seconds: float = Field(
        default=30,
        gt=0.0,
        description="Entry-signal detection period",
    )
    notification_seconds: float = Field(
        default=2 * 60,
        gt=0.0,
        description="Regular Telegram update period",
    )

    @model_validator(mode="after")
    def _signal_check_not_slower_than_refresh(self) -> "ScheduleConfig":
        """Signal checks must run at least as often as indicator refreshes."""
        if self.signal_check_seconds > self.indicator_refresh_seconds:
            raise ValueError(
                f"signal_check_seconds ({self.signal_check_seconds}) cannot exceed "
                f"indicator_refresh_seconds ({self.indicator_refresh_seconds})"
            )
        return self


class TelegramSettings(BaseModel):
    """Telegram notification sink settings."""

    enabled: bool = Field(default=True, description="Send Telegram notifications")
    bot_token: str = Field(default="", description="Bot API token from @BotFather")
    chat_id: str = Field(default="", description="Target chat id")
    bot_name: str = Field(default="Trading Bot", description="Name shown in messages")
    min_priority: Literal["low", "medium", "critical"] = Field(
        default="low",
        description="Lowest alert priority sent (medium mutes regular updates)",
    )
    max_alerts_per_minute: int = Field(
        default=10,
        ge=1,
        description="Outgoing message rate limit",
    )

    @property
    def is_configured(self) -> bool:
        """True when a real token and a chat id are present."""
        return bool(
            self.bot_token
            and self.chat_id
            and self.bot_token != "YOUR_TELEGRAM_BOT_TOKEN"
        )


class BotConfig(BaseModel):
    """Top-level bot configuration."""

    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
