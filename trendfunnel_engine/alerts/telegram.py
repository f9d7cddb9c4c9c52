"""Telegram alert service for operator notifications.

Provides real-time notifications for:
- Trade signals found by the entry detector
- Regular active-token updates
- Bot start / stop
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any

import httpx

from trendfunnel_engine.alerts.summary import (
    build_signal_summary,
    build_started_message,
    build_stopped_message,
    escape_markdown,
)
from trendfunnel_engine.config.models import TelegramSettings
from trendfunnel_engine.core.pipeline import CycleContext
from trendfunnel_engine.models.signal import TradeSignal

logger = logging.getLogger(__name__)


class AlertPriority(Enum):
    """Alert priority levels."""
    LOW = auto()      # Regular updates
    MEDIUM = auto()   # Trade signals, start notices
    CRITICAL = auto()  # Bot stopped


class AlertType(Enum):
    """Types of alerts."""
    TRADE_SIGNALS = "trade_signals"
    REGULAR_UPDATE = "regular_update"
    BOT_STARTED = "bot_started"
    BOT_STOPPED = "bot_stopped"


@dataclass
class Alert:
    """Alert message container."""
    alert_type: AlertType
    priority: AlertPriority
    title: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    silent: bool = False

    def to_telegram_message(self) -> str:
        """Format alert as Telegram message with markdown."""
        emoji = self._get_emoji()
        priority_tag = self._get_priority_tag()

        lines = [
            f"{emoji} *{priority_tag}{self.title}*",
            "",
            f"⏰ *{self.timestamp.strftime('%H:%M:%S UTC')}*",
            "",
            self.message,
        ]

        return "\n".join(lines)

    def _get_emoji(self) -> str:
        """Get emoji based on alert type."""
        emojis = {
            AlertType.TRADE_SIGNALS: "📈",
            AlertType.REGULAR_UPDATE: "📋",
            AlertType.BOT_STARTED: "✅",
            AlertType.BOT_STOPPED: "🛑",
        }
        return emojis.get(self.alert_type, "📌")

    def _get_priority_tag(self) -> str:
        """Get priority tag for message title."""
        if self.priority == AlertPriority.CRITICAL:
            return "🔴 "
        return ""


@dataclass
class TelegramConfig:
    """Telegram bot configuration."""
    bot_token: str
    chat_id: str
    enabled: bool = True
    bot_name: str = "Trading Bot"
    # Alert filtering
    min_priority: AlertPriority = AlertPriority.LOW
    # Rate limiting
    max_alerts_per_minute: int = 10

    @classmethod
    def from_settings(cls, settings: TelegramSettings) -> "TelegramConfig":
        """Build from the validated config section; disabled unless configured."""
        return cls(
            bot_token=settings.bot_token,
            chat_id=settings.chat_id,
            enabled=settings.enabled and settings.is_configured,
            bot_name=settings.bot_name,
            min_priority=AlertPriority[settings.min_priority.upper()],
            max_alerts_per_minute=settings.max_alerts_per_minute,
        )


class TelegramAlerter:
    """Telegram notification service.

    Sends formatted alerts to a Telegram chat via bot.
    Includes rate limiting, priority filtering, and error handling.

    Example:
        >>> config = TelegramConfig(bot_token="xxx", chat_id="123")
        >>> alerter = TelegramAlerter(config)
        >>> await alerter.send_trade_signals(context, signals)
    """

    TELEGRAM_API_BASE = "https://api.telegram.org"

    def __init__(self, config: TelegramConfig):
        """Initialize alerter with configuration.

        Args:
            config: Telegram bot configuration
        """
        self.config = config
        self._client: httpx.AsyncClient | None = None

        # Rate limiting state
        self._alert_timestamps: list[datetime] = []

        # Retry configuration
        self._max_retries = 3
        self._retry_delay = 1.0

    @property
    def status(self) -> str:
        return "enabled" if self.config.enabled else "disabled"

    async def __aenter__(self) -> "TelegramAlerter":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=30.0)
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send_alert(self, alert: Alert) -> bool:
        """Send an alert to Telegram.

        Args:
            alert: Alert to send

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.config.enabled:
            logger.debug("Telegram disabled, alert not sent: %s", alert.title)
            return False

        # Check priority filter
        if alert.priority.value < self.config.min_priority.value:
            return False

        # Check rate limit
        if not self._check_rate_limit():
            logger.warning("Telegram rate limit reached, dropping alert: %s", alert.title)
            return False

        success = await self._send_message(
            alert.to_telegram_message(), silent=alert.silent
        )

        if success:
            self._alert_timestamps.append(datetime.now(timezone.utc))
            logger.info("✅ Telegram notification sent: %s", alert.title)

        return success

    async def send_trade_signals(
        self,
        context: CycleContext,
        signals: list[TradeSignal],
    ) -> bool:
        """Send trade signals together with the cycle's counts.

        Args:
            context: Cycle the signals were detected in
            signals: Detected signals
        """
        alert = Alert(
            alert_type=AlertType.TRADE_SIGNALS,
            priority=AlertPriority.MEDIUM,
            title=f"TRADE SIGNALS {escape_markdown(self.config.bot_name)}",
            message=build_signal_summary(context, signals),
            silent=not signals,
        )
        return await self.send_alert(alert)

    async def send_regular_update(self, context: CycleContext) -> bool:
        """Send the periodic active-token update (no signals listed)."""
        alert = Alert(
            alert_type=AlertType.REGULAR_UPDATE,
            priority=AlertPriority.LOW,
            title=f"REGULAR UPDATE {escape_markdown(self.config.bot_name)}",
            message=build_signal_summary(context, []),
            silent=True,
        )
        return await self.send_alert(alert)

    async def send_started(self) -> bool:
        """Send bot started notification."""
        alert = Alert(
            alert_type=AlertType.BOT_STARTED,
            priority=AlertPriority.MEDIUM,
            title=f"{escape_markdown(self.config.bot_name)} STARTED",
            message=build_started_message(),
        )
        return await self.send_alert(alert)

    async def send_stopped(self, reason: str | None = None) -> bool:
        """Send bot stopped notification, always audible."""
        alert = Alert(
            alert_type=AlertType.BOT_STOPPED,
            priority=AlertPriority.CRITICAL,
            title=f"{escape_markdown(self.config.bot_name)} STOPPED",
            message=build_stopped_message(reason),
        )
        return await self.send_alert(alert)

    def _check_rate_limit(self) -> bool:
        """Check if we're within rate limits."""
        now = datetime.now(timezone.utc)
        cutoff = now.replace(second=0, microsecond=0)  # Start of current minute

        # Clean old timestamps
        self._alert_timestamps = [
            ts for ts in self._alert_timestamps
            if ts >= cutoff
        ]

        return len(self._alert_timestamps) < self.config.max_alerts_per_minute

    async def _send_message(self, text: str, silent: bool = False) -> bool:
        """Send message via Telegram API.

        Args:
            text: Message text (markdown formatted)
            silent: Deliver without a notification sound

        Returns:
            True if sent successfully
        """
        if not self._client:
            async with httpx.AsyncClient(timeout=30.0) as client:
                return await self._send_with_client(client, text, silent)
        return await self._send_with_client(self._client, text, silent)

    async def _send_with_client(
        self, client: httpx.AsyncClient, text: str, silent: bool = False
    ) -> bool:
        """Send message using provided client with retries."""
        url = f"{self.TELEGRAM_API_BASE}/bot{self.config.bot_token}/sendMessage"
        payload = {
            "chat_id": self.config.chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
            "disable_notification": silent,
        }

        for attempt in range(self._max_retries):
            try:
                response = await client.post(url, json=payload)
                if response.status_code == 200:
                    return True
                elif response.status_code == 429:
                    # Rate limited by Telegram
                    retry_after = response.json().get("parameters", {}).get("retry_after", 10)
                    await asyncio.sleep(retry_after)
                else:
                    logger.error(
                        "❌ Telegram API error %d: %s", response.status_code, response.text
                    )
                    break
            except httpx.TimeoutException:
                if attempt < self._max_retries - 1:
                    await asyncio.sleep(self._retry_delay * (attempt + 1))
            except httpx.HTTPError as exc:
                logger.error("❌ Telegram send failed: %s", exc)
                break

        return False
