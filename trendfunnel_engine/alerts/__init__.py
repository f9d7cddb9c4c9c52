"""Alert services for the trend funnel engine.

Provides notification capabilities for operators:
- TelegramAlerter: Real-time notifications via Telegram bot
"""

from trendfunnel_engine.alerts.telegram import (
    Alert,
    AlertPriority,
    AlertType,
    TelegramAlerter,
    TelegramConfig,
)

__all__ = [
    "Alert",
    "AlertPriority",
    "AlertType",
    "TelegramAlerter",
    "TelegramConfig",
]
