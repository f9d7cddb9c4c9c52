"""Configuration package for the trend funnel engine."""

from .loader import load_config
from .models import (
    BotConfig,
    ExchangeConfig,
    FetchConfig,
    ScheduleConfig,
    TelegramSettings,
)

__all__ = [
    "BotConfig",
    "ExchangeConfig",
    "FetchConfig",
    "ScheduleConfig",
    "TelegramSettings",
    "load_config",
]
