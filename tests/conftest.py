import os
import sys
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:  # pragma: no cover
    sys.path.append(str(PROJECT_ROOT))

from trendfunnel_engine.config.models import BotConfig, FetchConfig  # noqa: E402


@pytest.fixture(autouse=True)
def clean_config_env() -> Generator[None, None, None]:
    """Ensure config-related env vars do not interfere with tests unless explicitly set."""
    # Store original values
    original_env = {}
    keys_to_clear = [
        "TRENDFUNNEL_CONFIG_PATH",
        "TRENDFUNNEL_MAX_SYMBOLS",
        "TRENDFUNNEL_EXCHANGE_TESTNET",
        "TRENDFUNNEL_MARKET_DATA_PROVIDER",
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_CHAT_ID",
        "BOT_NAME",
        "MAX_CYCLES",
    ]

    for key in keys_to_clear:
        if key in os.environ:
            original_env[key] = os.environ[key]
            os.environ.pop(key, None)

    yield

    # Restore
    for key, value in original_env.items():
        os.environ[key] = value


@pytest.fixture
def fast_fetch_config() -> FetchConfig:
    """Fetch settings with every pause and backoff set to zero."""
    return FetchConfig(
        stagger_seconds=0.0,
        request_delay_seconds=0.0,
        batch_delay_seconds=0.0,
        base_backoff_seconds=0.0,
    )


@pytest.fixture
def fast_config(fast_fetch_config: FetchConfig) -> BotConfig:
    """Bot config that never sleeps between requests."""
    return BotConfig(fetch=fast_fetch_config)
