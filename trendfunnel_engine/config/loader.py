"""Configuration loader with JSON file and environment variable support."""

import json
import os
from pathlib import Path
from typing import Any

from .models import BotConfig


def load_config(config_path: str | None = None) -> BotConfig:
    """
    Load configuration from JSON file with environment variable overrides.

    Priority: env vars > config file > defaults

    Args:
        config_path: Path to JSON config file. If None, uses TRENDFUNNEL_CONFIG_PATH
                     env var or defaults to 'config.json' in the repository root.

    Returns:
        Validated BotConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        json.JSONDecodeError: If config file has invalid JSON
        pydantic.ValidationError: If config values are invalid
    """
    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("TRENDFUNNEL_CONFIG_PATH", "config.json")

    config_file = Path(config_path)
    if not config_file.is_absolute():
        # Resolve relative to repository root
        repo_root = Path(__file__).parent.parent.parent
        config_file = repo_root / config_file

    # Load JSON config
    config_data: dict[str, Any] = {}
    if config_file.exists():
        with open(config_file) as f:
            config_data = json.load(f)
    else:
        raise FileNotFoundError(f"Config file not found: {config_file}")

    # Apply environment variable overrides
    if token := os.environ.get("TELEGRAM_BOT_TOKEN"):
        config_data.setdefault("telegram", {})["bot_token"] = token

    if chat_id := os.environ.get("TELEGRAM_CHAT_ID"):
        config_data.setdefault("telegram", {})["chat_id"] = chat_id

    if bot_name := os.environ.get("BOT_NAME"):
        config_data.setdefault("telegram", {})["bot_name"] = bot_name

    if max_symbols := os.environ.get("TRENDFUNNEL_MAX_SYMBOLS"):
        config_data.setdefault("exchange", {})["max_symbols"] = int(max_symbols)

    if testnet := os.environ.get("TRENDFUNNEL_EXCHANGE_TESTNET"):
        config_data.setdefault("exchange", {})["testnet"] = testnet.lower() == "true"

    # Validate and return
    return BotConfig(**config_data)
