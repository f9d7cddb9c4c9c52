import logging
import os
from unittest.mock import MagicMock, patch

import pytest
from pytest import LogCaptureFixture

from trendfunnel_engine.config.models import BotConfig, ExchangeConfig
from trendfunnel_engine.main import build_market_data_provider, cli, main
from trendfunnel_engine.market_data.bybit_provider import BybitMarketDataProvider
from trendfunnel_engine.market_data.stub_provider import StubMarketDataProvider


def test_main_runs_stub_cycles(fast_config: BotConfig, caplog: LogCaptureFixture) -> None:
    env = {"TRENDFUNNEL_MARKET_DATA_PROVIDER": "stub", "MAX_CYCLES": "1"}
    with patch("trendfunnel_engine.main.load_config", return_value=fast_config):
        with patch.dict(os.environ, env):
            with caplog.at_level(logging.INFO):
                result = main()

    assert result == 0
    assert "Trend funnel bot starting" in caplog.text
    assert "Market data: Stub" in caplog.text
    assert "Cycle 1/1" in caplog.text
    assert "Bot stopped" in caplog.text


def test_main_config_load_error(caplog: LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    with patch("trendfunnel_engine.main.load_config", side_effect=Exception("Config broken")):
        result = main()

    assert result == 1
    assert "Failed to load configuration: Config broken" in caplog.text


def test_main_invalid_max_cycles(fast_config: BotConfig, caplog: LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    with patch("trendfunnel_engine.main.load_config", return_value=fast_config):
        with patch.dict(os.environ, {"MAX_CYCLES": "abc"}):
            with patch("trendfunnel_engine.main.asyncio.run") as run:
                result = main()

    assert result == 1
    assert "Invalid MAX_CYCLES: 'abc'" in caplog.text
    run.assert_not_called()


def test_main_bot_error(fast_config: BotConfig, caplog: LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    with patch("trendfunnel_engine.main.load_config", return_value=fast_config):
        with patch(
            "trendfunnel_engine.main.build_market_data_provider",
            side_effect=RuntimeError("exchange unreachable"),
        ):
            result = main()

    assert result == 1
    assert "Bot error: exchange unreachable" in caplog.text


def test_main_keyboard_interrupt(fast_config: BotConfig, caplog: LogCaptureFixture) -> None:
    with patch("trendfunnel_engine.main.load_config", return_value=fast_config):
        with patch("trendfunnel_engine.main.asyncio.run", side_effect=KeyboardInterrupt):
            with caplog.at_level(logging.INFO):
                result = main()

    assert result == 0
    assert "Shutdown requested by user" in caplog.text


def test_cli_exits_with_main_status() -> None:
    with patch("trendfunnel_engine.main.main", return_value=1):
        with pytest.raises(SystemExit) as exc_info:
            cli()
    assert exc_info.value.code == 1


def test_build_stub_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRENDFUNNEL_MARKET_DATA_PROVIDER", "stub")
    assert isinstance(build_market_data_provider(BotConfig()), StubMarketDataProvider)


def test_build_bybit_provider_by_default() -> None:
    config = BotConfig(exchange=ExchangeConfig(testnet=True))
    exchange = MagicMock()
    with patch(
        "trendfunnel_engine.main.create_exchange", return_value=exchange
    ) as create_exchange:
        provider = build_market_data_provider(config)

    assert isinstance(provider, BybitMarketDataProvider)
    assert provider.exchange is exchange
    create_exchange.assert_called_once_with(config.exchange, config.fetch)
