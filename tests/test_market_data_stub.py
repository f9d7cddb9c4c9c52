"""Unit tests for StubMarketDataProvider."""

from datetime import datetime, timezone

from trendfunnel_engine.indicators.engine import build_asset_snapshot
from trendfunnel_engine.market_data.stub_provider import StubMarketDataProvider
from trendfunnel_engine.models.snapshot import Timeframe


def test_stub_provider_default_init() -> None:
    """Test stub provider initializes with defaults."""
    provider = StubMarketDataProvider()
    assert provider.list_symbols() == ["BTCUSDT", "ETHUSDT"]
    assert provider.base_price == 100.0
    assert provider.volume == 1000.0


def test_list_symbols_returns_copy() -> None:
    provider = StubMarketDataProvider(symbols=["AUSDT"])
    provider.list_symbols().append("BUSDT")
    assert provider.list_symbols() == ["AUSDT"]


def test_get_candles_returns_correct_count() -> None:
    provider = StubMarketDataProvider()
    assert len(provider.get_candles("BTCUSDT", Timeframe.M15, 150)) == 150


def test_get_candles_data_structure() -> None:
    provider = StubMarketDataProvider()
    candles = provider.get_candles("BTCUSDT", Timeframe.M3, 5)

    for candle in candles:
        assert isinstance(candle.timestamp, datetime)
        assert candle.timestamp.tzinfo == timezone.utc
        assert candle.is_valid
        assert candle.low < candle.close < candle.high
        assert candle.volume == 1000.0

    timestamps = [c.timestamp for c in candles]
    assert timestamps == sorted(timestamps)


def test_last_price_matches_newest_close() -> None:
    provider = StubMarketDataProvider()
    candles = provider.get_candles("BTCUSDT", Timeframe.M3, 200)
    assert provider.get_last_price("BTCUSDT") == f"{candles[-1].close:.6f}"


def test_prices_trend_with_drift() -> None:
    rising = StubMarketDataProvider().get_candles("BTCUSDT", Timeframe.M60, 10)
    falling = StubMarketDataProvider(drift_pct=-0.05).get_candles("BTCUSDT", Timeframe.M60, 10)

    assert rising[-1].close > rising[0].close
    assert falling[-1].close < falling[0].close


def test_unknown_symbol_has_no_data() -> None:
    provider = StubMarketDataProvider()
    assert provider.get_last_price("NOPEUSDT") == "0"
    assert provider.get_candles("NOPEUSDT", Timeframe.M3, 200) == []


def test_stub_data_builds_full_snapshot() -> None:
    provider = StubMarketDataProvider()
    candles = {tf: provider.get_candles("BTCUSDT", tf, 200) for tf in Timeframe}

    asset = build_asset_snapshot("BTCUSDT", provider.get_last_price("BTCUSDT"), candles)

    assert asset is not None
    assert all(asset.timeframe(tf).is_available for tf in Timeframe)
