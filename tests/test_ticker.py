# tests/test_ticker.py

import asyncio
import logging

import pytest

from src.core.coin_models import TickerReading
from src.core.ticker import fetch_market_value
from tests.helpers import FakeTransport, make_coin

TICKER_URL = "https://ticker.test/api/AAA-BTC"


def test_unconfigured_ticker_is_skipped(transport):
    coin = make_coin(ticker=TickerReading(apibaseurl="https://ticker.test/api"))

    assert asyncio.run(fetch_market_value(coin, transport)) is False
    assert transport.calls == []
    assert coin.ticker.has_error is False


def test_market_value_is_read_from_jsonpath():
    coin = make_coin()
    transport = FakeTransport({TICKER_URL: {"last": "0.00001234", "volume": 10}})

    assert asyncio.run(fetch_market_value(coin, transport)) is True
    assert transport.calls == [TICKER_URL]
    assert coin.marketvalue == pytest.approx(0.00001234)
    assert coin.ticker.has_error is False
    assert coin.ticker.updatetime is not None


def test_ticker_failure_zeroes_market_value(caplog):
    coin = make_coin(marketvalue=3.0)

    with caplog.at_level(logging.WARNING):
        assert asyncio.run(fetch_market_value(coin, FakeTransport())) is False

    assert coin.marketvalue == 0
    assert coin.ticker.has_error is True
    assert coin.ticker.updatetime is None
    assert "Ticker API response failed for coin: AAA" in caplog.text


@pytest.mark.parametrize(
    "payload",
    [
        {"error": "unknown market"},
        {"bid": 1.0},
        {"last": "n/a"},
    ],
)
def test_bad_ticker_payloads_are_failures(payload):
    coin = make_coin(marketvalue=3.0)
    transport = FakeTransport({TICKER_URL: payload})

    assert asyncio.run(fetch_market_value(coin, transport)) is False
    assert coin.marketvalue == 0
    assert coin.ticker.has_error is True


def test_success_clears_previous_error():
    coin = make_coin()
    coin.ticker.has_error = True
    transport = FakeTransport({TICKER_URL: {"last": 2}})

    asyncio.run(fetch_market_value(coin, transport))

    assert coin.ticker.has_error is False
    assert coin.marketvalue == 2.0
