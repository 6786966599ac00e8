# tests/helpers.py
from typing import Any, Dict, List

from src.core.coin_errors import TransportError
from src.core.coin_models import Coin, TickerReading


class FakeTransport:
    """Serves canned payloads by URL and records every request."""

    def __init__(self, responses: Dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: List[str] = []

    async def get_json(self, url: str) -> Any:
        self.calls.append(url)
        payload = self.responses.get(url)
        if payload is None:
            raise TransportError(f"URL failed to load: {url}")
        if isinstance(payload, Exception):
            raise payload
        return payload


def cryptonote_stats(height=1000, difficulty=86_400_000, reward=2_000_000_000, **extra):
    network = {
        "difficulty": difficulty,
        "height": height,
        "timestamp": 1_600_000_000,
        "reward": reward,
    }
    network.update(extra)
    return {
        "network": network,
        "config": {"coinUnits": 1_000_000_000, "coinDifficultyTarget": 120},
    }


def fairpool_payloads(height=2000, difficulty=86_400_000, reward=3_000_000_000):
    stats = {
        "network": {"difficulty": difficulty},
        "pool": {"stats": {"lastBlockFound": 1_600_000_000_000}},
        "config": {"coinUnits": 1_000_000_000, "coinDifficultyTarget": 240},
    }
    network = {"blockchainHeight": height, "reward": reward}
    return stats, network


def make_coin(symbol="AAA", algo="cn", api="https://pool.test/api", **kwargs) -> Coin:
    ticker = kwargs.pop(
        "ticker",
        TickerReading(
            apibaseurl="https://ticker.test/api",
            jsonpath="last",
            marketname=f"{symbol}-BTC",
        ),
    )
    return Coin(symbol=symbol, algo=algo, api=api, ticker=ticker, **kwargs)


