# src/core/staleness.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, List, Optional

from src.config import settings
from src.core.api_resolver import fetch_network_details
from src.core.coin_models import Coin
from src.core.ticker import fetch_market_value
from src.core.transport import JsonTransport

logger = logging.getLogger(__name__)


def is_stale(
    updatetime: Optional[float],
    now: float,
    threshold_s: float = settings.STALE_AFTER_S,
) -> bool:
    """A reading is stale when it was never stamped or is older than the threshold."""
    if updatetime is None:
        return True
    return (now - updatetime) > threshold_s


def _unique(coins: Iterable[Coin]) -> List[Coin]:
    seen: set[int] = set()
    unique = []
    for coin in coins:
        if id(coin) not in seen:
            seen.add(id(coin))
            unique.append(coin)
    return unique


async def ensure_fresh(
    coins: Iterable[Coin],
    transport: JsonTransport,
    now: Optional[float] = None,
) -> None:
    """
    Refresh every stale network and ticker reading, then return.

    All refreshes run together and are awaited as one batch; a coin that
    fails only records its own error.
    """
    now = time.time() if now is None else now
    coins = _unique(coins)

    network_due = [c for c in coins if is_stale(c.network.updatetime, now)]
    ticker_due = [c for c in coins if is_stale(c.ticker.updatetime, now)]

    jobs = [(c, fetch_network_details(c, transport)) for c in network_due]
    jobs += [(c, fetch_market_value(c, transport)) for c in ticker_due]
    if not jobs:
        return

    logger.debug(
        "Refreshing %d network and %d ticker readings",
        len(network_due),
        len(ticker_due),
    )
    results = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)
    for (coin, _), result in zip(jobs, results):
        if isinstance(result, Exception):
            logger.error("Unexpected error refreshing coin %s: %s", coin.symbol, result)
