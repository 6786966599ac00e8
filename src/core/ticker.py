# src/core/ticker.py
from __future__ import annotations

import logging
import math
import time

from src.core.coin_errors import CoinDataError, MalformedResponseError
from src.core.coin_models import Coin
from src.core.transport import JsonTransport, join_url

logger = logging.getLogger(__name__)


def _extract_price(data, jsonpath: str) -> float:
    if not isinstance(data, dict):
        raise MalformedResponseError("Unexpected ticker payload")
    if data.get("error"):
        raise MalformedResponseError("API response error")
    if jsonpath not in data:
        raise MalformedResponseError(f"Ticker response has no '{jsonpath}'")
    try:
        price = float(data[jsonpath])
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(
            f"Ticker value '{jsonpath}' is not numeric: {data[jsonpath]!r}"
        ) from exc
    if not math.isfinite(price):
        raise MalformedResponseError(f"Ticker value '{jsonpath}' is not finite")
    return price


async def fetch_market_value(coin: Coin, transport: JsonTransport) -> bool:
    """
    Refresh `coin.marketvalue` from the coin's ticker.

    Coins without a ticker are skipped. A failed fetch zeroes the market
    value so the coin cannot win on an outdated price.
    Returns True when a new price was stored.
    """
    ticker = coin.ticker
    if not ticker.is_configured:
        return False

    ticker.has_error = False
    try:
        data = await transport.get_json(join_url(ticker.apibaseurl, ticker.marketname))
        price = _extract_price(data, ticker.jsonpath)
    except CoinDataError as exc:
        ticker.has_error = True
        coin.marketvalue = 0
        logger.warning("Ticker API response failed for coin: %s (%s)", coin.symbol, exc)
        return False

    ticker.updatetime = time.time()
    coin.marketvalue = price
    return True
