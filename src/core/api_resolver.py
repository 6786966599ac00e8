# src/core/api_resolver.py
from __future__ import annotations

import logging
from typing import Dict, Optional

from src.config import settings
from src.core.coin_errors import DialectUnknownError
from src.core.coin_models import Coin
from src.core.network_adapters import NETWORK_ADAPTERS, NetworkAdapter, run_network_adapter
from src.core.transport import JsonTransport

logger = logging.getLogger(__name__)


async def _detect_dialect(
    coin: Coin, transport: JsonTransport, adapters: Dict[str, NetworkAdapter]
) -> str:
    # Probes share the coin's reading, so they run one at a time.
    for name in adapters:
        if await run_network_adapter(name, coin, transport, adapters):
            return name
    raise DialectUnknownError(f"No known API dialect for {coin.api}")


async def resolve_api_type(
    coin: Coin,
    transport: JsonTransport,
    adapters: Optional[Dict[str, NetworkAdapter]] = None,
) -> Optional[str]:
    """
    Return the coin's network API dialect, probing for it the first time.

    Resolved, unconfigured and failed coins answer from memory without any
    request. A successful probe leaves its reading on the coin.
    """
    network = coin.network
    if network.api_state.is_terminal:
        return network.api_type
    if network.is_detecting:
        # Another caller is already probing this coin.
        return network.api_type

    if not coin.api:
        network.mark_unconfigured()
        return network.api_type

    network.begin_detection()
    try:
        dialect = await _detect_dialect(coin, transport, adapters or NETWORK_ADAPTERS)
    except DialectUnknownError:
        network.mark_failed()
        logger.warning("Failed api detection for coin: %s", coin.symbol)
        return settings.API_TYPE_FAILED
    except Exception as err:  # pylint: disable=broad-except
        network.mark_failed()
        network.has_error = network.has_error or f"API detection error: {err}"
        logger.error("Failed api detection for coin: %s (%s)", coin.symbol, err)
        return settings.API_TYPE_FAILED

    network.mark_resolved(dialect)
    logger.info("Detected %s api for coin: %s", dialect, coin.symbol)
    return dialect


async def fetch_network_details(
    coin: Coin,
    transport: JsonTransport,
    adapters: Optional[Dict[str, NetworkAdapter]] = None,
) -> bool:
    """
    Refresh the coin's network reading through its dialect.

    A coin whose dialect is detected during this call already holds the
    winning probe's reading and is not fetched again. Coins without a usable
    API are left alone. Returns True when the reading was updated.
    """
    adapters = adapters or NETWORK_ADAPTERS
    already_known = coin.network.api_state.is_terminal
    api_type = await resolve_api_type(coin, transport, adapters)

    if api_type not in adapters:
        return False
    if not already_known:
        return True
    return await run_network_adapter(api_type, coin, transport, adapters)
