# src/core/network_adapters.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from src.config import settings
from src.core.coin_errors import CoinDataError, MalformedResponseError
from src.core.coin_models import Coin
from src.core.transport import JsonTransport, join_url

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NetworkSnapshot:
    """One parsed network/pool reading, committed to a coin only when complete."""

    difficulty: float
    blockheight: int
    reward: float
    coinunit: float
    lastblockdatetime: Optional[float] = None
    coindifficultytarget: Optional[int] = None


NetworkAdapter = Callable[[Coin, JsonTransport], Awaitable[NetworkSnapshot]]


# ---------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------


async def _get_payload(transport: JsonTransport, url: str) -> Dict[str, Any]:
    data = await transport.get_json(url)
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Unexpected payload from {url}")
    if data.get("error"):
        raise MalformedResponseError("API response error")
    return data


def _section(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """Walk nested objects, failing if any level is missing."""
    node: Any = data
    for key in keys:
        if not isinstance(node, dict) or not isinstance(node.get(key), dict):
            raise MalformedResponseError(f"Missing '{'.'.join(keys)}' section")
        node = node[key]
    return node


def _config(data: Dict[str, Any]) -> Dict[str, Any]:
    config = data.get("config")
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise MalformedResponseError("Unexpected 'config' section")
    return config


def _required(value: Any, label: str) -> Any:
    if not value:
        raise MalformedResponseError(f"Wrong api type: no {label}")
    return value


def _number(value: Any, label: str) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Invalid {label}: {value!r}") from exc


# ---------------------------------------------------------
# Dialects
# ---------------------------------------------------------


async def parse_generic_cryptonote(coin: Coin, transport: JsonTransport) -> NetworkSnapshot:
    """
    Classic cryptonote pool API: everything lives under `/stats`.

    Block reward is reported in atomic units, with dev fee and coinbase fee
    components that never reach the miner.
    """
    data = await _get_payload(transport, join_url(coin.api, settings.API_STATS_ENDPOINT))
    network = _section(data, "network")
    config = _config(data)

    blockheight = _required(network.get("height"), "block height")
    difficulty = _number(_required(network.get("difficulty"), "difficulty"), "difficulty")
    coinunit = _number(config.get("coinUnits"), "coinUnits") or coin.coinunit
    gross = _number(_required(network.get("reward"), "block reward"), "block reward")
    fees = _number(network.get("devfee"), "devfee") + _number(
        network.get("coinbase"), "coinbase"
    )

    return NetworkSnapshot(
        difficulty=difficulty,
        blockheight=blockheight,
        reward=(gross - fees) / coinunit,
        coinunit=coinunit,
        lastblockdatetime=network.get("timestamp"),
        coindifficultytarget=config.get("coinDifficultyTarget"),
    )


async def parse_fairpool(coin: Coin, transport: JsonTransport) -> NetworkSnapshot:
    """
    Fairpool API: pool stats under `/stats`, chain height and reward under
    `/network`. The last block time is the pool's last found block.
    """
    stats = await _get_payload(transport, join_url(coin.api, settings.API_STATS_ENDPOINT))
    difficulty = _number(
        _required(_section(stats, "network").get("difficulty"), "difficulty"),
        "difficulty",
    )
    last_found = _section(stats, "pool", "stats").get("lastBlockFound")
    config = _config(stats)
    coinunit = _number(config.get("coinUnits"), "coinUnits") or coin.coinunit

    network = await _get_payload(
        transport, join_url(coin.api, settings.API_NETWORK_ENDPOINT)
    )
    blockheight = _required(network.get("blockchainHeight"), "block height")
    gross = _number(_required(network.get("reward"), "block reward"), "block reward")

    return NetworkSnapshot(
        difficulty=difficulty,
        blockheight=blockheight,
        reward=gross / coinunit,
        coinunit=coinunit,
        lastblockdatetime=_number(last_found, "lastBlockFound") / 1000 if last_found else None,
        coindifficultytarget=config.get("coinDifficultyTarget"),
    )


# Detection probes these in order; the first accepted dialect wins.
NETWORK_ADAPTERS: Dict[str, NetworkAdapter] = {
    "genericCryptonote": parse_generic_cryptonote,
    "fairpool": parse_fairpool,
}


# ---------------------------------------------------------
# Running an adapter against a coin
# ---------------------------------------------------------


def reward_per_day(difficulty: float, reward: float) -> float:
    """Daily reward for the reference hashrate at the given difficulty."""
    return (settings.ASSUMED_HASHRATE * settings.SECONDS_PER_DAY / difficulty) * reward


def _commit(coin: Coin, snapshot: NetworkSnapshot) -> None:
    network = coin.network
    network.difficulty = snapshot.difficulty
    network.blockheight = snapshot.blockheight
    network.lastblockdatetime = snapshot.lastblockdatetime
    network.coindifficultytarget = snapshot.coindifficultytarget
    network.reward = snapshot.reward
    coin.coinunit = snapshot.coinunit
    coin.rewardperday = reward_per_day(snapshot.difficulty, snapshot.reward)


async def run_network_adapter(
    name: str,
    coin: Coin,
    transport: JsonTransport,
    adapters: Optional[Dict[str, NetworkAdapter]] = None,
) -> bool:
    """
    Refresh `coin.network` with the named dialect.

    On failure the error is recorded in `coin.network.has_error` and the
    previous reward figures are kept. `updatetime` is stamped either way.
    Returns True when the reading was updated.
    """
    adapter = (adapters or NETWORK_ADAPTERS)[name]
    coin.network.has_error = ""
    try:
        try:
            snapshot = await adapter(coin, transport)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedResponseError(f"Unexpected payload: {exc}") from exc
        _commit(coin, snapshot)
    except CoinDataError as exc:
        if not coin.network.is_detecting:
            logger.warning("Network API response error for coin: %s (%s)", coin.symbol, exc)
        coin.network.has_error = str(exc) or type(exc).__name__
        return False
    finally:
        coin.network.updatetime = time.time()
    return True
