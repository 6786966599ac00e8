# src/core/profitability.py
from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

from src.config import settings
from src.core.coin_models import Coin
from src.core.staleness import ensure_fresh
from src.core.transport import JsonTransport


def _active_algo(active_coin: Optional[Coin]) -> Optional[str]:
    return active_coin.algo if active_coin is not None else None


def switch_handicap(
    coin: Coin, active_algo: Optional[str], algo_switch_multiplier: float
) -> float:
    """
    Factor applied to a coin's score for the cost of switching algorithm.

    Coins on the active algorithm (or any coin when nothing is being mined)
    keep their score; others have it divided by the multiplier, so with a
    multiplier of 2 an off-algorithm coin must earn twice as much to win.

    A multiplier between 0 and 1 therefore acts as a bonus for switching;
    only the dashboard input enforces a minimum of 1.
    """
    if algo_switch_multiplier < 0:
        raise ValueError("algo_switch_multiplier must not be negative")
    if not active_algo or not algo_switch_multiplier or coin.algo == active_algo:
        return 1.0
    return 1.0 / algo_switch_multiplier


def _weight(coin: Coin) -> float:
    return coin.hashrate or 1


def _score(coin: Coin, active_algo: Optional[str], multiplier: float) -> float:
    return coin.rewardperday * coin.marketvalue * switch_handicap(coin, active_algo, multiplier)


def healthy_coins(coins: Iterable[Coin]) -> List[Coin]:
    """Coins whose network and ticker readings both refreshed cleanly."""
    return [c for c in coins if not c.ticker.has_error and not c.network.has_error]


def pick_best(
    coins: Iterable[Coin],
    active_coin: Optional[Coin] = None,
    algo_switch_multiplier: float = settings.DEFAULT_ALGO_SWITCH_MULTIPLIER,
) -> Optional[Coin]:
    """
    Pick the most profitable healthy coin from already refreshed readings.

    Single left-to-right pass; a challenger must strictly beat the current
    best, so the earliest coin wins a tie. Returns None if no coin is healthy.
    """
    active_algo = _active_algo(active_coin)
    best: Optional[Coin] = None

    for coin in healthy_coins(coins):
        if best is None:
            best = coin
            continue
        challenger = _score(coin, active_algo, algo_switch_multiplier) * (
            _weight(coin) / _weight(best)
        )
        if challenger > _score(best, active_algo, algo_switch_multiplier):
            best = coin

    return best


async def select_best(
    coins: List[Coin],
    transport: JsonTransport,
    active_coin: Optional[Coin] = None,
    algo_switch_multiplier: float = settings.DEFAULT_ALGO_SWITCH_MULTIPLIER,
    now: Optional[float] = None,
) -> Optional[Coin]:
    """Refresh stale readings, then return the coin most worth mining (or None)."""
    await ensure_fresh(coins, transport, now=now)
    return pick_best(coins, active_coin, algo_switch_multiplier)


def coins_to_frame(
    coins: Iterable[Coin],
    active_coin: Optional[Coin] = None,
    algo_switch_multiplier: float = settings.DEFAULT_ALGO_SWITCH_MULTIPLIER,
    selected: Optional[Coin] = None,
) -> pd.DataFrame:
    """
    Tabulate coins for display.

    "Score" is the hashrate-weighted, handicapped daily value the selection
    compares; it is NaN for coins that selection skips.
    """
    active_algo = _active_algo(active_coin)
    rows = []
    for coin in coins:
        handicap = switch_handicap(coin, active_algo, algo_switch_multiplier)
        errored = coin.has_error
        rows.append(
            {
                "Symbol": coin.symbol,
                "Name": coin.name,
                "Algorithm": coin.algo,
                "API type": coin.network.api_type or "",
                "Hashrate": coin.hashrate,
                "Reward / day": coin.rewardperday,
                "Market value": coin.marketvalue,
                "Handicap": handicap,
                "Score": (
                    float("nan")
                    if errored
                    else _score(coin, active_algo, algo_switch_multiplier) * _weight(coin)
                ),
                "Status": _status(coin),
                "Selected": selected is not None and coin is selected,
            }
        )

    return pd.DataFrame(
        rows,
        columns=[
            "Symbol",
            "Name",
            "Algorithm",
            "API type",
            "Hashrate",
            "Reward / day",
            "Market value",
            "Handicap",
            "Score",
            "Status",
            "Selected",
        ],
    )


def _status(coin: Coin) -> str:
    if coin.network.has_error:
        return f"Network error: {coin.network.has_error}"
    if coin.ticker.has_error:
        return "Ticker error"
    return "OK"
