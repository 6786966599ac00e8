# src/core/coin_config.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from src.core.coin_models import Coin, TickerReading


class CoinConfigError(ValueError):
    """Raised when a coin definition cannot be turned into a Coin."""


def _build_ticker(raw: Any, symbol: str) -> TickerReading:
    if not raw:
        return TickerReading()
    if not isinstance(raw, Mapping):
        raise CoinConfigError(f"Ticker for {symbol} must be an object")
    return TickerReading(
        apibaseurl=raw.get("apibaseurl"),
        jsonpath=raw.get("jsonpath"),
        marketname=raw.get("marketname"),
    )


def build_coin(raw: Mapping[str, Any]) -> Coin:
    """
    Build a Coin from its configuration mapping:
    {symbol, name?, algo, login, url?, api?, ticker?, hashrate?}
    """
    if not isinstance(raw, Mapping):
        raise CoinConfigError(f"Coin definition must be an object, got {raw!r}")
    symbol = raw.get("symbol")
    algo = raw.get("algo")
    if not symbol:
        raise CoinConfigError(f"Coin definition has no symbol: {dict(raw)}")
    if not algo:
        raise CoinConfigError(f"Coin {symbol} has no algo")

    try:
        hashrate = float(raw.get("hashrate") or 0)
    except (TypeError, ValueError) as exc:
        raise CoinConfigError(f"Invalid hashrate for {symbol}: {raw.get('hashrate')!r}") from exc

    return Coin(
        symbol=symbol,
        name=raw.get("name") or symbol,
        algo=algo,
        login=raw.get("login", ""),
        url=raw.get("url"),
        api=raw.get("api"),
        hashrate=hashrate,
        ticker=_build_ticker(raw.get("ticker"), symbol),
    )


def build_coins(raw_coins: Iterable[Mapping[str, Any]]) -> List[Coin]:
    coins = [build_coin(raw) for raw in raw_coins]
    symbols = [c.symbol for c in coins]
    duplicates = sorted({s for s in symbols if symbols.count(s) > 1})
    if duplicates:
        raise CoinConfigError(f"Duplicate coin symbols: {', '.join(duplicates)}")
    return coins


def load_coins(path: str | Path) -> List[Coin]:
    """Load coin definitions from a JSON file holding a list of objects."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CoinConfigError(f"Cannot read coin config {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise CoinConfigError(f"Coin config {path} must hold a list of coins")
    return build_coins(raw)
