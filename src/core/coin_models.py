# src/core/coin_models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from src.config import settings

# ---------------------------------------------------------
# Network API dialect state
# ---------------------------------------------------------


class ApiStatus(Enum):
    UNRESOLVED = "unresolved"
    DETECTING = "detecting"
    RESOLVED = "resolved"
    UNCONFIGURED = "unconfigured"
    FAILED = "failed"


_TERMINAL_STATUSES = {ApiStatus.RESOLVED, ApiStatus.UNCONFIGURED, ApiStatus.FAILED}


@dataclass(frozen=True, slots=True)
class ApiState:
    """
    Where a coin's network API dialect detection stands.

    Only `dialect` of a RESOLVED state carries a value. Once terminal, the
    state never changes again for the lifetime of the coin.
    """

    status: ApiStatus = ApiStatus.UNRESOLVED
    dialect: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL_STATUSES

    @property
    def api_type(self) -> Optional[str]:
        if self.status is ApiStatus.RESOLVED:
            return self.dialect
        if self.status is ApiStatus.DETECTING:
            return settings.API_TYPE_DETECTING
        if self.status is ApiStatus.UNCONFIGURED:
            return settings.API_TYPE_NOT_SET
        if self.status is ApiStatus.FAILED:
            return settings.API_TYPE_FAILED
        return None


# ---------------------------------------------------------
# Readings
# ---------------------------------------------------------


@dataclass(slots=True)
class NetworkReading:
    difficulty: Optional[float] = None
    blockheight: Optional[int] = None
    lastblockdatetime: Optional[float] = None
    coindifficultytarget: Optional[int] = None
    reward: Optional[float] = None
    api_state: ApiState = field(default_factory=ApiState)
    has_error: str | bool = ""
    updatetime: Optional[float] = None

    @property
    def api_type(self) -> Optional[str]:
        return self.api_state.api_type

    @property
    def is_detecting(self) -> bool:
        return self.api_state.status is ApiStatus.DETECTING

    def _move_to(self, state: ApiState, allowed_from: ApiStatus) -> None:
        if self.api_state.status is not allowed_from:
            raise ValueError(
                f"Cannot move api state from {self.api_state.status.value} "
                f"to {state.status.value}"
            )
        self.api_state = state

    def begin_detection(self) -> None:
        self._move_to(ApiState(ApiStatus.DETECTING), ApiStatus.UNRESOLVED)

    def mark_unconfigured(self) -> None:
        self._move_to(ApiState(ApiStatus.UNCONFIGURED), ApiStatus.UNRESOLVED)

    def mark_resolved(self, dialect: str) -> None:
        self._move_to(ApiState(ApiStatus.RESOLVED, dialect), ApiStatus.DETECTING)

    def mark_failed(self) -> None:
        self._move_to(ApiState(ApiStatus.FAILED), ApiStatus.DETECTING)


@dataclass(slots=True)
class TickerReading:
    apibaseurl: Optional[str] = None
    jsonpath: Optional[str] = None
    marketname: Optional[str] = None
    has_error: bool = False
    updatetime: Optional[float] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.apibaseurl and self.marketname)


# ---------------------------------------------------------
# Coin
# ---------------------------------------------------------


@dataclass
class Coin:
    """
    A mineable currency and the last known state of its network and market.

    `hashrate` is this miner's own rate on the coin and only weighs coins
    against each other; `rewardperday` is normalised to a reference hashrate.
    """

    symbol: str
    algo: str
    login: str = ""
    name: str = ""
    url: Optional[str] = None
    api: Optional[str] = None
    hashrate: float = 0
    coinunit: float = settings.DEFAULT_COIN_UNIT
    marketvalue: float = 0
    rewardperday: float = 0
    network: NetworkReading = field(default_factory=NetworkReading)
    ticker: TickerReading = field(default_factory=TickerReading)

    def __post_init__(self) -> None:
        self.name = self.name or self.symbol

    @property
    def has_error(self) -> bool:
        return bool(self.ticker.has_error or self.network.has_error)
