# src/core/coin_errors.py
from __future__ import annotations


class CoinDataError(RuntimeError):
    """Base class for failures while refreshing a coin's readings."""


class TransportError(CoinDataError):
    """Raised when an endpoint is unreachable or answers with a non-2xx status."""


class MalformedResponseError(CoinDataError):
    """Raised when a payload carries an error field or lacks a required value."""


class DialectUnknownError(CoinDataError):
    """Raised when no known network API dialect accepts a coin's endpoint."""
