# src/ui/layout.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

import streamlit as st

from src.config import settings
from src.config.env import COINS_CONFIG_PATH
from src.core.coin_config import CoinConfigError, load_coins
from src.core.coin_models import Coin
from src.core.profitability import coins_to_frame, select_best
from src.core.transport import RequestsTransport
from src.ui.charts import render_score_chart

logger = logging.getLogger(__name__)

_COINS_KEY = "coins"
_NO_ACTIVE_COIN = "(none)"


# ---------------------------------------------------------
# Difficulty formatter (UI-only)
# ---------------------------------------------------------
def format_engineering(x: float | int | str | None) -> str:
    """Format large numbers into engineering notation (T, B, M)."""
    try:
        x = float(x)
    except (TypeError, ValueError):
        return "N/A"

    if x >= 1e12:
        return f"{x / 1e12:.3g} T"
    elif x >= 1e9:
        return f"{x / 1e9:.3g} B"
    elif x >= 1e6:
        return f"{x / 1e6:.3g} M"
    else:
        return f"{x:.3g}"


def _load_session_coins() -> Optional[List[Coin]]:
    """Coins live in session state so readings and detected APIs survive reruns."""
    if _COINS_KEY not in st.session_state:
        try:
            st.session_state[_COINS_KEY] = load_coins(COINS_CONFIG_PATH)
        except CoinConfigError as e:
            st.error(f"Could not load coin configuration. ({e})")
            return None
    return st.session_state[_COINS_KEY]


def _render_controls(coins: List[Coin]) -> tuple[Optional[Coin], float]:
    st.sidebar.markdown("### Mining state")
    by_symbol = {c.symbol: c for c in coins}
    active_symbol = st.sidebar.selectbox(
        "Currently mining",
        options=[_NO_ACTIVE_COIN, *by_symbol],
        help="Coins on another algorithm are penalised by the switch multiplier.",
    )
    multiplier = st.sidebar.number_input(
        "Algorithm switch multiplier",
        min_value=1.0,
        value=float(settings.DEFAULT_ALGO_SWITCH_MULTIPLIER),
        step=0.05,
        help="An off-algorithm coin must earn this many times more to win.",
    )
    if st.sidebar.button("Refresh now"):
        st.rerun()
    return by_symbol.get(active_symbol), float(multiplier)


def _render_selection(best: Optional[Coin]) -> None:
    if best is None:
        st.warning("No coin can be selected: every coin is reporting an error.")
        return

    cols = st.columns(4)
    with cols[0]:
        st.metric("Most profitable", f"{best.name} ({best.symbol})")
    with cols[1]:
        st.metric("Algorithm", best.algo)
    with cols[2]:
        st.metric(
            "Reward / day",
            f"{best.rewardperday:,.6f}",
            help=f"Coins per day at a reference hashrate of {settings.ASSUMED_HASHRATE}.",
        )
    with cols[3]:
        st.metric("Market value", f"{best.marketvalue:,.8f}")

    st.caption(
        f"Network difficulty {format_engineering(best.network.difficulty)}, "
        f"block height {best.network.blockheight or 'N/A'}"
    )


def render_dashboard() -> None:
    st.title(settings.DASHBOARD_TITLE)

    coins = _load_session_coins()
    if not coins:
        st.info(f"Add coins to {COINS_CONFIG_PATH} to get started.")
        return

    active_coin, multiplier = _render_controls(coins)

    with st.spinner("Refreshing stale coin data..."):
        best = asyncio.run(
            select_best(coins, RequestsTransport(), active_coin, multiplier)
        )
    if best is not None:
        logger.info("Selected coin: %s", best.symbol)

    _render_selection(best)

    df = coins_to_frame(coins, active_coin, multiplier, selected=best)
    st.dataframe(df, hide_index=True, width="stretch")
    render_score_chart(df)

    st.caption(
        f"As of {datetime.now(timezone.utc).strftime('%H:%M:%S')} UTC. "
        f"Readings older than {settings.STALE_AFTER_S}s are refetched."
    )
