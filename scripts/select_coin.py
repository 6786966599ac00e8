# scripts/select_coin.py
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.config.env import COINS_CONFIG_PATH, LOG_LEVEL  # noqa: E402
from src.core.coin_config import load_coins  # noqa: E402
from src.core.profitability import coins_to_frame, select_best  # noqa: E402
from src.core.transport import RequestsTransport  # noqa: E402


def print_selection(config_path: str, active_symbol: str | None = None) -> None:
    """
    Refresh every configured coin once and print the comparison table plus
    the coin the dashboard would pick. Intended for checking a coins.json
    file without starting streamlit.
    """
    coins = load_coins(config_path)
    active_coin = next((c for c in coins if c.symbol == active_symbol), None)

    best = asyncio.run(select_best(coins, RequestsTransport(), active_coin))

    df = coins_to_frame(coins, active_coin, selected=best)
    print(df.to_string(index=False))
    print("-" * 80)
    if best is None:
        print("No coin selected: every coin is reporting an error.")
    else:
        print(f"Selected: {best.name} ({best.symbol}), algo {best.algo}")


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    print_selection(
        sys.argv[1] if len(sys.argv) > 1 else COINS_CONFIG_PATH,
        sys.argv[2] if len(sys.argv) > 2 else None,
    )
