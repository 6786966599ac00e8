# src/config/settings.py

from src.config.env import APP_ENV, ENV_DEV

# --- Freshness ---
# Readings older than this are refetched before a selection is made.
STALE_AFTER_S = 8

# --- Reward normalisation ---
# Reference hashrate used for rewardperday. The coin's own hashrate is only
# applied as a relative weight during comparison.
ASSUMED_HASHRATE = 1000
SECONDS_PER_DAY = 86400
DEFAULT_COIN_UNIT = 1_000_000_000

# --- Selection ---
# Penalty for switching to a coin on another algorithm (1 = no penalty).
DEFAULT_ALGO_SWITCH_MULTIPLIER = 1.0

# --- Network API dialects ---
API_STATS_ENDPOINT = "stats"
API_NETWORK_ENDPOINT = "network"

API_TYPE_DETECTING = "__detecting"
API_TYPE_NOT_SET = "__notset"
API_TYPE_FAILED = "__failed"

# Requests config
LIVE_DATA_REQUEST_TIMEOUT_S = 30 if APP_ENV == ENV_DEV else 10

# Optional: identify yourself nicely to public APIs
LIVE_DATA_USER_AGENT = "CoinSwitchDashboard/0.1"

# --- UI ---
DASHBOARD_TITLE = "Coin switch dashboard"
SELECTED_COIN_HEX = "#F7931A"
OTHER_COIN_HEX = "#cfd2d6"
ERROR_COIN_HEX = "#d62728"
