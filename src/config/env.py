# src/config/env.py
import os

# Environment constants to avoid typos in comparisons
ENV_DEV = "dev"
ENV_PROD = "prod"

# Simple env flag: "dev" for local testing defaults, defaulting to "prod"
APP_ENV = os.getenv("APP_ENV", ENV_PROD).lower()

# JSON list of coin definitions loaded at startup
COINS_CONFIG_PATH = os.getenv("COINS_CONFIG_PATH", "coins.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if APP_ENV == ENV_DEV else "INFO").upper()
