"""
config.py – Central configuration for the FX panel.
All tuneable parameters live here so nothing is hard-coded elsewhere.
"""

import os

# ---------------------------------------------------------------------------
# FX Data Source – fawazahmed0 currency-api, served from the jsDelivr CDN.
# Free, no API key, one JSON file per base currency per day:
#   {API_BASE_URL}@{YYYY-MM-DD}/v1/currencies/{base}.min.json
#   {API_BASE_URL}@latest/v1/currencies.json
# ---------------------------------------------------------------------------
API_BASE_URL: str = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api"
API_VERSION_PATH: str = "v1"
API_TIMEOUT_SECONDS: int = 30

# ---------------------------------------------------------------------------
# History window: today + HISTORY_DAYS prior days are fetched,
# CHART_POINTS of them (oldest first, today excluded) are charted.
# ---------------------------------------------------------------------------
HISTORY_DAYS: int = 10
CHART_POINTS: int = 10

# ---------------------------------------------------------------------------
# Indicator
# ---------------------------------------------------------------------------
REFRESH_INTERVAL_SECONDS: int = 30 * 60

CHART_WIDTH: int = 500
CHART_HEIGHT: int = 250

# Day-over-day changes smaller than this are shown as "no change".
DELTA_THRESHOLD: float = 0.00001

# ---------------------------------------------------------------------------
# Settings – a small JSON key-value file in the user's config directory.
# ---------------------------------------------------------------------------
BASE_CURRENCY_KEY: str = "base-currency"
TARGET_CURRENCY_KEY: str = "target-currency"

DEFAULT_BASE_CURRENCY: str = "ZAR"
DEFAULT_TARGET_CURRENCY: str = "INR"

SETTINGS_PATH: str = os.path.join(
    os.path.expanduser("~"), ".config", "fx-panel", "settings.json"
)
