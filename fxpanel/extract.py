"""
fxpanel/extract.py – Extraction layer.

Fetches one daily snapshot per date from the currency-api CDN.

API calls we make:
  GET {API_BASE_URL}@2026-02-17/v1/currencies/eur.min.json
  GET {API_BASE_URL}@latest/v1/currencies.json

Example daily response:
  {
    "date": "2026-02-17",
    "eur": {"usd": 1.0412, "nok": 11.74, "sek": 11.23, ...}
  }

Example currency list response:
  {"eur": "Euro", "usd": "US Dollar", "zar": "South African Rand", ...}
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any

from config import API_BASE_URL, API_VERSION_PATH, HISTORY_DAYS
from fxpanel.client import JSONClient
from fxpanel.errors import MalformedJSONError

logger = logging.getLogger(__name__)


def history_dates(today: date, days: int = HISTORY_DAYS) -> list[str]:
    """
    ISO day strings for ``today`` and the ``days`` days before it, newest first.

    Example: history_dates(date(2026, 2, 17), 2)
             -> ["2026-02-17", "2026-02-16", "2026-02-15"]
    """
    return [(today - timedelta(days=offset)).isoformat() for offset in range(days + 1)]


def rate_url(day: str, base: str) -> str:
    return f"{API_BASE_URL}@{day}/{API_VERSION_PATH}/currencies/{base.lower()}.min.json"


def currencies_url() -> str:
    return f"{API_BASE_URL}@latest/{API_VERSION_PATH}/currencies.json"


async def fetch_history(client: JSONClient, base: str, dates: list[str]) -> list[Any]:
    """
    Fetch the daily snapshot for every date concurrently.

    Every request is issued before any is awaited. Results come back in the
    order of ``dates`` regardless of completion order; the first failure is
    raised and the remaining results are discarded.
    """
    logger.info("Fetching %d daily snapshots | base=%s | %s → %s", len(dates), base, dates[-1], dates[0])

    results = await asyncio.gather(*(client.fetch_json(rate_url(day, base)) for day in dates))

    logger.info("Extraction done | %d snapshots fetched", len(results))
    return list(results)


async def fetch_currencies(client: JSONClient) -> dict[str, str]:
    """Return ``{code: display name}`` for every currency the API knows, codes lowercased."""
    url = currencies_url()
    data = await client.fetch_json(url)
    if not isinstance(data, dict):
        raise MalformedJSONError(url, "expected an object of currency codes")
    return {str(code).lower(): str(name) for code, name in data.items()}
