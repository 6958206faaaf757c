"""
Shared pytest fixtures for the FX panel test suite.
"""

from datetime import date

import pytest

from fxpanel.extract import history_dates
from fxpanel.models import CurrencyPair

TODAY = date(2026, 2, 17)


class FakeClient:
    """
    Stands in for JSONClient. Serves one snapshot per date found in the URL
    and records every URL requested, so tests never touch the network.
    """

    def __init__(self, snapshots: dict[str, object], errors: dict[str, Exception] | None = None):
        self.snapshots = snapshots
        self.errors = errors or {}
        self.urls: list[str] = []

    async def fetch_json(self, url: str):
        self.urls.append(url)
        # the date follows the last "@" (currency-api@{date}); "npm/@fawazahmed0" comes first
        day = url.rsplit("@", 1)[1].split("/", 1)[0]
        if day in self.errors:
            raise self.errors[day]
        return self.snapshots[day]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def pair():
    return CurrencyPair.from_codes("EUR", "USD")


@pytest.fixture
def dates():
    # newest first: 2026-02-17 ... 2026-02-07
    return history_dates(TODAY)


@pytest.fixture
def snapshots(dates):
    # EUR→USD climbs by 0.001 per day, ending at 1.0500 today.
    return {
        day: {"date": day, "eur": {"usd": round(1.05 - 0.001 * i, 4), "nok": 11.74}}
        for i, day in enumerate(dates)
    }


@pytest.fixture
def fake_client(snapshots):
    return FakeClient(snapshots)
