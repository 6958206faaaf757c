"""
fxpanel/models.py – Data models shared across the panel.

A rate series is a Polars DataFrame with the schema below, oldest first:

    date  (String)   ISO day, e.g. "2026-02-17", strictly increasing
    rate  (Float64)  null when the API did not publish the pair that day
"""

from dataclasses import dataclass

import polars as pl

SERIES_SCHEMA = {"date": pl.String, "rate": pl.Float64}


@dataclass(frozen=True, slots=True)
class CurrencyPair:
    """Lowercased currency codes, ready for URL construction."""

    base: str
    target: str

    @classmethod
    def from_codes(cls, base: str | None, target: str | None) -> "CurrencyPair":
        return cls((base or "").strip().lower(), (target or "").strip().lower())

    @property
    def is_complete(self) -> bool:
        return bool(self.base) and bool(self.target)

    def __str__(self) -> str:
        return f"{self.base.upper()}/{self.target.upper()}"


@dataclass(frozen=True, slots=True)
class RateSample:
    date: str
    rate: float | None = None


def empty_series() -> pl.DataFrame:
    return pl.DataFrame(schema=SERIES_SCHEMA)


def series_from_samples(samples: list[RateSample]) -> pl.DataFrame:
    """Build a rate series from samples already in chronological order."""
    return pl.DataFrame(
        {
            "date": [s.date for s in samples],
            "rate": [s.rate for s in samples],
        },
        schema=SERIES_SCHEMA,
    )


@dataclass(frozen=True, slots=True, eq=False)
class RefreshResult:
    """Everything one successful refresh cycle produced."""

    pair: CurrencyPair
    current_rate: float
    previous_rate: float | None
    series: pl.DataFrame

    @property
    def delta(self) -> float | None:
        if self.previous_rate is None:
            return None
        return self.current_rate - self.previous_rate
