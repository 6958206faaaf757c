"""
fxpanel/transform.py – Transformation layer.

Turns the raw daily snapshots from the extractor into a chartable rate series.

Snapshots arrive newest first, one per date:
    [{"eur": {"usd": 1.04, ...}}, {"eur": {"usd": 1.03, ...}}, ...]

The series is the same dates reversed to oldest first and cut to
CHART_POINTS rows. With the default window that drops the newest row, so
today's rate is shown in the label but never charted.

A date whose snapshot lacks the pair keeps its row with a null rate; the
chart skips it, but the slot stays in the series.
"""

import logging
from numbers import Real
from typing import Any

import polars as pl

from config import CHART_POINTS
from fxpanel.models import SERIES_SCHEMA

logger = logging.getLogger(__name__)


def extract_rate(snapshot: Any, base: str, target: str) -> float | None:
    """Return ``snapshot[base][target]`` as a float, or None when it is not published."""
    if not isinstance(snapshot, dict):
        return None
    rates = snapshot.get(base)
    if not isinstance(rates, dict):
        return None
    value = rates.get(target)
    # bool is a Real too, but never a rate
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return float(value)


def build_series(
    dates: list[str],
    snapshots: list[Any],
    base: str,
    target: str,
    points: int = CHART_POINTS,
) -> pl.DataFrame:
    """
    Build the charted rate series.

    Parameters
    ----------
    dates     : list[str] – ISO days, newest first (see extract.history_dates)
    snapshots : list      – one decoded snapshot per date, same order
    base      : str       – lowercase base code
    target    : str       – lowercase target code
    points    : int       – number of rows kept after reversing

    Returns
    -------
    pl.DataFrame with columns:
        date  (String)   oldest first
        rate  (Float64)  null where the pair was not published
    """
    if len(dates) != len(snapshots):
        raise ValueError(f"{len(dates)} dates but {len(snapshots)} snapshots")

    df = (
        pl.DataFrame(
            {
                "date": dates,
                "rate": [extract_rate(s, base, target) for s in snapshots],
            },
            schema=SERIES_SCHEMA,
        )
        .reverse()
        .head(points)
    )

    missing = df["rate"].null_count()
    if missing:
        logger.warning("%d of %d days have no %s→%s rate", missing, len(df), base, target)

    logger.info("Transformation done | %d points | %s → %s", len(df), *_bounds(df))
    return df


def _bounds(df: pl.DataFrame) -> tuple[str | None, str | None]:
    if df.is_empty():
        return None, None
    return df["date"][0], df["date"][-1]
