"""
pipeline.py – Entry point for the FX panel rate refresh.

Usage
-----
# One refresh cycle for the configured pair
    uv run python pipeline.py

# Change the pair (saved to the settings file), then refresh
    uv run python pipeline.py --base EUR --target USD

# Keep refreshing every 30 minutes, like the panel indicator
    uv run python pipeline.py --watch

# List the currencies the API publishes
    uv run python pipeline.py --list-currencies

Flow
----
    Extract   →  fetch today + 10 prior daily snapshots concurrently
    Transform →  pick the pair's rate per day, build the oldest-first series
    Load      →  label, delta and chart are committed by indicator.py
"""

import argparse
import asyncio
import logging
import sys
import time
from datetime import date

from config import CHART_HEIGHT, CHART_WIDTH, HISTORY_DAYS
from fxpanel.client import JSONClient
from fxpanel.errors import ConfigError, FetchError, NetworkError, NotSupportedError
from fxpanel.extract import fetch_currencies, fetch_history, history_dates
from fxpanel.models import CurrencyPair, RefreshResult
from fxpanel.transform import build_series, extract_rate

logger = logging.getLogger("pipeline")


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

async def refresh(pair: CurrencyPair, client: JSONClient, today: date | None = None) -> RefreshResult:
    """
    Run one refresh cycle for ``pair``.

    Raises ConfigError without touching the network when either code is
    empty, NetworkError when any of the fetches fails, and NotSupportedError
    when today's snapshot does not publish the pair.
    """
    if not pair.is_complete:
        raise ConfigError(f"Currency pair is incomplete: base={pair.base!r} target={pair.target!r}")

    today = today or date.today()
    dates = history_dates(today, HISTORY_DAYS)

    t0 = time.perf_counter()
    logger.info("Refresh starting | %s | %s → %s", pair, dates[-1], dates[0])

    # --- Extract ---
    logger.info("[1/3] Fetching %d daily snapshots...", len(dates))
    try:
        snapshots = await fetch_history(client, pair.base, dates)
    except FetchError as exc:
        raise NetworkError(str(exc)) from exc

    # --- Transform ---
    logger.info("[2/3] Reading %s rates...", pair)
    current_rate = extract_rate(snapshots[0], pair.base, pair.target)
    if current_rate is None:
        raise NotSupportedError(f"{pair} is not published for {dates[0]}")
    previous_rate = extract_rate(snapshots[1], pair.base, pair.target) if len(snapshots) > 1 else None

    logger.info("[3/3] Building chart series...")
    series = build_series(dates, snapshots, pair.base, pair.target)

    logger.info("Refresh complete in %.2fs | %s = %.4f", time.perf_counter() - t0, pair, current_rate)
    return RefreshResult(pair, current_rate, previous_rate, series)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="FX panel – current rate, day-over-day change and a 10-day chart."
    )
    parser.add_argument("--base", help="Base currency code to save, e.g. EUR")
    parser.add_argument("--target", help="Target currency code to save, e.g. USD")
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep refreshing on the indicator's timer until interrupted",
    )
    parser.add_argument(
        "--list-currencies",
        action="store_true",
        help="Print the currency codes the API publishes and exit",
    )
    parser.add_argument("--width", type=int, default=CHART_WIDTH, help=f"Chart width (default: {CHART_WIDTH})")
    parser.add_argument("--height", type=int, default=CHART_HEIGHT, help=f"Chart height (default: {CHART_HEIGHT})")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> int:
    # Imported here: indicator.py imports refresh() from this module.
    from fxpanel.display import ConsoleDisplay
    from fxpanel.settings import Settings
    from indicator import Indicator

    currencies: dict[str, str] = {}
    with JSONClient() as client:
        if args.list_currencies or args.base or args.target:
            currencies = await fetch_currencies(client)

        if args.list_currencies:
            for code in sorted(currencies):
                print(f"{code.upper():<8} {currencies[code]}")
            return 0

        settings = Settings()
        for option, code in (("--base", args.base), ("--target", args.target)):
            if code and code.lower() not in currencies:
                logger.error("Unknown currency for %s: %s", option, code)
                return 2
        settings.set_config(base=args.base, target=args.target)

        display = ConsoleDisplay()
        indicator = Indicator(settings, client, display, width=args.width, height=args.height)
        try:
            if args.watch:
                await indicator.run()
            else:
                await indicator.update_exchange_rate()
        finally:
            indicator.close()

        if indicator.last_result is None:
            return 1
        print(indicator.last_result.series)
        return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s – %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    args = parse_args(argv)
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("Stopped.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
