"""
indicator.py – Panel indicator: decides when to refresh and what to show.

Three independent triggers drive the same refresh:
  - a periodic timer (run(), every REFRESH_INTERVAL_SECONDS)
  - a settings change (currency pair edited in the settings)
  - a manual refresh (request_refresh())

They may overlap. Each update takes a generation number when it starts and
only commits its DisplayState if no newer update has started in the
meantime, so a slow, older refresh can never overwrite newer data.

Label, delta and chart are committed together as one DisplayState; on any
refresh error the chart is reset to an empty canvas beside the error label.
"""

import asyncio
import logging
from datetime import date
from typing import Callable

from config import CHART_HEIGHT, CHART_WIDTH, REFRESH_INTERVAL_SECONDS
from fxpanel.chart import render
from fxpanel.client import JSONClient
from fxpanel.display import (
    LOADING_LABEL,
    Display,
    DisplayState,
    classify_delta,
    format_label,
)
from fxpanel.errors import RefreshError
from fxpanel.models import RefreshResult, empty_series
from fxpanel.settings import Settings
from pipeline import refresh

logger = logging.getLogger(__name__)


class Indicator:
    def __init__(
        self,
        settings: Settings,
        client: JSONClient,
        display: Display,
        *,
        width: int = CHART_WIDTH,
        height: int = CHART_HEIGHT,
        interval: float = REFRESH_INTERVAL_SECONDS,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._settings = settings
        self._client = client
        self._display = display
        self._width = width
        self._height = height
        self._interval = interval
        self._clock = clock

        self.state = DisplayState(LOADING_LABEL)
        self.last_result: RefreshResult | None = None

        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._settings_handler: int | None = None

    @property
    def generation(self) -> int:
        return self._generation

    async def update_exchange_rate(self) -> DisplayState | None:
        """
        Refresh and commit the result.

        Returns the committed state, or None when a newer update started
        while this one was waiting on the network.
        """
        self._generation += 1
        generation = self._generation
        pair = self._settings.get_config()

        result: RefreshResult | None
        try:
            result = await refresh(pair, self._client, self._clock())
        except RefreshError as exc:
            logger.error("Failed to update rate: %s", exc)
            result = None
            state = DisplayState(exc.label, None, self._render_chart(None))
        else:
            delta = result.delta
            state = DisplayState(
                format_label(pair, result.current_rate),
                classify_delta(delta) if delta is not None else None,
                self._render_chart(result),
            )

        if generation != self._generation:
            logger.debug("Discarding update #%d, superseded by #%d", generation, self._generation)
            return None

        self.state = state
        self.last_result = result
        self._display.show(state)
        return state

    def request_refresh(self) -> asyncio.Task | None:
        """Schedule an update on the running event loop (manual or settings trigger)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; refresh left to the next timer tick")
            return None
        task = loop.create_task(self.update_exchange_rate())
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def run(self) -> None:
        """
        Refresh now and then every ``interval`` seconds until cancelled.

        Settings changes trigger a refresh only while this is running.
        """
        logger.info("Indicator running | refresh every %ss", self._interval)
        self._settings_handler = self._settings.on_config_change(self._on_settings_changed)
        try:
            while True:
                self.request_refresh()
                await asyncio.sleep(self._interval)
        finally:
            self._disconnect_settings()

    def close(self) -> None:
        self._disconnect_settings()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _disconnect_settings(self) -> None:
        if self._settings_handler is not None:
            self._settings.disconnect(self._settings_handler)
            self._settings_handler = None

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Refresh failed unexpectedly", exc_info=exc)

    def _on_settings_changed(self, key: str) -> None:
        logger.info("Settings changed (%s), refreshing", key)
        self.request_refresh()

    def _render_chart(self, result: RefreshResult | None) -> tuple:
        series = result.series if result is not None else empty_series()
        return tuple(render(series, self._width, self._height))
