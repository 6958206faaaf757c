"""
Tests for indicator.py – triggers, stale-result protection and error states.
"""

import asyncio
from unittest.mock import Mock

import pytest

from conftest import TODAY, FakeClient
from fxpanel.chart import BACKGROUND, Clear
from fxpanel.display import LOADING_LABEL, Direction
from fxpanel.errors import HTTPStatusError
from fxpanel.settings import Settings
from indicator import Indicator


@pytest.fixture
def settings(tmp_path):
    settings = Settings(str(tmp_path / "settings.json"))
    settings.set_config(base="EUR", target="USD")
    return settings


@pytest.fixture
def display():
    return Mock()


def _indicator(settings, client, display, **kwargs):
    return Indicator(settings, client, display, clock=lambda: TODAY, **kwargs)


def test_starts_loading(settings, fake_client, display):
    assert _indicator(settings, fake_client, display).state.label == LOADING_LABEL


def test_successful_update(settings, fake_client, display):
    indicator = _indicator(settings, fake_client, display)
    state = asyncio.run(indicator.update_exchange_rate())

    assert state.label == "EUR/USD: 1.0500"
    assert state.delta.direction is Direction.UP
    assert state.delta.magnitude == "0.0010"
    assert len(state.chart) > 1
    display.show.assert_called_once_with(state)
    assert indicator.last_result.current_rate == pytest.approx(1.05)


def test_config_error_clears_chart_without_fetching(settings, fake_client, display):
    settings.set_config(base="")
    indicator = _indicator(settings, fake_client, display)
    state = asyncio.run(indicator.update_exchange_rate())

    assert state.label == "Config Error"
    assert state.delta is None
    assert state.chart == (Clear(500, 250, BACKGROUND),)
    assert fake_client.urls == []


def test_not_supported(settings, snapshots, display):
    settings.set_config(target="XYZ")
    state = asyncio.run(_indicator(settings, FakeClient(snapshots), display).update_exchange_rate())
    assert state.label == "Not supported yet"
    assert len(state.chart) == 1


def test_network_error_replaces_previous_chart(settings, snapshots, display):
    client = FakeClient(snapshots)
    indicator = _indicator(settings, client, display)
    asyncio.run(indicator.update_exchange_rate())

    client.errors = {"2026-02-10": HTTPStatusError("u", 503)}
    state = asyncio.run(indicator.update_exchange_rate())

    assert state.label == "Error"
    assert state.delta is None
    assert state.chart == (Clear(500, 250, BACKGROUND),)
    assert indicator.last_result is None


def test_custom_chart_size(settings, fake_client, display):
    indicator = _indicator(settings, fake_client, display, width=300, height=150)
    state = asyncio.run(indicator.update_exchange_rate())
    assert state.chart[0] == Clear(300, 150, BACKGROUND)


def test_stale_update_never_overwrites_newer(settings, snapshots, display):
    class HeldClient(FakeClient):
        """While ``holding``, answers with an old rate and only after ``release``."""

        holding = True

        async def fetch_json(self, url):
            held = self.holding
            result = await super().fetch_json(url)
            if held:
                await self.release.wait()
                return {"eur": {"usd": 9.0}}
            return result

    async def scenario():
        client = HeldClient(snapshots)
        client.release = asyncio.Event()
        indicator = _indicator(settings, client, display)

        slow = asyncio.ensure_future(indicator.update_exchange_rate())
        while len(client.urls) < 11:
            await asyncio.sleep(0)

        client.holding = False
        fast_state = await indicator.update_exchange_rate()
        client.release.set()
        slow_state = await slow
        return indicator, fast_state, slow_state

    indicator, fast_state, slow_state = asyncio.run(scenario())

    assert slow_state is None
    assert fast_state.label == "EUR/USD: 1.0500"
    assert indicator.state is fast_state
    assert indicator.generation == 2
    display.show.assert_called_once_with(fast_state)


def test_settings_change_triggers_refresh_while_running(settings, fake_client, display):
    async def scenario():
        indicator = _indicator(settings, fake_client, display, interval=60)
        task = asyncio.ensure_future(indicator.run())
        await asyncio.sleep(0.01)
        settings.set_config(target="NOK")
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        indicator.close()
        return indicator

    indicator = asyncio.run(scenario())
    assert indicator.state.label == "EUR/NOK: 11.7400"
    assert indicator.state.delta.direction is Direction.NEUTRAL


def test_settings_change_ignored_when_not_running(settings, fake_client, display):
    async def scenario():
        _indicator(settings, fake_client, display)
        settings.set_config(target="NOK")
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    display.show.assert_not_called()
    assert fake_client.urls == []


def test_manual_refresh(settings, fake_client, display):
    async def scenario():
        indicator = _indicator(settings, fake_client, display)
        task = indicator.request_refresh()
        return await task

    state = asyncio.run(scenario())
    assert state.label == "EUR/USD: 1.0500"


def test_request_refresh_without_loop_is_deferred(settings, fake_client, display):
    indicator = _indicator(settings, fake_client, display)
    assert indicator.request_refresh() is None
    assert fake_client.urls == []


def test_unexpected_refresh_failure_is_logged(settings, snapshots, display, caplog):
    client = FakeClient(snapshots, errors={"2026-02-17": RuntimeError("boom")})

    async def scenario():
        indicator = _indicator(settings, client, display)
        task = indicator.request_refresh()
        await asyncio.wait([task])
        await asyncio.sleep(0)
        return indicator, task

    with caplog.at_level("ERROR", logger="indicator"):
        indicator, task = asyncio.run(scenario())

    assert isinstance(task.exception(), RuntimeError)
    assert "Refresh failed unexpectedly" in caplog.text
    assert indicator.state.label == LOADING_LABEL
    display.show.assert_not_called()


def test_stopping_run_stops_listening_to_settings(settings, fake_client, display):
    async def scenario():
        indicator = _indicator(settings, fake_client, display, interval=60)
        task = asyncio.ensure_future(indicator.run())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        shown = display.show.call_count
        settings.set_config(target="NOK")
        await asyncio.sleep(0.05)
        return indicator, shown

    indicator, shown = asyncio.run(scenario())
    assert shown == 1
    assert display.show.call_count == shown
    assert indicator.state.label == "EUR/USD: 1.0500"


def test_run_refreshes_on_timer(settings, fake_client, display):
    async def scenario():
        indicator = _indicator(settings, fake_client, display, interval=0.01)
        task = asyncio.ensure_future(indicator.run())
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        indicator.close()

    asyncio.run(scenario())
    assert display.show.call_count >= 2
