"""
fxpanel/display.py – Load layer: what the panel indicator shows.

A DisplayState bundles the label text, the optional day-over-day delta and the
rendered chart. The indicator swaps the whole state in one assignment, so the
label and the chart can never disagree (a fresh rate beside a stale chart, or
an error label beside old data).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from config import DELTA_THRESHOLD
from fxpanel.chart import DrawCommand
from fxpanel.models import CurrencyPair

logger = logging.getLogger(__name__)

LOADING_LABEL = "Loading..."


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"

    @property
    def icon_name(self) -> str:
        return _ICONS[self]

    @property
    def color(self) -> str:
        return _COLORS[self]


_ICONS = {
    Direction.UP: "go-up-symbolic",
    Direction.DOWN: "go-down-symbolic",
    Direction.NEUTRAL: "go-next-symbolic",
}

_COLORS = {
    Direction.UP: "#26A269",
    Direction.DOWN: "#E01B24",
    Direction.NEUTRAL: "#888",
}


@dataclass(frozen=True, slots=True)
class Delta:
    direction: Direction
    magnitude: str


@dataclass(frozen=True, slots=True)
class DisplayState:
    label: str
    delta: Delta | None = None
    chart: tuple[DrawCommand, ...] = field(default_factory=tuple)


def format_label(pair: CurrencyPair, rate: float) -> str:
    return f"{pair.base.upper()}/{pair.target.upper()}: {rate:.4f}"


def classify_delta(diff: float, threshold: float = DELTA_THRESHOLD) -> Delta:
    """Changes within ±threshold (inclusive) are neutral."""
    if diff > threshold:
        direction = Direction.UP
    elif diff < -threshold:
        direction = Direction.DOWN
    else:
        direction = Direction.NEUTRAL
    return Delta(direction, f"{abs(diff):.4f}")


class Display(Protocol):
    def show(self, state: DisplayState) -> None: ...


class ConsoleDisplay:
    """Logs each committed state; stands in for the panel widget on the command line."""

    def __init__(self) -> None:
        self.state = DisplayState(LOADING_LABEL)

    def show(self, state: DisplayState) -> None:
        self.state = state
        if state.delta is None:
            logger.info("%s | chart: %d draw commands", state.label, len(state.chart))
        else:
            logger.info(
                "%s | %s %s | chart: %d draw commands",
                state.label,
                state.delta.direction.value,
                state.delta.magnitude,
                len(state.chart),
            )
