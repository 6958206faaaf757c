"""
fxpanel/settings.py – Settings collaborator.

A small JSON key-value store holding the two currency codes. Codes are stored
uppercased, as the preferences pane writes them, and handed to the pipeline
lowercased through get_config().

Listeners registered with on_config_change() are called after a value
actually changes; setting a key to its current value is silent.
"""

import itertools
import json
import logging
import os
import tempfile
from typing import Callable

from config import (
    BASE_CURRENCY_KEY,
    DEFAULT_BASE_CURRENCY,
    DEFAULT_TARGET_CURRENCY,
    SETTINGS_PATH,
    TARGET_CURRENCY_KEY,
)
from fxpanel.models import CurrencyPair

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]

DEFAULTS: dict[str, str] = {
    BASE_CURRENCY_KEY: DEFAULT_BASE_CURRENCY,
    TARGET_CURRENCY_KEY: DEFAULT_TARGET_CURRENCY,
}


class Settings:
    def __init__(self, path: str | None = SETTINGS_PATH) -> None:
        self._path = path
        self._values: dict[str, str] = dict(DEFAULTS)
        self._handlers: dict[int, ChangeCallback] = {}
        self._ids = itertools.count(1)
        self._load()

    # -- key-value ----------------------------------------------------------

    def get_string(self, key: str) -> str:
        return self._values.get(key, "")

    def set_string(self, key: str, value: str) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._save()
        logger.info("Setting changed | %s=%s", key, value)
        for callback in list(self._handlers.values()):
            callback(key)

    # -- currency pair ------------------------------------------------------

    def get_config(self) -> CurrencyPair:
        return CurrencyPair.from_codes(
            self.get_string(BASE_CURRENCY_KEY), self.get_string(TARGET_CURRENCY_KEY)
        )

    def set_config(self, base: str | None = None, target: str | None = None) -> None:
        if base is not None:
            self.set_string(BASE_CURRENCY_KEY, base.strip().upper())
        if target is not None:
            self.set_string(TARGET_CURRENCY_KEY, target.strip().upper())

    # -- change notification ------------------------------------------------

    def on_config_change(self, callback: ChangeCallback) -> int:
        handler_id = next(self._ids)
        self._handlers[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    # -- persistence --------------------------------------------------------

    def _load(self) -> None:
        if not self._path or not os.path.exists(self._path):
            return
        with open(self._path, encoding="utf-8") as fh:
            stored = json.load(fh)
        if not isinstance(stored, dict):
            raise ValueError(f"Settings file {self._path} must hold a JSON object")
        self._values.update({str(k): str(v) for k, v in stored.items()})
        logger.debug("Loaded settings from %s", self._path)

    def _save(self) -> None:
        if not self._path:
            return
        directory = os.path.dirname(self._path) or "."
        os.makedirs(directory, exist_ok=True)
        # write beside the target, then swap it in: an interrupted write never truncates the file
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._values, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except Exception:
            os.unlink(tmp_path)
            raise
