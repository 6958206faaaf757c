"""
fxpanel/client.py – HTTP/JSON client.

One requests.Session is created per client and reused for every call, so the
eleven daily fetches of a refresh share pooled connections to the CDN.

requests is blocking; fetch_json() runs each GET in a worker thread via
asyncio.to_thread so callers can fan out many fetches and await them together
without blocking the event loop.

Failure modes (all subclasses of FetchError, never retried here):
  - HTTPStatusError     status other than 200
  - EmptyResponseError  200 with an empty body
  - MalformedJSONError  body is not UTF-8 JSON
  - TransportError      DNS, connection, timeout, ...
"""

import asyncio
import json
import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from config import API_TIMEOUT_SECONDS, HISTORY_DAYS
from fxpanel.errors import (
    EmptyResponseError,
    HTTPStatusError,
    MalformedJSONError,
    TransportError,
)

logger = logging.getLogger(__name__)


class JSONClient:
    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ) -> None:
        if session is None:
            session = requests.Session()
            # one pooled connection per concurrent daily fetch
            session.mount("https://", HTTPAdapter(pool_maxsize=HISTORY_DAYS + 1))
        self._session = session
        self._timeout = timeout

    async def fetch_json(self, url: str) -> Any:
        """Resolve with the parsed JSON body of a GET to ``url``."""
        return await asyncio.to_thread(self.get_json, url)

    def get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)

        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Network error reaching %s: %s", url, exc)
            raise TransportError(url, str(exc)) from exc

        if response.status_code != requests.codes.ok:
            logger.error("HTTP %d from %s", response.status_code, url)
            raise HTTPStatusError(url, response.status_code)

        body = response.content
        if not body:
            logger.error("Empty response from %s", url)
            raise EmptyResponseError(url)

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            logger.error("Could not parse response from %s: %s", url, exc)
            raise MalformedJSONError(url, str(exc)) from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "JSONClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
