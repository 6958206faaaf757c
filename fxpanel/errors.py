"""
fxpanel/errors.py – Error taxonomy.

Two families:

FetchError
    Raised by the HTTP/JSON client, one subclass per failure mode.
    Never shown to the user directly.

RefreshError
    Raised by the refresh pipeline. Each subclass carries the label the
    indicator shows when a cycle ends with it. All three are terminal for
    the current cycle; nothing is retried automatically.
"""


class FetchError(Exception):
    """A single GET did not produce a JSON value."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} | {url}")
        self.url = url


class HTTPStatusError(FetchError):
    def __init__(self, url: str, status: int) -> None:
        super().__init__(url, f"HTTP error! status: {status}")
        self.status = status


class EmptyResponseError(FetchError):
    def __init__(self, url: str) -> None:
        super().__init__(url, "Empty response")


class MalformedJSONError(FetchError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(url, f"Malformed JSON: {reason}")


class TransportError(FetchError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(url, f"Transport failure: {reason}")


class RefreshError(Exception):
    """A refresh cycle ended without a rate to show."""

    label: str = "Error"


class ConfigError(RefreshError):
    """Base or target currency is not set. Fixable in the settings."""

    label = "Config Error"


class NotSupportedError(RefreshError):
    """The API does not publish the pair for today."""

    label = "Not supported yet"


class NetworkError(RefreshError):
    """Transport, HTTP status or parse failure on any of the fetches."""

    label = "Error"
