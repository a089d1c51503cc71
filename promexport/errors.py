"""
Error types raised while querying a Prometheus range API.

Every error is terminal for the query that produced it; nothing here is retried.
"""

from typing import Optional


class PromExportError(Exception):
    """Base class for all promexport failures."""


class UrlParseError(PromExportError):
    """The configured Prometheus host is not a usable http(s) URL."""


class TrustLoadError(PromExportError):
    """The CA bundle could not be read or parsed."""


class TransportError(PromExportError):
    """Network, DNS or TLS failure before an HTTP status was received."""


class RequestFailed(PromExportError):
    """The server answered with something other than 200 OK."""

    def __init__(self, status: int, reason: Optional[str], url: str):
        self.status = status
        self.reason = reason or ""
        self.url = url
        status_text = f"{status} {self.reason}" if self.reason else str(status)
        super().__init__(f"didn't return 200 OK but {status_text}: {url}")


class DecodeError(PromExportError):
    """Response body is not valid JSON or does not match the expected shape."""


class UnsupportedResultType(PromExportError):
    """Only matrix (range vector) results are supported."""

    def __init__(self, result_type: str):
        self.result_type = result_type
        super().__init__(f"result type isn't of type matrix: {result_type}")


class EmptyResult(PromExportError):
    """The query succeeded but returned no time series."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"no timeseries found for query: {query}")
