"""
HTTP client utilities for promexport.

Provides a clean interface for issuing range queries against a Prometheus
server or an authenticating gateway in front of it, including SSL context
handling for a caller supplied CA bundle.
"""

import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .errors import RequestFailed, TransportError, TrustLoadError, UrlParseError

logger = logging.getLogger("promexport.http")

QUERY_RANGE_PATH = "/api/v1/query_range"
GATEWAY_PATH_PREFIX = "/prometheus"


@dataclass(frozen=True)
class QueryTarget:
    """Request shape: path prefix in front of the API path and optional Authorization value"""
    path_prefix: str = ""
    token: Optional[str] = None

    @classmethod
    def direct(cls) -> "QueryTarget":
        """Plain Prometheus, unauthenticated."""
        return cls()

    @classmethod
    def gateway(cls, token: Optional[str]) -> "QueryTarget":
        """Prometheus behind a gateway serving it under /prometheus."""
        return cls(path_prefix=GATEWAY_PATH_PREFIX, token=token)

    @property
    def path(self) -> str:
        return self.path_prefix.rstrip("/") + QUERY_RANGE_PATH

    def headers(self) -> Dict[str, str]:
        # The token is sent verbatim, callers include any scheme ("Bearer ...") themselves
        if self.token:
            return {"Authorization": self.token}
        return {}


def create_ssl_context(ca_file: Optional[str] = None, verify_tls: bool = True) -> ssl.SSLContext:
    """
    Create SSL context for HTTPS requests.

    Args:
        ca_file: PEM encoded CA bundle trusted for the server certificate.
                 System defaults are used when omitted.
        verify_tls: When False, certificates are not verified at all

    Raises:
        TrustLoadError: If the CA bundle cannot be read or parsed
    """
    if not verify_tls:
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        return ssl_context

    try:
        return ssl.create_default_context(cafile=ca_file)
    except (OSError, ssl.SSLError) as e:
        raise TrustLoadError(f"failed to load CA bundle {ca_file}: {e}") from e


class PrometheusHttpClient:
    """HTTP client for the Prometheus range query endpoint."""

    def __init__(
        self,
        base_url: str,
        target: Optional[QueryTarget] = None,
        ca_file: Optional[str] = None,
        verify_tls: bool = True,
        timeout: int = 30,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL of the Prometheus server (e.g., https://prometheus:9090)
            target: Request shape, defaults to direct Prometheus access
            ca_file: Path to a PEM CA bundle used to validate the server certificate
            verify_tls: Disable to skip certificate validation entirely
            timeout: Request timeout in seconds

        Raises:
            UrlParseError: If base_url is not an http(s) URL with a host
            TrustLoadError: If ca_file cannot be loaded
        """
        self.base_url = base_url
        self._parts = self._parse_base_url(base_url)
        self.target = target or QueryTarget.direct()
        self.timeout = timeout
        self._ssl_context = create_ssl_context(ca_file, verify_tls)

    @staticmethod
    def _parse_base_url(base_url: str):
        try:
            parts = urlsplit(base_url)
            # Accessing .port validates it
            parts.port
        except ValueError as e:
            raise UrlParseError(f"invalid host URL {base_url!r}: {e}") from e

        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise UrlParseError(f"invalid host URL {base_url!r}: expected http(s)://host[:port]")
        return parts

    def build_url(self, params: Dict[str, str]) -> str:
        """Full request URL for the target path; params override any query already on the base URL."""
        query = dict(parse_qsl(self._parts.query, keep_blank_values=True))
        query.update(params)
        encoded = urlencode(sorted(query.items()))
        return urlunsplit((self._parts.scheme, self._parts.netloc, self.target.path, encoded, ""))

    def get(self, params: Dict[str, str]) -> bytes:
        """
        Make a single GET request and return the raw body.

        Raises:
            RequestFailed: On any status other than 200
            TransportError: On connection, DNS, TLS or timeout errors
        """
        url = self.build_url(params)
        req = urllib.request.Request(url, headers=self.target.headers(), method="GET")
        logger.debug("GET %s", url)

        # Use SSL context for HTTPS URLs
        ssl_context = self._ssl_context if url.startswith("https://") else None

        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=ssl_context) as resp:
                status, reason = resp.status, resp.reason
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise RequestFailed(e.code, e.reason, url) from e
        except urllib.error.URLError as e:
            raise TransportError(f"failed to reach {url}: {e.reason}") from e
        except OSError as e:
            # Timeouts and connection resets while reading the body
            raise TransportError(f"failed to reach {url}: {e}") from e

        # urllib raises for 4xx/5xx but lets other 2xx codes through
        if status != 200:
            raise RequestFailed(status, reason, url)
        return body
