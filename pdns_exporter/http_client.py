"""
HTTP client for the PowerDNS API.

Provides blocking GET access to the statistics and server endpoints of
an authoritative server or recursor, authenticated with X-API-Key.
"""

import logging
import socket
import ssl
import urllib.error
import urllib.request
from urllib.parse import quote

from .exceptions import NetworkError

logger = logging.getLogger("pdns_exporter.http")


class PowerDnsHttpClient:
    """HTTP client for the PowerDNS REST API."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 5.0, verify_tls: bool = True):
        """
        Initialize HTTP client.

        Args:
            base_url: API root of the server (e.g., http://localhost:8081/api/v1)
            api_key: Value sent in the X-API-Key header
            timeout: Request timeout in seconds
            verify_tls: Verify server certificates on HTTPS URLs
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._ssl_context = self._create_ssl_context(verify_tls)

    def _create_ssl_context(self, verify_tls: bool) -> ssl.SSLContext:
        ssl_context = ssl.create_default_context()
        if not verify_tls:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        return ssl_context

    def get(self, path: str) -> bytes:
        """
        Make a GET request and return the raw response body.

        Args:
            path: Endpoint path below the API root (e.g., /servers/localhost)

        Returns:
            Response body bytes

        Raises:
            NetworkError: On connection errors, timeouts and HTTP errors
        """
        url = f"{self.base_url}{path}"
        headers = {"X-API-Key": self.api_key, "Accept": "application/json"}
        req = urllib.request.Request(url, headers=headers, method="GET")

        ssl_context = self._ssl_context if url.startswith("https://") else None
        logger.debug("GET %s", url)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=ssl_context) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            raise NetworkError(f"HTTP {e.code} from {url}", url, status=e.code) from e
        except urllib.error.URLError as e:
            raise NetworkError(f"failed to reach {url}: {e.reason}", url) from e
        except (socket.timeout, TimeoutError) as e:
            raise NetworkError(f"timed out after {self.timeout}s waiting for {url}", url) from e
        except OSError as e:
            raise NetworkError(f"connection error for {url}: {e}", url) from e

    def get_statistics(self, server_id: str) -> bytes:
        """Fetch the raw statistics list of a server."""
        return self.get(f"/servers/{quote(server_id, safe='')}/statistics")

    def get_server(self, server_id: str) -> bytes:
        """Fetch the raw server metadata object."""
        return self.get(f"/servers/{quote(server_id, safe='')}")
