"""Server metadata from GET /servers/{id}."""

import json
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .exceptions import NetworkError, ParseError
from .http_client import PowerDnsHttpClient

logger = logging.getLogger("pdns_exporter.server_info")


@dataclass(frozen=True)
class ServerInfo:
    """Identity of the monitored PowerDNS server"""
    kind: str
    id: str
    url: str
    daemon_type: str
    version: str
    config_url: str
    zones_url: str


def parse_server_info(raw: bytes) -> ServerInfo:
    """
    Parse a server object. Templated URLs are kept as-is.

    Raises:
        ParseError: If the body is not a JSON object
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"invalid server JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object for server info, got {type(data).__name__}")

    def field(key: str) -> str:
        value = data.get(key)
        return "" if value is None else str(value)

    return ServerInfo(
        kind=field("type") or field("kind"),
        id=field("id"),
        url=field("url"),
        daemon_type=field("daemon_type"),
        version=field("version"),
        config_url=field("config_url"),
        zones_url=field("zones_url"),
    )


def get_server_info(client: PowerDnsHttpClient, server_id: str) -> ServerInfo:
    """Fetch and parse server metadata, raising NetworkError/ParseError."""
    return parse_server_info(client.get_server(server_id))


class ServerInfoResolver:
    """Resolves server metadata once and caches it for the process lifetime.

    Failures are logged and retried on the next call.
    """

    def __init__(self, client: PowerDnsHttpClient, server_id: str):
        self.client = client
        self.server_id = server_id
        self._info: Optional[ServerInfo] = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> Optional[ServerInfo]:
        return self._info

    def resolve(self) -> Optional[ServerInfo]:
        if self._info is not None:
            return self._info

        with self._lock:
            if self._info is None:
                try:
                    self._info = get_server_info(self.client, self.server_id)
                    logger.info("resolved server %s: %s %s",
                                self._info.id, self._info.daemon_type, self._info.version)
                except (NetworkError, ParseError) as e:
                    logger.warning("could not resolve server info for %s: %s", self.server_id, e)
            return self._info
