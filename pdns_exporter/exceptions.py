"""Exception types raised while talking to the PowerDNS API."""

from typing import Optional


class ExporterError(Exception):
    """Base class for scrape errors."""


class NetworkError(ExporterError):
    """Connection failure, timeout or non-success HTTP status."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ParseError(ExporterError):
    """Malformed JSON or a response with an unexpected shape."""
