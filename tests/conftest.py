"""Pytest configuration and shared fixtures"""
import threading
from pathlib import Path

import pytest

from pdns_exporter.exceptions import NetworkError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> bytes:
    return (FIXTURES_DIR / name).read_bytes()


class StubPowerDnsClient:
    """Stands in for PowerDnsHttpClient; responses may be bytes or exceptions"""

    def __init__(self, statistics=b"[]", server=b"{}", gate: threading.Event = None):
        self.statistics = statistics
        self.server = server
        self.gate = gate
        self.statistics_calls = 0
        self.server_calls = 0
        self._lock = threading.Lock()

    def _respond(self, response):
        if isinstance(response, Exception):
            raise response
        return response

    def get_statistics(self, server_id: str) -> bytes:
        with self._lock:
            self.statistics_calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        return self._respond(self.statistics)

    def get_server(self, server_id: str) -> bytes:
        self.server_calls += 1
        return self._respond(self.server)


@pytest.fixture
def authoritative_stats():
    return read_fixture("authoritative_stats.json")


@pytest.fixture
def recursor_stats():
    return read_fixture("recursor_stats.json")


@pytest.fixture
def broken_stats():
    return read_fixture("recursor_broken_result.json")


@pytest.fixture
def recursor_info():
    return read_fixture("recursor_info.json")


@pytest.fixture
def stub_client():
    """Factory for stub clients"""
    return StubPowerDnsClient


@pytest.fixture
def unreachable():
    return NetworkError("failed to reach http://127.0.0.1:1/api/v1/servers/localhost/statistics: "
                        "[Errno 111] Connection refused",
                        "http://127.0.0.1:1/api/v1/servers/localhost/statistics")
