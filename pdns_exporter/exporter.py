"""
Scrape orchestration.

One call to PowerDnsExporter.scrape() fetches /statistics, decodes it and
classifies every entry. The three scrape meta-metrics always come first:

    {prefix}_up                          1 if fetch and decode succeeded
    {prefix}_scrapes_total               every scrape, whatever the outcome
    {prefix}_json_parse_failures_total   decode failures only

Stat-derived points follow only when the scrape succeeded. Scrapes may
overlap; the shared counters live in ScrapeState behind a lock.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import NetworkError, ParseError
from .http_client import PowerDnsHttpClient
from .metrics import MetricKind, MetricPoint, MetricTable, classify_all
from .stats import decode_statistics

logger = logging.getLogger("pdns_exporter.exporter")


@dataclass(frozen=True)
class ScrapeSnapshot:
    up: int
    total_scrapes: int
    json_parse_failures: int


class ScrapeState:
    """Scrape counters shared by concurrent scrapes"""

    def __init__(self):
        self._lock = threading.Lock()
        self._up = 0
        self._total_scrapes = 0
        self._json_parse_failures = 0

    def record(self, success: bool, parse_failure: bool = False) -> ScrapeSnapshot:
        """Record one finished scrape and return the state it produced."""
        with self._lock:
            self._up = 1 if success else 0
            self._total_scrapes += 1
            if parse_failure:
                self._json_parse_failures += 1
            return ScrapeSnapshot(self._up, self._total_scrapes, self._json_parse_failures)

    def snapshot(self) -> ScrapeSnapshot:
        with self._lock:
            return ScrapeSnapshot(self._up, self._total_scrapes, self._json_parse_failures)


class PowerDnsExporter:
    """Runs scrapes of one PowerDNS server against a fixed metric table"""

    def __init__(
        self,
        client: PowerDnsHttpClient,
        server_id: str,
        table: MetricTable,
        state: Optional[ScrapeState] = None,
    ):
        self.client = client
        self.server_id = server_id
        self.table = table
        self.state = state or ScrapeState()

    @property
    def prefix(self) -> str:
        return self.table.prefix

    def _meta_points(self, snapshot: ScrapeSnapshot) -> List[MetricPoint]:
        return [
            MetricPoint(
                f"{self.prefix}_up",
                "Was the last scrape of PowerDNS successful.",
                MetricKind.GAUGE,
                snapshot.up,
            ),
            MetricPoint(
                f"{self.prefix}_scrapes_total",
                "Current total PowerDNS scrapes.",
                MetricKind.COUNTER,
                snapshot.total_scrapes,
            ),
            MetricPoint(
                f"{self.prefix}_json_parse_failures_total",
                "Number of errors while parsing PowerDNS JSON stats.",
                MetricKind.COUNTER,
                snapshot.json_parse_failures,
            ),
        ]

    def scrape(self) -> List[MetricPoint]:
        """Run one scrape. Never raises."""
        start_time = time.time()
        points: Optional[List[MetricPoint]] = None
        parse_failure = False

        try:
            raw = self.client.get_statistics(self.server_id)
            entries = decode_statistics(raw)
            points = classify_all(entries, self.table)
        except NetworkError as e:
            logger.error("scrape of %s failed: %s", self.server_id, e)
        except ParseError as e:
            parse_failure = True
            logger.error("could not parse statistics of %s: %s", self.server_id, e)
        except Exception as e:
            logger.exception("unexpected error while scraping %s: %s", self.server_id, e)

        snapshot = self.state.record(points is not None, parse_failure)
        result = self._meta_points(snapshot)
        if points is None:
            return result

        result.extend(points)
        logger.debug(f"{self.server_id}: collected {len(points)} metrics in {time.time() - start_time:.3f}s")
        return result
