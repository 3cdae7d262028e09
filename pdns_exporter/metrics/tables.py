"""Metric table registry - one fixed table per PowerDNS daemon role"""
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from . import authoritative, recursor
from .base import MetricDescriptor


class MetricTable:
    """Immutable stat-name -> descriptor mapping for one daemon role.

    Simple and map statistics are looked up in separate sections, so a
    statistic of the wrong variant never matches.
    """

    def __init__(
        self,
        daemon_type: str,
        stats: Mapping[str, MetricDescriptor],
        map_stats: Mapping[str, MetricDescriptor],
    ):
        self.daemon_type = daemon_type
        self.prefix = f"powerdns_{daemon_type}"
        self._stats = MappingProxyType(dict(stats))
        self._map_stats = MappingProxyType(dict(map_stats))
        self.names: Tuple[str, ...] = tuple(self._stats) + tuple(
            name for name in self._map_stats if name not in self._stats
        )

    def stat(self, name: str) -> Optional[MetricDescriptor]:
        return self._stats.get(name)

    def map_stat(self, name: str) -> Optional[MetricDescriptor]:
        return self._map_stats.get(name)

    def metric_name(self, descriptor: MetricDescriptor) -> str:
        return f"{self.prefix}_{descriptor.name}"

    def __len__(self) -> int:
        return len(self._stats) + len(self._map_stats)

    def __repr__(self) -> str:
        return f"MetricTable({self.daemon_type!r}, {len(self)} stats)"


# Registry mapping daemon types to their descriptor sections
METRIC_TABLES: Dict[str, Tuple[Mapping[str, MetricDescriptor], Mapping[str, MetricDescriptor]]] = {
    "authoritative": (authoritative.STATS, authoritative.MAP_STATS),
    "recursor": (recursor.STATS, recursor.MAP_STATS),
}

DAEMON_TYPES = tuple(METRIC_TABLES)


def get_metric_table(daemon_type: str) -> MetricTable:
    """Build the table for a daemon role, raising ValueError for unknown roles."""
    try:
        stats, map_stats = METRIC_TABLES[daemon_type]
    except KeyError:
        raise ValueError(
            f"unsupported daemon type {daemon_type!r}, expected one of: {', '.join(DAEMON_TYPES)}"
        ) from None
    return MetricTable(daemon_type, stats, map_stats)
