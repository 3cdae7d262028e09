"""Classification of decoded statistics into metric points.

Statistics missing from the table and values that are not numbers are
skipped; neither fails the scrape.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..stats import Entry, MapStatEntry, StatEntry
from .base import MetricDescriptor, MetricPoint
from .tables import MetricTable

logger = logging.getLogger("pdns_exporter.classifier")


def parse_value(name: str, raw: Any) -> Optional[float]:
    # Numbers arrive as strings; bool, null, lists and objects are not values
    if not isinstance(raw, str):
        logger.debug(f"skipping {name}: non-numeric value {raw!r}")
        return None
    try:
        return float(raw)
    except ValueError:
        logger.debug(f"skipping {name}: non-numeric value {raw!r}")
        return None


def _point(table: MetricTable, descriptor: MetricDescriptor, label_source: str, value: float) -> MetricPoint:
    if descriptor.transform is not None:
        value = descriptor.transform(value)

    labels = {}
    if descriptor.label is not None:
        key, label_value = descriptor.label(label_source)
        labels[key] = label_value

    return MetricPoint(
        name=table.metric_name(descriptor),
        help=descriptor.help,
        kind=descriptor.kind,
        value=value,
        labels=labels,
    )


def _classify_stat(entry: StatEntry, table: MetricTable) -> List[MetricPoint]:
    descriptor = table.stat(entry.name)
    if descriptor is None:
        return []

    value = parse_value(entry.name, entry.value)
    if value is None:
        return []
    return [_point(table, descriptor, entry.name, value)]


def _classify_map(entry: MapStatEntry, table: MetricTable) -> List[MetricPoint]:
    descriptor = table.map_stat(entry.name)
    if descriptor is None:
        return []

    points = []
    for key, raw in entry.values:
        value = parse_value(f"{entry.name}[{key}]", raw)
        if value is not None:
            points.append(_point(table, descriptor, key, value))
    return points


def classify(entry: Entry, table: MetricTable) -> List[MetricPoint]:
    """Turn one statistic into zero or more metric points.

    A simple statistic yields at most one point; a map statistic yields one
    point per numeric inner value.
    """
    if isinstance(entry, MapStatEntry):
        return _classify_map(entry, table)
    return _classify_stat(entry, table)


def classify_all(entries: Iterable[Entry], table: MetricTable) -> List[MetricPoint]:
    """Classify a decoded response, ordered by the table rather than the response."""
    by_name: Dict[str, Entry] = {entry.name: entry for entry in entries}

    points: List[MetricPoint] = []
    for name in table.names:
        entry = by_name.get(name)
        if entry is not None:
            points.extend(classify(entry, table))
    return points
