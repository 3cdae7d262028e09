"""prometheus_client adapter for PowerDnsExporter."""

import logging
from typing import Dict, Iterable, List, Tuple

from prometheus_client import CollectorRegistry
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from .exporter import PowerDnsExporter
from .metrics import MetricKind, MetricPoint

logger = logging.getLogger("pdns_exporter.collector")


def to_metric_families(points: Iterable[MetricPoint]) -> List[Metric]:
    """Group points into metric families, keeping first-seen order."""
    families: Dict[str, Tuple[Metric, List[str]]] = {}

    for point in points:
        if point.name not in families:
            label_names = sorted(point.labels)
            family_class = CounterMetricFamily if point.kind == MetricKind.COUNTER else GaugeMetricFamily
            families[point.name] = (family_class(point.name, point.help, labels=label_names), label_names)

        family, label_names = families[point.name]
        if sorted(point.labels) != label_names:
            logger.warning(f"dropping {point.name} sample with labels {point.labels}, expected {label_names}")
            continue
        family.add_metric([point.labels[name] for name in label_names], point.value)

    return [family for family, _ in families.values()]


class PowerDnsCollector(Collector):
    """Runs one scrape per registry collection"""

    def __init__(self, exporter: PowerDnsExporter):
        self.exporter = exporter

    def describe(self) -> Iterable[Metric]:
        # Registering must not trigger a scrape
        return []

    def collect(self) -> Iterable[Metric]:
        yield from to_metric_families(self.exporter.scrape())


def create_registry(exporter: PowerDnsExporter) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(PowerDnsCollector(exporter))
    return registry
