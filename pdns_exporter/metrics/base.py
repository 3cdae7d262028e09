from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

LabelExtractor = Callable[[str], Tuple[str, str]]
ValueTransform = Callable[[float], float]


class MetricKind(str, Enum):
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDescriptor:
    """Static rule mapping a PowerDNS statistic to an exported metric.

    ``name`` is the metric name without the daemon prefix. ``label`` is
    called with the statistic name (or the inner key of a map statistic)
    and returns a (label name, label value) pair.
    """
    name: str
    help: str
    kind: MetricKind
    label: Optional[LabelExtractor] = None
    transform: Optional[ValueTransform] = None


@dataclass
class MetricPoint:
    """Single exported sample"""
    name: str
    help: str
    kind: MetricKind
    value: float
    labels: Dict[str, str] = None

    def __post_init__(self):
        if self.labels is None:
            self.labels = {}


def fixed_label(key: str, value: str) -> LabelExtractor:
    """Label with a constant value, for stats collapsing onto one metric."""
    def extract(_name: str) -> Tuple[str, str]:
        return key, value
    return extract


def name_segment(key: str, index: int, sep: str = "-") -> LabelExtractor:
    """Label taken from one segment of the stat name, e.g. cpu-sys-msec -> sys."""
    def extract(name: str) -> Tuple[str, str]:
        return key, name.split(sep)[index]
    return extract


def entry_name(key: str) -> LabelExtractor:
    """Label carrying the inner key of a map statistic as-is."""
    def extract(name: str) -> Tuple[str, str]:
        return key, name
    return extract


def microseconds_to_seconds(value: float) -> float:
    return value / 1_000_000


def gauge(name: str, help: str, transform: Optional[ValueTransform] = None) -> MetricDescriptor:
    return MetricDescriptor(name, help, MetricKind.GAUGE, transform=transform)


def counter_vec(name: str, help: str, label: str, label_map: Mapping[str, str]) -> Dict[str, MetricDescriptor]:
    """One counter shared by several stats, told apart by a fixed label value.

    Args:
        name: Metric name without prefix
        help: Help text
        label: Label name
        label_map: PowerDNS stat name -> label value
    """
    return {
        stat: MetricDescriptor(name, help, MetricKind.COUNTER, label=fixed_label(label, value))
        for stat, value in label_map.items()
    }


def counter_map(name: str, help: str, label: str) -> MetricDescriptor:
    return MetricDescriptor(name, help, MetricKind.COUNTER, label=entry_name(label))
