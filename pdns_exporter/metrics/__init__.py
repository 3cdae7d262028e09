"""Metric descriptors, role tables and classification"""

from .base import MetricDescriptor, MetricKind, MetricPoint
from .classifier import classify, classify_all
from .tables import DAEMON_TYPES, MetricTable, get_metric_table

__all__ = [
    'MetricDescriptor',
    'MetricKind',
    'MetricPoint',
    'MetricTable',
    'DAEMON_TYPES',
    'get_metric_table',
    'classify',
    'classify_all',
]
