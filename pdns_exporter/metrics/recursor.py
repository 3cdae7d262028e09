"""Metric table for the PowerDNS Recursor."""

from .base import (
    MetricDescriptor,
    MetricKind,
    counter_map,
    counter_vec,
    gauge,
    microseconds_to_seconds,
    name_segment,
)

_CPU_HELP = "Number of CPU milliseconds spent in user, and kernel space"

STATS = {
    # Gauges
    "qa-latency": gauge(
        "latency_average_seconds",
        "Exponential moving average of question-to-answer latency.",
        transform=microseconds_to_seconds,
    ),
    "concurrent-queries": gauge("concurrent_queries", "Number of concurrent queries."),
    "cache-entries": gauge("cache_size", "Number of entries in the cache."),
    "uptime": gauge("uptime_seconds", "Number of seconds the daemon has been running."),

    # Counters
    "sys-msec": MetricDescriptor("cpu_utilisation", _CPU_HELP, MetricKind.COUNTER, label=name_segment("type", 0)),
    "user-msec": MetricDescriptor("cpu_utilisation", _CPU_HELP, MetricKind.COUNTER, label=name_segment("type", 0)),
    **counter_vec(
        "incoming_queries_total", "Total number of incoming queries by network.", "net",
        {"questions": "udp", "tcp-questions": "tcp"},
    ),
    **counter_vec(
        "outgoing_queries_total", "Total number of outgoing queries by network.", "net",
        {"all-outqueries": "udp", "tcp-outqueries": "tcp"},
    ),
    **counter_vec(
        "cache_lookups_total", "Total number of cache lookups by result.", "result",
        {"cache-hits": "hit", "cache-misses": "miss"},
    ),
    **counter_vec(
        "answers_rcodes_total", "Total number of answers by response code.", "rcode",
        {
            "noerror-answers": "noerror",
            "nxdomain-answers": "nxdomain",
            "servfail-answers": "servfail",
        },
    ),
    **counter_vec(
        "answers_rtime_total", "Total number of answers grouped by response time slots.", "timeslot",
        {
            "answers0-1": "0_1ms",
            "answers1-10": "1_10ms",
            "answers10-100": "10_100ms",
            "answers100-1000": "100_1000ms",
            "answers-slow": "over_1000ms",
        },
    ),
    **counter_vec(
        "exceptions_total", "Total number of exceptions by error.", "error",
        {
            "resource-limits": "resource_limit",
            "over-capacity-drops": "over_capacity_drop",
            "unreachables": "ns_unreachable",
            "outgoing-timeouts": "outgoing_timeout",
        },
    ),
}

MAP_STATS = {
    "response-by-qtype": counter_map("response_by_qtype_total", "Total number of responses by query type.", "qtype"),
    "response-by-rcode": counter_map("response_by_rcode_total", "Total number of responses by response code.", "rcode"),
    "response-sizes": counter_map("response_sizes_total", "Total number of responses by size bucket.", "size"),
}
