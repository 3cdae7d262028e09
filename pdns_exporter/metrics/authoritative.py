"""Metric table for the PowerDNS Authoritative Server."""

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
    "latency-average": gauge(
        "latency_average_seconds",
        "Average number of microseconds a packet spends within PowerDNS",
        transform=microseconds_to_seconds,
    ),
    "packetcache-size": gauge("packet_cache_size", "Number of entries in the packet cache."),
    "signature-cache-size": gauge("signature_cache_size", "Number of entries in the signature cache."),
    "key-cache-size": gauge("key_cache_size", "Number of entries in the key cache."),
    "meta-cache-size": gauge("metadata_cache_size", "Number of entries in the metadata cache."),
    "qsize-q": gauge("qsize", "Number of packets waiting for database attention."),
    "uptime": gauge("uptime_seconds", "Number of seconds the daemon has been running."),

    # Counters
    "cpu-sys-msec": MetricDescriptor("cpu_utilisation", _CPU_HELP, MetricKind.COUNTER, label=name_segment("type", 1)),
    "cpu-user-msec": MetricDescriptor("cpu_utilisation", _CPU_HELP, MetricKind.COUNTER, label=name_segment("type", 1)),
    **counter_vec(
        "recursive_queries_total", "Total number of recursive queries.", "result",
        {
            "rd-queries": "requested",
            "recursing-questions": "processed",
            "recursing-answers": "answered",
            "recursion-unanswered": "unanswered",
        },
    ),
    **counter_vec(
        "queries_total", "Total number of queries.", "proto",
        {"tcp-queries": "tcp", "udp-queries": "udp"},
    ),
    **counter_vec(
        "answers_total", "Total number of answers.", "proto",
        {"tcp-answers": "tcp", "udp-answers": "udp"},
    ),
    **counter_vec(
        "packet_cache_lookups_total", "Total number of packet-cache lookups by result.", "result",
        {"packetcache-hit": "hit", "packetcache-miss": "miss"},
    ),
    **counter_vec(
        "query_cache_lookups_total", "Total number of query-cache lookups by result.", "result",
        {"query-cache-hit": "hit", "query-cache-miss": "miss"},
    ),
    **counter_vec(
        "exceptions_total", "Total number of exceptions by error.", "error",
        {
            "servfail-packets": "servfail",
            "timedout-packets": "timeout",
            "udp-recvbuf-errors": "recvbuf_error",
            "udp-sndbuf-errors": "sndbuf_error",
        },
    ),
}

MAP_STATS = {
    "response-by-qtype": counter_map("response_by_qtype_total", "Total number of responses by query type.", "qtype"),
    "response-by-rcode": counter_map("response_by_rcode_total", "Total number of responses by response code.", "rcode"),
    "response-sizes": counter_map("response_sizes_total", "Total number of responses by size bucket.", "size"),
}
