"""pdns_exporter - Prometheus exporter for PowerDNS statistics"""

__version__ = "0.4.0"
