#!/usr/bin/env python3
"""
PowerDNS exporter

Flow:
- Load config: YAML file, then PDNS_* environment, then CLI flags
- Pick the metric table: --daemon-type if given, otherwise the daemon_type
  reported by GET /servers/{id}, falling back to "recursor"
- Serve /metrics with uvicorn (or print one scrape with --once)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

import uvicorn
from prometheus_client import CollectorRegistry, generate_latest

from .collector import create_registry
from .config import ExporterConfig
from .exporter import PowerDnsExporter
from .http_client import PowerDnsHttpClient
from .metrics import DAEMON_TYPES, get_metric_table
from .server_info import ServerInfoResolver
from .web import create_app

logger = logging.getLogger("pdns_exporter")

DEFAULT_DAEMON_TYPE = "recursor"


def select_daemon_type(config: ExporterConfig, resolver: ServerInfoResolver) -> str:
    """Configured daemon type first, then the server's own report, then the default."""
    if config.daemon_type:
        return config.daemon_type

    info = resolver.resolve()
    if info is not None and info.daemon_type in DAEMON_TYPES:
        return info.daemon_type

    if info is not None:
        logger.warning("server reports unsupported daemon type %r, using %s",
                       info.daemon_type, DEFAULT_DAEMON_TYPE)
    else:
        logger.warning("daemon type unknown, using %s", DEFAULT_DAEMON_TYPE)
    return DEFAULT_DAEMON_TYPE


def build_exporter(config: ExporterConfig) -> Tuple[PowerDnsExporter, ServerInfoResolver, CollectorRegistry]:
    """Wire client, resolver, table, exporter and registry from config."""
    client = PowerDnsHttpClient(config.api_url, config.api_key, config.timeout, config.verify_tls)
    resolver = ServerInfoResolver(client, config.server_id)

    daemon_type = select_daemon_type(config, resolver)
    exporter = PowerDnsExporter(client, config.server_id, get_metric_table(daemon_type))
    logger.info("exporting %s metrics for server %s at %s", daemon_type, config.server_id, config.api_url)

    return exporter, resolver, create_registry(exporter)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Prometheus exporter for PowerDNS")
    parser.add_argument("--config", "-c", type=Path, default=Path("config.yml"),
                        help="YAML configuration file (default: config.yml)")
    parser.add_argument("--api-url", dest="api_url",
                        help="PowerDNS API root (e.g., http://localhost:8081/api/v1)")
    parser.add_argument("--api-key", dest="api_key",
                        help="PowerDNS API key (or PDNS_API_KEY)")
    parser.add_argument("--server-id", dest="server_id",
                        help="server id to scrape (default: localhost)")
    parser.add_argument("--daemon-type", dest="daemon_type", choices=DAEMON_TYPES,
                        help="metric table to use; detected from the server when omitted")
    parser.add_argument("--listen-address", dest="listen_address",
                        help="address to serve metrics on")
    parser.add_argument("--listen-port", dest="listen_port", type=int,
                        help="port to serve metrics on (default: 9120)")
    parser.add_argument("--metrics-path", dest="metrics_path",
                        help="path under which to expose metrics (default: /metrics)")
    parser.add_argument("--timeout", type=float,
                        help="PowerDNS API request timeout in seconds")
    parser.add_argument("--once", action="store_true",
                        help="print one scrape to stdout and exit")
    parser.add_argument("--log-level", dest="log_level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = ExporterConfig.from_file(args.config).override_with_env().override_with_args(args)

    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info(f"pdns exporter starting with config: api_url={config.api_url}, server_id={config.server_id}")

    if not config.api_key:
        logger.warning("no API key configured; PowerDNS will reject requests")

    _, resolver, registry = build_exporter(config)

    if args.once:
        sys.stdout.write(generate_latest(registry).decode("utf-8"))
        return

    app = create_app(config, registry, resolver)
    uvicorn.run(app, host=config.listen_address, port=config.listen_port, access_log=False)


if __name__ == "__main__":
    main()
