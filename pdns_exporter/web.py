"""
FastAPI app exposing the exporter.

GET {metrics_path}   Prometheus text exposition, one scrape per request
GET /                landing page
"""

import html
import logging

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from . import __version__
from .config import ExporterConfig
from .server_info import ServerInfoResolver

logger = logging.getLogger("pdns_exporter.web")


def _landing_page(config: ExporterConfig, resolver: ServerInfoResolver) -> str:
    info = resolver.resolve()
    if info is not None:
        server = f"{html.escape(info.id)} ({html.escape(info.daemon_type)} {html.escape(info.version)})"
    else:
        server = f"{html.escape(config.server_id)} (server info unavailable)"

    return (
        "<html>\n"
        "<head><title>PowerDNS Exporter</title></head>\n"
        "<body>\n"
        "<h1>PowerDNS Exporter</h1>\n"
        f"<p>Server: {server}</p>\n"
        f"<p><a href=\"{html.escape(config.metrics_path)}\">Metrics</a></p>\n"
        "</body>\n"
        "</html>\n"
    )


def create_app(config: ExporterConfig, registry: CollectorRegistry, resolver: ServerInfoResolver) -> FastAPI:
    """Create the exporter's FastAPI application."""
    app = FastAPI(title="PowerDNS Exporter", version=__version__, docs_url=None, redoc_url=None)

    # Sync handlers run in the threadpool, so overlapping scrapes do not block each other
    @app.get(config.metrics_path)
    def metrics():
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", response_class=HTMLResponse)
    def index():
        return _landing_page(config, resolver)

    return app
