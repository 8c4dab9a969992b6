"""Process entry point: configure, wire and serve."""

from __future__ import annotations

import sys

from prometheus_client import start_http_server
from werkzeug.serving import make_server

from metrics_app.app import build_registry, create_app
from metrics_app.config import get_settings
from metrics_app.logger import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    registry, root_counter = build_registry(settings)
    app = create_app(registry, root_counter, settings)

    try:
        if settings.metrics_port is not None:
            start_http_server(settings.metrics_port, addr=settings.host, registry=registry)
            logger.info("Metrics exporter listening at http://localhost:%s/metrics", settings.metrics_port)

        # Same threaded server Flask.run starts; binding happens here.
        server = make_server(settings.host, settings.port, app, threaded=True)
    except OSError as exc:
        logger.error("Could not start server: %s", exc)
        sys.exit(1)

    logger.info("Example app listening at http://localhost:%s", server.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
