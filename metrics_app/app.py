"""Flask application exposing a greeting and a Prometheus scrape endpoint."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from flask import Flask, Response, request
from werkzeug.exceptions import HTTPException

from metrics_app.config import Settings, get_settings
from metrics_app.logger import get_logger
from metrics_app.metrics import Counter, MetricsRegistry

logger = get_logger(__name__)

ROOT_COUNTER_NAME = "http_requests_root_total"
ROOT_COUNTER_HELP = "Total number of HTTP requests to the root path"

RequestHook = Callable[[str], None]


def count_root_requests(counter: Counter) -> RequestHook:
    """Build a hook that increments ``counter`` for requests to exactly ``/``."""

    def hook(path: str) -> None:
        if path == "/":
            counter.inc()

    return hook


def build_registry(settings: Settings | None = None) -> tuple[MetricsRegistry, Counter]:
    """Create the registry served at ``/metrics`` together with the root counter."""

    settings = settings or get_settings()
    registry = MetricsRegistry()
    registry.set_default_labels(settings.default_labels)
    registry.collect_default_metrics()
    root_counter = Counter(ROOT_COUNTER_NAME, ROOT_COUNTER_HELP)
    registry.register(root_counter)
    return registry, root_counter


def create_app(
    registry: MetricsRegistry,
    root_counter: Counter,
    settings: Settings | None = None,
    hooks: Iterable[RequestHook] | None = None,
) -> Flask:
    """Wire ``registry`` and the request hooks into a new Flask app.

    ``hooks`` run in order before routing with the request path. They
    default to counting root requests; the root view does not count.
    """

    settings = settings or get_settings()
    request_hooks = list(hooks) if hooks is not None else [count_root_requests(root_counter)]

    app = Flask(__name__)
    app.extensions["metrics_registry"] = registry

    @app.before_request
    def run_request_hooks():
        for hook in request_hooks:
            hook(request.path)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error serving request", extra={"path": request.path})
        return "Internal Server Error", 500, {"Content-Type": "text/plain; charset=utf-8"}

    @app.get("/metrics")
    def metrics():
        # Joined up front so a failing collector surfaces as a 500.
        return Response("".join(registry.render()), content_type=registry.content_type)

    @app.get("/")
    def index():
        return settings.greeting, 200, {"Content-Type": "text/plain; charset=utf-8"}

    return app
