"""Pytest fixtures for the metrics service tests."""

from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from metrics_app.app import build_registry, create_app
from metrics_app.config import Settings, get_settings
from metrics_app.metrics import Counter, MetricsRegistry


@pytest.fixture()
def settings() -> Settings:
    """Return settings with a recognisable default label."""
    return Settings(APP_LABEL="test_app")


@pytest.fixture()
def wired(settings: Settings) -> tuple[MetricsRegistry, Counter]:
    """Build a fresh registry per test so counts never leak between tests."""
    return build_registry(settings)


@pytest.fixture()
def registry(wired: tuple[MetricsRegistry, Counter]) -> MetricsRegistry:
    return wired[0]


@pytest.fixture()
def root_counter(wired: tuple[MetricsRegistry, Counter]) -> Counter:
    return wired[1]


@pytest.fixture()
def app(registry: MetricsRegistry, root_counter: Counter, settings: Settings) -> Flask:
    flask_app = create_app(registry, root_counter, settings)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
