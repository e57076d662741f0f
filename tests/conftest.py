"""
PyTest configuration and fixtures
"""
import os
import sys
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

# Disable logging during tests
logging.getLogger().setLevel(logging.WARNING)

# Set test environment variables
os.environ["APP_ENV"] = "test"
os.environ["TRACING_ENABLED"] = "false"
os.environ["SIMULATE_LATENCY"] = "false"

from demo_app.config import Settings
from demo_app.main import create_app
from demo_app.services.tracing import NoopTracer, OpenTelemetryTracer

TEST_VERSION = "9.9.9-test"


@pytest.fixture
def settings():
    """
    Settings for an untraced app with no artificial latency
    """
    return Settings(
        APP_ENV="test",
        VERSION=TEST_VERSION,
        BUILD_TIME="2024-05-01T12:00:00Z",
        GIT_COMMIT="abc1234",
        TRACING_ENABLED=False,
        SIMULATE_LATENCY=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings, tracer=NoopTracer())


@pytest.fixture
def client(app):
    """
    Test client fixture for the untraced app
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def span_exporter():
    """
    In-memory exporter collecting every finished span
    """
    return InMemorySpanExporter()


@pytest.fixture
def otel_tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return OpenTelemetryTracer(provider)


@pytest.fixture
def traced_app(settings, otel_tracer):
    return create_app(settings, tracer=otel_tracer)


@pytest.fixture
def traced_client(traced_app):
    """
    Test client fixture for an app traced with the OpenTelemetry SDK
    """
    with TestClient(traced_app) as test_client:
        yield test_client
