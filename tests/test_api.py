"""
API endpoint tests
"""
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from demo_app.api.v1.demo import COLORS, QUOTES

TEST_VERSION = "9.9.9-test"
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _parse_timestamp(value):
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")


def test_root_endpoint(client):
    """Test the landing page lists the endpoints and the version"""
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Demo App" in response.text
    assert f"Version: {TEST_VERSION}" in response.text
    for path in ["/health", "/version", "/api/hello", "/api/echo", "/api/random"]:
        assert f"<code>{path}</code>" in response.text


def test_unknown_path_not_found(client):
    """Test unregistered paths return 404"""
    response = client.get("/no-such-page")
    assert response.status_code == 404


def test_health_endpoint(client):
    """Test the health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    data = response.json()
    assert data["status"] == "healthy"
    _parse_timestamp(data["timestamp"])


def test_version_endpoint(client):
    """Test the version endpoint reports build information"""
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {
        "version": TEST_VERSION,
        "buildTime": "2024-05-01T12:00:00Z",
        "gitCommit": "abc1234",
    }


@pytest.mark.parametrize(
    "query,expected_name",
    [
        ({}, "World"),
        ({"name": "Test"}, "Test"),
        ({"name": "测试"}, "测试"),
    ],
)
def test_hello_endpoint(client, query, expected_name):
    """Test the greeting uses the given name, defaulting to World"""
    response = client.get("/api/hello", params=query)
    assert response.status_code == 200
    data = response.json()
    assert data["message"].startswith("Hello,")
    assert expected_name in data["message"]
    _parse_timestamp(data["timestamp"])
    assert "traceId" not in data


def test_status_endpoint(client):
    """Test the status endpoint reports environment and uptime"""
    response = client.get("/api/status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "running"
    assert data["environment"] == "test"
    assert data["uptime"].endswith("s")


def test_feature_endpoint(client):
    """Test the feature endpoint"""
    response = client.get("/api/feature")
    assert response.status_code == 200
    data = response.json()
    assert data["feature"]
    assert data["description"]
    assert data["version"] == TEST_VERSION


def test_metrics_endpoint(client):
    """Test the metrics endpoint reports process figures"""
    response = client.get("/api/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["goRoutines"] > 0
    assert data["requestCount"] == 1
    assert data["memoryUsage"].endswith(" MB")
    assert data["uptime"].endswith("s")


def test_echo_endpoint(client):
    """Test the echo endpoint returns the message and request details"""
    response = client.get("/api/echo", params={"message": "test"}, headers={"x-demo-header": "abc"})
    assert response.status_code == 200
    data = response.json()
    assert data["echo"] == "test"
    assert data["method"] == "GET"
    assert data["path"] == "/api/echo"
    assert data["headers"]["X-Demo-Header"] == "abc"
    assert data["headers"]["User-Agent"] == "testclient"


def test_echo_endpoint_post(client):
    """Test the echo endpoint reflects the POST method and the default message"""
    response = client.post("/api/echo")
    assert response.status_code == 200
    data = response.json()
    assert data["method"] == "POST"
    assert data["echo"] == "Hello from Echo API with OpenTelemetry!"


def test_info_endpoint(client):
    """Test the info endpoint"""
    response = client.get("/api/info")
    assert response.status_code == 200
    data = response.json()
    assert data["appName"] == "Demo App"
    assert data["version"] == TEST_VERSION
    assert data["author"] == "CI/CD Platform Team"
    assert data["goVersion"].startswith("python")
    assert data["os"]
    assert data["arch"]


def test_time_endpoint(client):
    """Test the time endpoint"""
    response = client.get("/api/time")
    assert response.status_code == 200
    data = response.json()
    assert data["unixTime"] > 0
    datetime.strptime(data["serverTime"], "%Y-%m-%d %H:%M:%S")
    assert data["timezone"]
    assert data["dayOfWeek"] in WEEKDAYS
    assert 1 <= data["weekOfYear"] <= 53
    assert data["isWeekend"] == (data["dayOfWeek"] in ("Saturday", "Sunday"))


def test_random_endpoint(client):
    """Test the random endpoint stays within its ranges"""
    for _ in range(20):
        response = client.get("/api/random")
        assert response.status_code == 200
        data = response.json()
        assert len(data["dice"]) == 3
        assert all(1 <= roll <= 6 for roll in data["dice"])
        assert 0 <= data["number"] <= 999
        assert 1 <= data["luckyNumber"] <= 100
        assert str(uuid.UUID(data["uuid"])) == data["uuid"]
        assert data["color"] in COLORS
        assert data["quote"] in QUOTES


def test_any_method_accepted(client):
    """Test registered paths answer methods other than GET"""
    assert client.put("/health").status_code == 200
    assert client.delete("/api/feature").status_code == 200


def test_request_counter_counts_only_counted_endpoints(client, app):
    """Test which endpoints increment the request counter"""
    for path in ["/health", "/version", "/api/hello", "/api/status", "/metrics", "/missing"]:
        client.get(path)
    assert app.state.demo.request_counter.value == 0

    for path in ["/", "/api/feature", "/api/echo", "/api/info", "/api/time", "/api/random"]:
        client.get(path)
    assert app.state.demo.request_counter.value == 6

    response = client.get("/api/metrics")
    assert response.json()["requestCount"] == 7


def test_concurrent_requests_are_all_counted(app):
    """Test no increments are lost under concurrent requests"""
    total = 40

    def call_feature(_):
        return TestClient(app).get("/api/feature").status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        statuses = list(pool.map(call_feature, range(total)))

    assert statuses == [200] * total
    assert app.state.demo.request_counter.value == total


def test_prometheus_metrics_endpoint(client):
    """Test request metrics are exposed in Prometheus format"""
    client.get("/health")
    client.get("/no-such-page")

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "demo_app_http_requests_total" in response.text
    assert 'path="/health"' in response.text
    assert 'path="unmatched"' in response.text
    assert "demo_app_http_request_duration_seconds" in response.text


def test_process_time_header(client):
    """Test the logging middleware adds the processing time header"""
    response = client.get("/health")
    assert float(response.headers["X-Process-Time"]) >= 0


def test_unhandled_exception_returns_500(app):
    """Test unexpected errors are answered with a generic 500"""
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred. Please try again later."}


def test_failed_request_is_logged_and_counted(app, caplog):
    """Test requests ending in an unhandled exception still reach the logs and metrics"""
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with caplog.at_level(logging.INFO, logger="demo_app.middleware.logging"):
        with TestClient(app, raise_server_exceptions=False) as test_client:
            assert test_client.get("/boom").status_code == 500
            metrics_text = test_client.get("/metrics").text

    messages = [r.getMessage() for r in caplog.records if r.name == "demo_app.middleware.logging"]
    assert any(m.startswith("Request completed: GET /boom - Status: 500") for m in messages)
    assert "Request failed: GET /boom" in messages
    assert 'method="GET",path="/boom",status="500"' in metrics_text


def test_echo_omits_host_header(client):
    """Test Host is not reported among the echoed headers"""
    data = client.get("/api/echo").json()
    assert "Host" not in data["headers"]
    assert data["headers"]["User-Agent"] == "testclient"


def test_prometheus_metrics_any_method(client):
    """Test the Prometheus endpoint answers methods other than GET"""
    response = client.post("/metrics")
    assert response.status_code == 200
    assert "demo_app_http_requests_total" in response.text
