"""
Logging middleware for FastAPI
Logs every request and records it in the Prometheus request metrics
"""
import time
import logging

from fastapi import Request
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "demo_app_http_requests_total",
    "HTTP requests handled",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "demo_app_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

# Paths kept out of the request metrics
UNTRACKED_PATHS = {"/metrics"}


def route_label(request: Request) -> str:
    """Route template of the matched endpoint, so path labels stay bounded"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


async def logging_middleware(request: Request, call_next):
    """
    Middleware to log request details and timing

    Requests that end in an unhandled exception are logged and counted as
    500 before the exception is passed on to the error handler.
    """
    start_time = time.time()
    status_code = 500

    try:
        # Process the request
        response = await call_next(request)
        status_code = response.status_code
    except Exception:
        logger.error(f"Request failed: {request.method} {request.url.path}")
        raise
    finally:
        # Calculate processing time
        process_time = time.time() - start_time

        if request.url.path not in UNTRACKED_PATHS:
            path = route_label(request)
            REQUEST_COUNT.labels(request.method, path, str(status_code)).inc()
            REQUEST_LATENCY.labels(request.method, path).observe(process_time)

        # Log request completion
        logger.info(
            f"Request completed: {request.method} {request.url.path} - "
            f"Status: {status_code} - "
            f"Process time: {process_time:.4f}s"
        )

    # Add processing time header
    response.headers["X-Process-Time"] = str(process_time)

    return response
