"""
Tracing middleware
Runs every request inside a server span of the application's tracer
"""
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from demo_app.services.tracing import Span, Tracer

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "X-Trace-Id"


class TracingMiddleware(BaseHTTPMiddleware):
    """
    Middleware starting one server span per request

    Continues the caller's trace when a ``traceparent`` header is present and
    returns the trace ID in the ``X-Trace-Id`` response header.
    """

    def __init__(self, app: ASGIApp, tracer: Tracer):
        super().__init__(app)
        self.tracer = tracer

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        attributes = {
            "http.method": request.method,
            "http.target": request.url.path,
        }
        with self.tracer.start_span(
            f"{request.method} {request.url.path}",
            attributes=attributes,
            carrier=dict(request.headers),
        ) as span:
            try:
                response = await call_next(request)
            except Exception as e:
                self._annotate(span, request, 500)
                span.record_error(e, f"Unhandled exception on {request.method} {request.url.path}")
                raise

            self._annotate(span, request, response.status_code)
            if response.status_code >= 500:
                span.record_error(
                    RuntimeError(f"HTTP {response.status_code}"),
                    f"Server error on {request.method} {request.url.path}",
                )

            if span.trace_id:
                response.headers[TRACE_ID_HEADER] = span.trace_id

        return response

    @staticmethod
    def _annotate(span: Span, request: Request, status_code: int) -> None:
        route = request.scope.get("route")
        if route is not None:
            span.rename(f"{request.method} {route.path}")
            span.set_attribute("http.route", route.path)
        span.set_attribute("http.status_code", status_code)
