"""
Tracing system - span creation and trace ID propagation

Handlers and middleware only talk to the ``Tracer`` interface defined here.
``OpenTelemetryTracer`` is backed by the OpenTelemetry SDK, ``NoopTracer`` is
used when tracing is disabled, when the backend fails to initialise, and in
tests.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace import SpanKind, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from demo_app.config import Settings

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "demo-app"


class Span:
    """A unit of work inside a trace"""

    @property
    def trace_id(self) -> str:
        """Hex trace ID, empty when the span is not recording a trace"""
        return ""

    def rename(self, name: str) -> None:
        pass

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        for key, value in attributes.items():
            self.set_attribute(key, value)

    def record_error(self, error: Exception, description: Optional[str] = None) -> None:
        """Mark the span as failed and attach the exception"""
        pass


class Tracer:
    """
    Tracing capability handed to the middleware and the handlers

    The base class is the no-op implementation: spans record nothing and
    there is never a current trace ID.
    """

    enabled = False

    @contextmanager
    def start_span(
        self,
        name: str,
        attributes: Optional[Dict[str, Any]] = None,
        carrier: Optional[Mapping[str, str]] = None,
    ) -> Iterator[Span]:
        """
        Start a span and make it current for the duration of the block

        Args:
            name: Span name
            attributes: Initial span attributes
            carrier: Incoming request headers. When given, the span is a
                server span continuing any ``traceparent`` found there.
        """
        yield Span()

    def current_span(self) -> Span:
        return Span()

    def current_trace_id(self) -> str:
        return self.current_span().trace_id

    def shutdown(self) -> None:
        pass


class NoopTracer(Tracer):
    """Tracer that records nothing"""


class OpenTelemetrySpan(Span):
    """Span backed by an OpenTelemetry span"""

    def __init__(self, span: trace.Span):
        self._span = span

    @property
    def trace_id(self) -> str:
        context = self._span.get_span_context()
        if not context.is_valid:
            return ""
        return trace.format_trace_id(context.trace_id)

    def rename(self, name: str) -> None:
        self._span.update_name(name)

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def record_error(self, error: Exception, description: Optional[str] = None) -> None:
        self._span.set_status(Status(StatusCode.ERROR, description or str(error)))
        self._span.record_exception(error)


class OpenTelemetryTracer(Tracer):
    """Tracer backed by an OpenTelemetry ``TracerProvider``"""

    enabled = True

    def __init__(
        self,
        provider: TracerProvider,
        propagator: Optional[TextMapPropagator] = None,
        name: str = INSTRUMENTATION_NAME,
    ):
        self.provider = provider
        self.propagator = propagator or CompositePropagator(
            [TraceContextTextMapPropagator(), W3CBaggagePropagator()]
        )
        self._tracer = provider.get_tracer(name)

    @contextmanager
    def start_span(
        self,
        name: str,
        attributes: Optional[Dict[str, Any]] = None,
        carrier: Optional[Mapping[str, str]] = None,
    ) -> Iterator[Span]:
        if carrier is not None:
            context = self.propagator.extract(carrier)
            kind = SpanKind.SERVER
        else:
            context = None
            kind = SpanKind.INTERNAL

        with self._tracer.start_as_current_span(
            name, context=context, kind=kind, attributes=attributes
        ) as span:
            yield OpenTelemetrySpan(span)

    def current_span(self) -> Span:
        return OpenTelemetrySpan(trace.get_current_span())

    def shutdown(self) -> None:
        try:
            self.provider.shutdown()
        except Exception as e:
            logger.error(f"Error shutting down tracer: {e}")


def create_tracer_provider(settings: Settings) -> TracerProvider:
    """Build a provider exporting spans over OTLP/HTTP"""
    exporter = OTLPSpanExporter(endpoint=settings.otlp_traces_endpoint)

    resource = Resource.create(
        {
            SERVICE_NAME: settings.OTEL_SERVICE_NAME,
            SERVICE_VERSION: settings.VERSION,
            "environment": settings.APP_ENV,
        }
    )

    provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def init_tracing(settings: Settings) -> Tracer:
    """
    Create the tracer for the application

    Falls back to ``NoopTracer`` when tracing is disabled or the backend
    cannot be set up; the application keeps running untraced.
    """
    if not settings.TRACING_ENABLED:
        logger.info("Tracing disabled, running without OpenTelemetry")
        return NoopTracer()

    try:
        provider = create_tracer_provider(settings)
        tracer = OpenTelemetryTracer(provider)
        trace.set_tracer_provider(provider)
        propagate.set_global_textmap(tracer.propagator)
    except Exception as e:
        logger.warning(f"Failed to initialize tracer: {e}")
        return NoopTracer()

    logger.info(
        f"OpenTelemetry tracer initialized successfully, exporting to {settings.otlp_traces_endpoint}"
    )
    return tracer
