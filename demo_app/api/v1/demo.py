"""
Demo API endpoints
"""
import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Request

from demo_app.api.dependencies import ANY_METHOD, count_request, get_app_state, get_tracer
from demo_app.models.demo import (
    EchoResponse,
    FeatureResponse,
    HelloResponse,
    InfoResponse,
    MetricsResponse,
    RandomResponse,
    StatusResponse,
    TimeResponse,
)
from demo_app.services import runtime
from demo_app.services.state import AppState
from demo_app.services.tracing import Tracer

# Create logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["Demo"])

APP_NAME = "Demo App"
APP_DESCRIPTION = "A demo application with OpenTelemetry for CI/CD pipeline testing"
APP_AUTHOR = "CI/CD Platform Team"

FEATURE_NAME = "OpenTelemetry 集成"
FEATURE_DESCRIPTION = "这是 v2.5 开发版，支持分布式追踪和结构化日志"

DEFAULT_GREETING_NAME = "World"
DEFAULT_ECHO_MESSAGE = "Hello from Echo API with OpenTelemetry!"

COLORS = ["#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD", "#98D8C8", "#F7DC6F"]
QUOTES = [
    "代码是写给人看的，顺便能在机器上运行。",
    "先让它工作，再让它正确，最后让它快。",
    "简单是可靠的先决条件。",
    "过早优化是万恶之源。",
    "好的代码是它自己最好的文档。",
]

# Rolls above this mark the request as failed in the trace
SIMULATED_ERROR_THRESHOLD = 950


def _canonical_header_name(name: str) -> str:
    """content-type -> Content-Type"""
    return "-".join(part.capitalize() for part in name.split("-"))


def _first_header_values(request: Request) -> dict:
    """First value of each request header; Host is part of the request line, not a header"""
    headers = {}
    for name, value in request.headers.items():
        if name == "host":
            continue
        headers.setdefault(_canonical_header_name(name), value)
    return headers


# Define endpoints
@router.api_route("/hello", methods=ANY_METHOD, response_model=HelloResponse, response_model_exclude_none=True)
def hello(
    request: Request,
    name: str = "",
    state: AppState = Depends(get_app_state),
    tracer: Tracer = Depends(get_tracer),
):
    """Greet the caller, by name if one is given"""
    attributes = {"greeting.name": name, "http.method": request.method}
    with tracer.start_span("hello.process_greeting", attributes=attributes) as span:
        name = name or DEFAULT_GREETING_NAME

        state.simulate_latency(50)

        logger.info(f"Hello endpoint called, name: {name}, traceId: {span.trace_id}")
        return HelloResponse(
            message=f"Hello, {name}! 👋 (v2.5 with OpenTelemetry)",
            timestamp=runtime.utc_timestamp(),
            trace_id=span.trace_id or None,
        )


@router.api_route("/status", methods=ANY_METHOD, response_model=StatusResponse, response_model_exclude_none=True)
def status(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Environment and uptime of the running service"""
    with tracer.start_span("status.get_status") as span:
        environment = state.settings.APP_ENV
        uptime = runtime.format_duration(state.uptime())

        logger.info(f"Status check, env: {environment}, uptime: {uptime}, traceId: {span.trace_id}")
        return StatusResponse(
            status="running",
            environment=environment,
            uptime=uptime,
            timestamp=runtime.utc_timestamp(),
            trace_id=span.trace_id or None,
        )


@router.api_route(
    "/feature",
    methods=ANY_METHOD,
    response_model=FeatureResponse,
    dependencies=[Depends(count_request)],
)
def feature(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """The feature showcased by this build"""
    logger.info(f"Feature endpoint called, traceId: {tracer.current_trace_id()}")
    return FeatureResponse(
        feature=FEATURE_NAME,
        description=FEATURE_DESCRIPTION,
        version=state.settings.VERSION,
        timestamp=runtime.utc_timestamp(),
    )


@router.api_route(
    "/metrics",
    methods=ANY_METHOD,
    response_model=MetricsResponse,
    dependencies=[Depends(count_request)],
)
def metrics(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Request count, memory and thread usage of the process"""
    request_count = state.request_counter.value
    memory_mb = runtime.memory_usage_mb()

    logger.info(
        f"Metrics requested, requestCount: {request_count}, memory: {memory_mb:.2f} MB, "
        f"traceId: {tracer.current_trace_id()}"
    )
    return MetricsResponse(
        request_count=request_count,
        memory_usage=f"{memory_mb:.2f} MB",
        thread_count=runtime.thread_count(),
        uptime=runtime.format_duration(state.uptime()),
        timestamp=runtime.utc_timestamp(),
    )


@router.api_route(
    "/echo",
    methods=ANY_METHOD,
    response_model=EchoResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(count_request)],
)
def echo(
    request: Request,
    message: str = "",
    state: AppState = Depends(get_app_state),
    tracer: Tracer = Depends(get_tracer),
):
    """Echo the message back along with the request line and headers"""
    attributes = {"http.method": request.method, "http.path": request.url.path}
    with tracer.start_span("echo.process_request", attributes=attributes) as span:
        headers = _first_header_values(request)
        message = message or DEFAULT_ECHO_MESSAGE

        # Stand-in for a database round trip
        if tracer.enabled:
            with tracer.start_span("database.query", attributes={"db.system": "postgresql"}):
                state.simulate_latency(30)

        logger.info(f"Echo endpoint, method: {request.method}, message: {message}, traceId: {span.trace_id}")
        return EchoResponse(
            echo=message,
            headers=headers,
            method=request.method,
            path=request.url.path,
            timestamp=runtime.utc_timestamp(),
            trace_id=span.trace_id or None,
        )


@router.api_route(
    "/info",
    methods=ANY_METHOD,
    response_model=InfoResponse,
    dependencies=[Depends(count_request)],
)
def info(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Application and runtime details"""
    logger.info(f"Info endpoint called, traceId: {tracer.current_trace_id()}")
    return InfoResponse(
        app_name=APP_NAME,
        version=state.settings.VERSION,
        description=APP_DESCRIPTION,
        author=APP_AUTHOR,
        runtime_version=runtime.runtime_version(),
        os=runtime.os_name(),
        arch=runtime.arch_name(),
        timestamp=runtime.utc_timestamp(),
    )


@router.api_route(
    "/time",
    methods=ANY_METHOD,
    response_model=TimeResponse,
    dependencies=[Depends(count_request)],
)
def server_time(tracer: Tracer = Depends(get_tracer)):
    """Server clock in a few formats"""
    now = datetime.now().astimezone()
    weekday = now.isoweekday()

    logger.info(
        f"Time endpoint called, serverTime: {now.isoformat(timespec='seconds')}, "
        f"traceId: {tracer.current_trace_id()}"
    )
    return TimeResponse(
        server_time=now.strftime("%Y-%m-%d %H:%M:%S"),
        timezone=runtime.local_timezone_name(now),
        unix_time=int(now.timestamp()),
        day_of_week=now.strftime("%A"),
        week_of_year=now.isocalendar()[1],
        is_weekend=weekday in (6, 7),
        timestamp=runtime.utc_timestamp(now),
    )


@router.api_route(
    "/random",
    methods=ANY_METHOD,
    response_model=RandomResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(count_request)],
)
def random_data(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Random number, UUID, colour, quote and dice rolls"""
    rng = state.rng
    with tracer.start_span("random.generate_data") as span:
        if tracer.enabled:
            # Stand-ins for an upstream API call and a cache lookup
            with tracer.start_span("external.api.call", attributes={"api.name": "random-generator"}):
                state.simulate_latency(100)
            with tracer.start_span("cache.lookup") as cache_span:
                state.simulate_latency(10)
                cache_span.set_attributes({"cache.type": "redis", "cache.hit": rng.random() > 0.5})

        dice = [rng.randint(1, 6) for _ in range(3)]
        number = rng.randrange(1000)
        logger.info(f"Random endpoint called, number: {number}, traceId: {span.trace_id}")

        if number > SIMULATED_ERROR_THRESHOLD:
            span.record_error(
                RuntimeError("simulated error: random number too high"),
                "Random error for testing",
            )
            logger.error(f"Simulated error occurred, number: {number}, traceId: {span.trace_id}")

        return RandomResponse(
            number=number,
            uuid=str(uuid.UUID(int=rng.getrandbits(128), version=4)),
            color=rng.choice(COLORS),
            quote=rng.choice(QUOTES),
            lucky_number=rng.randint(1, 100),
            dice=dice,
            timestamp=runtime.utc_timestamp(),
            trace_id=span.trace_id or None,
        )
