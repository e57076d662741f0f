"""
System API endpoints
"""
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from demo_app.api.dependencies import ANY_METHOD, count_request, get_app_state, get_tracer
from demo_app.models.system import HealthResponse, VersionInfo
from demo_app.services.runtime import utc_timestamp
from demo_app.services.state import AppState
from demo_app.services.tracing import Tracer

# Create logger
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["System"])

LANDING_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>Demo App v2.5</title>
    <style>
        body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; background: #f0f8ff; }}
        h1 {{ color: #2e8b57; }}
        .version-badge {{ background: #2e8b57; color: white; padding: 5px 10px; border-radius: 15px; font-size: 14px; }}
        .endpoint {{ background: #fff; padding: 10px; margin: 10px 0; border-radius: 5px; border-left: 4px solid #2e8b57; }}
        code {{ background: #e0e0e0; padding: 2px 6px; border-radius: 3px; }}
        .otel-badge {{ background: #7B68EE; color: white; padding: 2px 8px; border-radius: 10px; font-size: 12px; margin-left: 10px; }}
    </style>
</head>
<body>
    <h1>🚀 Demo App <span class="version-badge">v2.5 开发版</span> <span class="otel-badge">OpenTelemetry</span></h1>
    <p>Version: {version}</p>
    <p><strong>🆕 v2.5 新功能：</strong> 集成 OpenTelemetry 分布式追踪和结构化日志！</p>
    <h2>Available Endpoints:</h2>
    <div class="endpoint"><strong>GET</strong> <code>/health</code> - Health check</div>
    <div class="endpoint"><strong>GET</strong> <code>/version</code> - Version info</div>
    <div class="endpoint"><strong>GET</strong> <code>/metrics</code> - Prometheus metrics</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/hello</code> - Hello World (with tracing)</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/status</code> - Application status</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/feature</code> - 功能展示</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/metrics</code> - 应用指标</div>
    <div class="endpoint"><strong>GET/POST</strong> <code>/api/echo</code> - 请求回显 (with tracing)</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/info</code> - 应用详细信息</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/time</code> - 服务器时间信息</div>
    <div class="endpoint"><strong>GET</strong> <code>/api/random</code> - 随机数据生成 (with tracing)</div>
</body>
</html>
"""


# Define endpoints
@router.api_route(
    "/",
    methods=ANY_METHOD,
    response_class=HTMLResponse,
    dependencies=[Depends(count_request)],
)
def root(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Landing page listing the available endpoints"""
    with tracer.start_span("root", attributes={"handler": "root"}) as span:
        logger.info(
            f"Root page accessed, request count: {state.request_counter.value}, traceId: {span.trace_id}"
        )
        return HTMLResponse(LANDING_PAGE.format(version=state.settings.VERSION))


@router.api_route("/health", methods=ANY_METHOD, response_model=HealthResponse)
def health_check(tracer: Tracer = Depends(get_tracer)):
    """Check if the service is healthy"""
    logger.info(f"Health check, traceId: {tracer.current_trace_id()}")
    return HealthResponse(status="healthy", timestamp=utc_timestamp())


@router.api_route("/version", methods=ANY_METHOD, response_model=VersionInfo)
def version(state: AppState = Depends(get_app_state), tracer: Tracer = Depends(get_tracer)):
    """Build information"""
    logger.info(f"Version info requested, traceId: {tracer.current_trace_id()}")
    settings = state.settings
    return VersionInfo(
        version=settings.VERSION,
        build_time=settings.BUILD_TIME,
        git_commit=settings.GIT_COMMIT,
    )


@router.api_route("/metrics", methods=ANY_METHOD, include_in_schema=False)
def prometheus_metrics():
    """Prometheus exposition of the HTTP request metrics"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
