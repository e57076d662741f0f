"""
Demo App
A small FastAPI service for exercising the CI/CD build-and-deploy pipeline
"""
import os
import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from demo_app.api.v1 import demo, system
from demo_app.config import Settings, settings as default_settings
from demo_app.middleware.logging import logging_middleware
from demo_app.middleware.tracing import TracingMiddleware
from demo_app.services.state import AppState
from demo_app.services.tracing import Tracer, init_tracing

# Get a logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger: console output, plus a rotating file when LOG_DIR is set"""
    formatter = logging.Formatter(LOG_FORMAT)

    # Create a handler for console output
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    # Create a handler for file output with rotation
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "demo-app.log"),
            maxBytes=10485760,  # 10MB
            backupCount=10,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=settings.LOG_LEVEL, handlers=handlers, force=True)


def create_app(settings: Optional[Settings] = None, tracer: Optional[Tracer] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Settings to run with, the environment-loaded ones by default
        tracer: Tracer to instrument requests with. When omitted one is built
            from the settings, falling back to an untraced app if the tracing
            backend cannot be set up.

    Returns:
        The configured FastAPI app, with its ``AppState`` on ``app.state.demo``
    """
    settings = settings or default_settings
    tracer = tracer or init_tracing(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"OpenTelemetry endpoint: {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")
        yield
        tracer.shutdown()

    app = FastAPI(
        title="Demo App",
        description="Demo service for CI/CD pipeline testing",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.demo = AppState(settings)
    app.state.tracer = tracer

    app.include_router(system.router)
    app.include_router(demo.router)

    # Request logging runs inside the request span
    app.middleware("http")(logging_middleware)
    app.add_middleware(TracingMiddleware, tracer=tracer)

    # Error handler for all exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred. Please try again later."},
        )

    return app


def run() -> None:
    """Serve the app with uvicorn on HOST:PORT"""
    configure_logging(default_settings)
    logger.info(f"Demo App v{default_settings.VERSION} starting on port {default_settings.PORT}")

    uvicorn.run(
        create_app(default_settings),
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
