"""
Configuration handling for the Demo App
Loads and validates environment variables
"""
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env into the process environment before settings are read
load_dotenv()

DEFAULT_ENVIRONMENT = "development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application settings
    APP_ENV: str = DEFAULT_ENVIRONMENT
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Build information, injected by the image build
    VERSION: str = "2.5.0-dev"
    BUILD_TIME: str = "unknown"
    GIT_COMMIT: str = "unknown"

    # Tracing settings
    TRACING_ENABLED: bool = True
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "jaeger:4318"
    OTEL_SERVICE_NAME: str = "demo-app"

    # Artificial downstream latency in the demo handlers
    SIMULATE_LATENCY: bool = True

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator("APP_ENV")
    @classmethod
    def default_empty_environment(cls, v: str) -> str:
        """An empty APP_ENV means the default environment"""
        v = v.strip()
        return v or DEFAULT_ENVIRONMENT

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name"""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("LOG_DIR")
    @classmethod
    def empty_log_dir_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def otlp_traces_endpoint(self) -> str:
        """
        Full OTLP/HTTP traces URL

        Accepts a bare ``host:port`` the way the collector address is usually
        given in compose files, and fills in the scheme and signal path.
        """
        endpoint = self.OTEL_EXPORTER_OTLP_ENDPOINT.strip().rstrip("/")
        if "://" not in endpoint:
            endpoint = f"http://{endpoint}"
        if not endpoint.endswith("/v1/traces"):
            endpoint = f"{endpoint}/v1/traces"
        return endpoint


# Create global settings instance
settings = Settings()
