"""
System-related data models
"""
from pydantic import Field

from demo_app.models.base import CamelModel


class HealthResponse(CamelModel):
    """Response model for health check endpoint"""
    status: str = Field(..., description="Service health status")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")


class VersionInfo(CamelModel):
    """Build information for the running service"""
    version: str = Field(..., description="Build version")
    build_time: str = Field(..., description="Build timestamp")
    git_commit: str = Field(..., description="Source commit of the build")
