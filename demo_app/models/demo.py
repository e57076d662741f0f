"""
Demo API data models
"""
from typing import Dict, List, Optional

from pydantic import Field

from demo_app.models.base import CamelModel


class HelloResponse(CamelModel):
    """Greeting returned by /api/hello"""
    message: str = Field(..., description="Greeting message")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")
    trace_id: Optional[str] = Field(None, description="Trace ID when tracing is active")


class StatusResponse(CamelModel):
    """Application status"""
    status: str = Field(..., description="Application status")
    environment: str = Field(..., description="Deployment environment")
    uptime: str = Field(..., description="Time since start, e.g. 3m5s")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")
    trace_id: Optional[str] = Field(None, description="Trace ID when tracing is active")


class FeatureResponse(CamelModel):
    """Feature flag showcased by this build"""
    feature: str = Field(..., description="Feature name")
    description: str = Field(..., description="Feature description")
    version: str = Field(..., description="Build version")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")


class MetricsResponse(CamelModel):
    """Process metrics"""
    request_count: int = Field(..., description="Requests counted since start")
    memory_usage: str = Field(..., description="Resident memory, e.g. 42.17 MB")
    thread_count: int = Field(..., alias="goRoutines", description="Live threads in the process")
    uptime: str = Field(..., description="Time since start, e.g. 3m5s")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")


class EchoResponse(CamelModel):
    """Echo of the incoming request"""
    echo: str = Field(..., description="Echoed message")
    headers: Dict[str, str] = Field(..., description="Request headers, first value per name")
    method: str = Field(..., description="Request method")
    path: str = Field(..., description="Request path")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")
    trace_id: Optional[str] = Field(None, description="Trace ID when tracing is active")


class InfoResponse(CamelModel):
    """Application and runtime details"""
    app_name: str = Field(..., description="Application name")
    version: str = Field(..., description="Build version")
    description: str = Field(..., description="Application description")
    author: str = Field(..., description="Owning team")
    runtime_version: str = Field(..., alias="goVersion", description="Interpreter version")
    os: str = Field(..., description="Operating system")
    arch: str = Field(..., description="Machine architecture")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")


class TimeResponse(CamelModel):
    """Server clock details"""
    server_time: str = Field(..., description="Local time, YYYY-MM-DD HH:MM:SS")
    timezone: str = Field(..., description="Local time zone name")
    unix_time: int = Field(..., description="Seconds since the epoch")
    day_of_week: str = Field(..., description="Weekday name")
    week_of_year: int = Field(..., description="ISO week number")
    is_weekend: bool = Field(..., description="Whether today is Saturday or Sunday")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")


class RandomResponse(CamelModel):
    """A bundle of random values"""
    number: int = Field(..., description="Random number in [0, 999]")
    uuid: str = Field(..., description="Random UUID")
    color: str = Field(..., description="Random hex colour")
    quote: str = Field(..., description="Random programming quote")
    lucky_number: int = Field(..., description="Lucky number in [1, 100]")
    dice: List[int] = Field(..., description="Three dice rolls")
    timestamp: str = Field(..., description="Current UTC time, RFC 3339")
    trace_id: Optional[str] = Field(None, description="Trace ID when tracing is active")
