"""
Process and clock helpers used by the demo endpoints
"""
import platform
import sys
import threading
from datetime import datetime, timezone
from typing import Optional

import psutil


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Current UTC time as RFC 3339 with second precision, e.g. 2024-05-01T12:00:00Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_duration(seconds: float) -> str:
    """
    Render a duration rounded to whole seconds in Go duration notation

    0 -> "0s", 65 -> "1m5s", 3607 -> "1h0m7s"
    """
    total = int(seconds + 0.5) if seconds > 0 else 0
    if total == 0:
        return "0s"

    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def memory_usage_mb() -> float:
    """Resident set size of this process in MB"""
    return psutil.Process().memory_info().rss / 1024 / 1024


def thread_count() -> int:
    """Live threads in this process"""
    return threading.active_count()


def runtime_version() -> str:
    return f"python{platform.python_version()}"


def os_name() -> str:
    return sys.platform


def arch_name() -> str:
    return platform.machine() or "unknown"


def local_timezone_name(now: datetime) -> str:
    """Name of the zone a local-aware datetime belongs to, e.g. UTC or CEST"""
    return now.tzname() or "Local"
