"""
Health check helpers.

Each dependency check is an async function wrapped with
health_check_with_timeout(); the wrapper times it, bounds it and turns any
failure into an UNHEALTHY result instead of an exception.

Usage:
    @health_check_with_timeout(timeout=3.0, component="database")
    async def check_database_health():
        await asyncio.to_thread(ping)
        return {"dialect": "postgresql"}

    summary = await aggregate_health_checks([check_database_health()])
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Coroutine

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    """Outcome of one dependency check."""
    status: HealthStatus
    component: str
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.latency_ms is not None:
            data["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            data["error"] = self.error
        if self.details:
            data["details"] = self.details
        return data


def health_check_with_timeout(timeout: float = 5.0, component: str | None = None):
    """
    Decorate an async check so it always returns a HealthCheckResult.

    The wrapped function may return a dict of details or None.
    """
    def decorator(
        func: Callable[..., Coroutine[Any, Any, dict[str, Any] | None]]
    ) -> Callable[..., Coroutine[Any, Any, HealthCheckResult]]:
        name = component or func.__name__.removeprefix("check_").removesuffix("_health")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> HealthCheckResult:
            started = time.perf_counter()
            try:
                details = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                error = f"timeout after {timeout}s"
            except Exception as e:
                error = str(e) or type(e).__name__
            else:
                return HealthCheckResult(
                    status=HealthStatus.HEALTHY,
                    component=name,
                    latency_ms=(time.perf_counter() - started) * 1000,
                    details=details if isinstance(details, dict) else {},
                )

            latency_ms = (time.perf_counter() - started) * 1000
            logger.warning("Health check failed", component=name, error=error, latency_ms=latency_ms)
            return HealthCheckResult(
                status=HealthStatus.UNHEALTHY,
                component=name,
                latency_ms=latency_ms,
                error=error,
            )

        return wrapper
    return decorator


async def aggregate_health_checks(
    checks: list[Coroutine[Any, Any, HealthCheckResult]],
) -> dict[str, Any]:
    """
    Run checks concurrently.

    Returns:
        {"status": "healthy" | "unhealthy", "components": {name: result}}
    """
    results = await asyncio.gather(*checks)
    healthy = all(result.status == HealthStatus.HEALTHY for result in results)
    return {
        "status": HealthStatus.HEALTHY.value if healthy else HealthStatus.UNHEALTHY.value,
        "components": {result.component: result.to_dict() for result in results},
    }
