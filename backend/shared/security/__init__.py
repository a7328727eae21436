"""
Security module: rate limiting for public endpoints.
"""

from shared.security.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
)

__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
]
