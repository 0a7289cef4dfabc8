"""
Middleware for Drivethru API.

This module contains all middleware components for request/response processing.
"""

from drivethru.api.middleware.cors import add_cors_middleware, get_allowed_origins
from drivethru.api.middleware.logging import (
    RequestLoggingMiddleware,
    describe_path,
    get_client_ip,
)
from drivethru.api.middleware.slashes import StripSlashesMiddleware

__all__ = [
    "add_cors_middleware",
    "get_allowed_origins",
    "RequestLoggingMiddleware",
    "describe_path",
    "get_client_ip",
    "StripSlashesMiddleware",
]
