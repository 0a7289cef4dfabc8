"""
API schemas.
"""

from drivethru.api.schemas.responses import (
    ErrorResponse,
    HealthResponse,
    ProfileListResponse,
    ProfileResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ProfileListResponse",
    "ProfileResponse",
]
