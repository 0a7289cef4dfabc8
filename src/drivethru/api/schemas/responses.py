"""
Pydantic response schemas for API endpoints.

JSON endpoints conform to these schemas. Archive, hash and script
endpoints return raw bodies instead.
"""

from typing import Any

from pydantic import BaseModel, Field

from drivethru.core.models import ArtifactProfile


class ProfileResponse(BaseModel):
    """Public view of one artifact profile."""

    name: str = Field(..., description="Artifact name")
    universal: bool = Field(..., description="True if the artifact has no OS/arch variants")
    destination: str = Field(..., description="Install directory on target machines")
    github: str = Field(default="", description="Fallback download URL")
    extra: list[str] = Field(default_factory=list, description="Chain-installed artifacts")

    model_config = {"extra": "forbid"}

    @classmethod
    def from_profile(cls, profile: ArtifactProfile) -> "ProfileResponse":
        return cls(
            name=profile.name,
            universal=profile.universal,
            destination=profile.destination,
            github=profile.github,
            extra=list(profile.extra),
        )


class ProfileListResponse(BaseModel):
    """Response model for the profile listing."""

    profiles: list[ProfileResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of profiles")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Check timestamp")
    components: dict[str, str] = Field(default_factory=dict, description="Component statuses")

    model_config = {"extra": "forbid"}


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: dict[str, Any] = Field(..., description="Error details")
