"""
Drivethru Core Module.

Provides the profile registry, request types and the exception hierarchy.
"""

__all__ = [
    "ArchiveRequest",
    "ArtifactProfile",
    "Menu",
    "load_menu",
    "build_menu",
    # Exceptions
    "DrivethruError",
    "ConfigurationError",
    "UnknownArtifactError",
    "InvalidRequestError",
    "ArchiveError",
    "SourceNotFoundError",
    "SinkClosedError",
]

from drivethru.core.config import build_menu, load_menu
from drivethru.core.exceptions import (
    ArchiveError,
    ConfigurationError,
    DrivethruError,
    InvalidRequestError,
    SinkClosedError,
    SourceNotFoundError,
    UnknownArtifactError,
)
from drivethru.core.models import ArchiveRequest, ArtifactProfile, Menu
