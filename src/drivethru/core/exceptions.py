"""
Drivethru Exception Hierarchy.

Defines all custom exceptions used across Drivethru.
Provides consistent error handling and debugging information.
"""

from typing import Any


class DrivethruError(Exception):
    """
    Base exception for all Drivethru errors.

    All custom exceptions inherit from this class, allowing
    generic catch blocks and consistent error handling.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a DrivethruError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DrivethruError):
    """
    Errors in configuration loading or validation.

    Raised when:
    - The configuration file is missing or malformed
    - Host, port or hash algorithm values are invalid
    - A profile is missing its source or chains to an unknown profile
    """

    def __init__(
        self,
        message: str,
        *,
        config_file: str | None = None,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            config_file: Path to configuration file if applicable
            config_key: Configuration key if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, details=details)
        self.config_file = config_file
        self.config_key = config_key


class UnknownArtifactError(DrivethruError):
    """Raised when no profile is registered under the requested name."""

    def __init__(
        self,
        message: str = "Unknown artifact",
        *,
        artifact_name: str | None = None,
    ):
        details = {}
        if artifact_name:
            details["artifact_name"] = artifact_name
        super().__init__(message, details=details)
        self.artifact_name = artifact_name


class InvalidRequestError(DrivethruError):
    """
    Raised when platform qualifiers are missing or malformed.

    A non-universal profile needs both an operating system and an
    architecture, and each must name a single directory level.
    """

    def __init__(
        self,
        message: str = "Invalid request.",
        *,
        artifact_name: str | None = None,
        os_name: str | None = None,
        arch_name: str | None = None,
    ):
        details: dict[str, Any] = {}
        if artifact_name:
            details["artifact_name"] = artifact_name
        if os_name:
            details["os"] = os_name
        if arch_name:
            details["arch"] = arch_name
        super().__init__(message, details=details)
        self.artifact_name = artifact_name
        self.os_name = os_name
        self.arch_name = arch_name


class ArchiveError(DrivethruError):
    """
    Errors while producing an archive stream.

    Raised when a tar header cannot be built or written, a source file
    cannot be read, or the sink rejects a write. ``bytes_written`` tells
    the caller how much output already reached the sink.
    """

    def __init__(
        self,
        message: str,
        *,
        artifact_name: str | None = None,
        path: str | None = None,
        bytes_written: int = 0,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize an ArchiveError.

        Args:
            message: Human-readable error message
            artifact_name: Name of the artifact being archived
            path: Filesystem path involved in the failure
            bytes_written: Bytes delivered to the sink before the failure
            details: Optional structured data for debugging
        """
        details = details or {}
        if artifact_name:
            details["artifact_name"] = artifact_name
        if path:
            details["path"] = path
        details["bytes_written"] = bytes_written

        super().__init__(message, details=details)
        self.artifact_name = artifact_name
        self.path = path
        self.bytes_written = bytes_written

    @property
    def stream_started(self) -> bool:
        """Return True if any output reached the sink before the failure."""
        return self.bytes_written > 0


class SourceNotFoundError(ArchiveError):
    """Raised when the resolved source path does not exist or cannot be read."""

    def __init__(
        self,
        message: str = "Source not found",
        *,
        artifact_name: str | None = None,
        path: str | None = None,
    ):
        super().__init__(message, artifact_name=artifact_name, path=path, bytes_written=0)


class SinkClosedError(OSError):
    """Raised by a sink whose consumer has gone away."""


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, DrivethruError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
