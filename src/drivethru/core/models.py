"""
Core data models for Drivethru.

Defines the artifact profile registry (the "menu") and the
per-request archive request.
"""

import hashlib
import ipaddress
import os
import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from drivethru.core.exceptions import UnknownArtifactError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 2468
DEFAULT_HASH_ALGORITHM = "md5"

_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*\.?$"
)


def _wrap_separators(path: str) -> str:
    """Ensure a path has a leading and a trailing separator."""
    if not path.startswith(os.sep):
        path = os.sep + path
    if not path.endswith(os.sep):
        path = path + os.sep
    return path


def is_valid_host(host: str) -> bool:
    """Return True if host is an IP address or a DNS host name."""
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        return bool(_HOSTNAME_RE.match(host))


class ArtifactProfile(BaseModel):
    """A named distributable unit registered in the menu."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Unique artifact name")
    source: str = Field(min_length=1, description="Source directory below the menu root")
    destination: str = Field(
        default=os.sep, description="Install directory on the target machine"
    )
    github: str = Field(default="", description="Fallback download URL shown in scripts")
    universal: bool = Field(
        default=False, description="True if the artifact has no OS/arch variants"
    )
    extra: tuple[str, ...] = Field(
        default=(), description="Artifacts chain-installed after this one"
    )

    @field_validator("source", "destination")
    @classmethod
    def normalize_separators(cls, v: str) -> str:
        """Add leading and trailing path separators."""
        return _wrap_separators(v)

    @field_validator("extra", mode="before")
    @classmethod
    def coerce_extra(cls, v):
        """Accept a single name or any sequence of names."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return tuple(v)


class Menu(BaseModel):
    """
    Server configuration and the ordered set of artifact profiles.

    Built once at startup and never mutated, so request handlers can
    share a single instance without locking.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Public host:port used in generated scripts")
    host: str = Field(default=DEFAULT_HOST, description="Listen host")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Listen port")
    root: str = Field(min_length=1, description="Filesystem root holding all builds")
    hash_algorithm: str = Field(
        default=DEFAULT_HASH_ALGORITHM, description="hashlib algorithm for /hash"
    )
    profiles: tuple[ArtifactProfile, ...] = Field(default=())

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Reject values that are neither IP addresses nor host names."""
        if not v:
            return DEFAULT_HOST
        if not is_valid_host(v):
            raise ValueError(f"host is invalid: {v}")
        return v

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        """Add a trailing separator to the root."""
        return v if v.endswith(os.sep) else v + os.sep

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Ensure hashlib can construct the algorithm with a fixed-length digest."""
        v = v.lower()
        try:
            digest = hashlib.new(v)
        except ValueError as e:
            raise ValueError(f"unsupported hash algorithm: {v}") from e
        # shake_* report digest_size 0 and need a length for hexdigest()
        if digest.digest_size == 0:
            raise ValueError(f"hash algorithm has no fixed digest length: {v}")
        return v

    @model_validator(mode="before")
    @classmethod
    def default_url(cls, data):
        """Derive the public URL from host and port when it is not set."""
        if isinstance(data, dict) and not data.get("url"):
            data = dict(data)
            host = data.get("host") or DEFAULT_HOST
            port = data.get("port") or DEFAULT_PORT
            data["url"] = f"{host}:{port}"
        return data

    @model_validator(mode="after")
    def check_profiles(self) -> "Menu":
        """Validate profile names and chained references."""
        names = [p.name for p in self.profiles]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate profile names: {', '.join(duplicates)}")

        known = set(names)
        for profile in self.profiles:
            missing = [e for e in profile.extra if e not in known]
            if missing:
                raise ValueError(
                    f"profile {profile.name} chains to unknown profiles: {', '.join(missing)}"
                )
        return self

    def get_profile(self, name: str) -> ArtifactProfile:
        """
        Look up a profile by name.

        Raises:
            UnknownArtifactError: If no profile has that name
        """
        for profile in self.profiles:
            if profile.name == name:
                return profile
        raise UnknownArtifactError(f"No artifact named {name}", artifact_name=name)

    def profile_names(self) -> list[str]:
        """Return profile names in registry order."""
        return [p.name for p in self.profiles]

    def source_root(self, profile: ArtifactProfile) -> str:
        """Return the unqualified source directory of a profile."""
        return self.root + profile.source.lstrip(os.sep)


@dataclass(frozen=True)
class ArchiveRequest:
    """One inbound download or hash request."""

    profile: ArtifactProfile
    os_name: str | None = None
    arch_name: str | None = None
