"""
Source path resolution.

Maps a profile and optional platform qualifiers to the directory that
gets archived. Pure: nothing here touches the filesystem.
"""

import os
from pathlib import Path

from drivethru.core.exceptions import InvalidRequestError
from drivethru.core.models import ArchiveRequest, ArtifactProfile

# Architecture names reported by `uname -m` that map to build directory names
ARCH_ALIASES = {
    "x86_64": "amd64",
}


def normalize_arch(arch_name: str | None) -> str | None:
    """Map an architecture name to its build directory name."""
    if arch_name is None:
        return None
    return ARCH_ALIASES.get(arch_name, arch_name)


def _is_single_segment(value: str) -> bool:
    if value in (".", ".."):
        return False
    if os.sep in value or (os.altsep and os.altsep in value):
        return False
    return "/" not in value


def resolve(
    profile: ArtifactProfile,
    os_name: str | None,
    arch_name: str | None,
    *,
    root: str | Path,
) -> Path:
    """
    Compute the source path for a profile.

    Universal profiles ignore the qualifiers and resolve to
    ``root/source``. Every other profile resolves to
    ``root/source/os/arch`` with ``x86_64`` read as ``amd64``.

    Args:
        profile: Profile being requested
        os_name: Operating system qualifier
        arch_name: Architecture qualifier
        root: Menu root directory

    Returns:
        Absolute source path (existence is not checked)

    Raises:
        InvalidRequestError: If a non-universal profile is missing a
            qualifier or a qualifier is not a single path segment
    """
    base = Path(root) / profile.source.strip(os.sep)

    if profile.universal:
        return base

    arch_name = normalize_arch(arch_name)
    if not os_name or not arch_name:
        raise InvalidRequestError(
            "Invalid request.",
            artifact_name=profile.name,
            os_name=os_name,
            arch_name=arch_name,
        )

    for value in (os_name, arch_name):
        if not _is_single_segment(value):
            raise InvalidRequestError(
                f"Invalid platform qualifier: {value}",
                artifact_name=profile.name,
                os_name=os_name,
                arch_name=arch_name,
            )

    return base / os_name / arch_name


def resolve_request(request: ArchiveRequest, *, root: str | Path) -> Path:
    """Resolve an ArchiveRequest against the menu root."""
    return resolve(request.profile, request.os_name, request.arch_name, root=root)
