"""
Install script generation.
"""

import logging
import os

from drivethru.core.exceptions import UnknownArtifactError
from drivethru.core.models import ArtifactProfile, Menu
from drivethru.scripts.templates import ERROR_SCRIPT, INSTALL_SCRIPT, PLATFORM_DETECTION

logger = logging.getLogger(__name__)

_INDENT = " " * 8


def download_url(menu: Menu, profile: ArtifactProfile) -> str:
    """Return the download URL an install script fetches."""
    if profile.universal:
        return f"http://{menu.url}/download/{profile.name}/"
    return f"http://{menu.url}/download/{profile.name}/$OS/$ARCH/"


def chain_install_commands(menu: Menu, profile: ArtifactProfile) -> str:
    """Return one indented ``curl | sh`` line per extra artifact."""
    return "".join(
        f"{_INDENT}curl -s http://{menu.url}/get/{extra} | sh\n" for extra in profile.extra
    )


def render_install_script(profile: ArtifactProfile, menu: Menu) -> str:
    """Render the install script for a known profile."""
    return INSTALL_SCRIPT.render(
        {
            "name": profile.name,
            "platform_detection": "" if profile.universal else PLATFORM_DETECTION,
            "download_url": download_url(menu, profile),
            "destination": profile.destination,
            "chain_install": chain_install_commands(menu, profile),
            "github": profile.github,
        }
    )


def render_error_script(name: str) -> str:
    """Render the script served when no install script can be built."""
    return ERROR_SCRIPT.render({"name": name})


def generate_script(menu: Menu, name: str) -> str:
    """
    Build the install script for an artifact name.

    Unknown names, and profiles whose source directory is missing, get
    the error script instead.
    """
    try:
        profile = menu.get_profile(name)
    except UnknownArtifactError:
        logger.warning(f"Script requested for unknown artifact: {name}")
        return render_error_script(name)

    source = menu.source_root(profile)
    if not os.path.exists(source):
        logger.error(f"Source missing for {name}: {source}")
        return render_error_script(name)

    return render_install_script(profile, menu)
