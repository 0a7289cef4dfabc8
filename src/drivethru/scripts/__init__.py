"""
Drivethru install script generation.
"""

from drivethru.scripts.generator import (
    download_url,
    generate_script,
    render_error_script,
    render_install_script,
)
from drivethru.scripts.templates import ERROR_SCRIPT, INSTALL_SCRIPT, ScriptTemplate

__all__ = [
    "ScriptTemplate",
    "INSTALL_SCRIPT",
    "ERROR_SCRIPT",
    "download_url",
    "generate_script",
    "render_error_script",
    "render_install_script",
]
