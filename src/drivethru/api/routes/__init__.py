"""
API route handlers.

This package contains all route definitions for the Drivethru API.
"""

from drivethru.api.routes import download, hashes, health, profiles, scripts

__all__ = [
    "download",
    "hashes",
    "health",
    "profiles",
    "scripts",
]
