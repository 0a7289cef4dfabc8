"""
Drivethru API Module.

HTTP endpoints for archive downloads, archive hashes and install scripts.
"""

from drivethru.api.app import create_app

__all__ = ["create_app"]
