"""
Drivethru - On-demand artifact delivery.

Serves versioned build artifacts to remote machines as streamed tar/gzip
archives, content hashes and generated install scripts.
"""

__version__ = "0.1.0"

# API module is available but not exported by default
# Import explicitly: from drivethru.api import create_app

__all__ = ["__version__"]
