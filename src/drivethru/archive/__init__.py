"""
Drivethru Archive Module.

Resolves artifact source paths and streams them as tar/gzip archives
to any writable sink.
"""

from .resolver import ARCH_ALIASES, normalize_arch, resolve, resolve_request
from .sinks import ArchiveSink, CountingWriter, DigestSink, StreamPipe
from .streamer import ArchiveStreamer, ArchiveSummary, archive_base_dir, stream_archive

__all__ = [
    # Resolver
    "ARCH_ALIASES",
    "normalize_arch",
    "resolve",
    "resolve_request",
    # Sinks
    "ArchiveSink",
    "CountingWriter",
    "DigestSink",
    "StreamPipe",
    # Streamer
    "ArchiveStreamer",
    "ArchiveSummary",
    "archive_base_dir",
    "stream_archive",
]
