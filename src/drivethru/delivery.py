"""
Delivery service.

Ties profile lookup, path resolution and archive streaming together for
the download and hash endpoints and the CLI. Both delivery paths run the
same ArchiveStreamer walk with compression on, so a hash always describes
exactly the bytes a download would send.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from drivethru.archive.resolver import normalize_arch, resolve
from drivethru.archive.sinks import ArchiveSink, DigestSink, StreamPipe
from drivethru.archive.streamer import ArchiveStreamer, ArchiveSummary
from drivethru.core.models import ArtifactProfile, Menu

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedArtifact:
    """A profile together with the source path a request resolved to."""

    profile: ArtifactProfile
    source_path: Path
    os_name: str | None = None
    arch_name: str | None = None

    @property
    def archive_filename(self) -> str:
        return f"{self.profile.name}.tar.gz"


class DeliveryService:
    """
    Resolves requests against a Menu and streams the matching archive.

    Args:
        menu: Loaded, immutable menu
        streamer: ArchiveStreamer to use (creates default if None)
    """

    def __init__(self, menu: Menu, streamer: ArchiveStreamer | None = None):
        self._menu = menu
        self._streamer = streamer or ArchiveStreamer()

    @property
    def menu(self) -> Menu:
        return self._menu

    def resolve(
        self, name: str, os_name: str | None = None, arch_name: str | None = None
    ) -> ResolvedArtifact:
        """
        Look up a profile and compute its source path.

        Raises:
            UnknownArtifactError: If no profile has that name
            InvalidRequestError: If qualifiers are missing or malformed
        """
        arch_name = normalize_arch(arch_name)
        logger.info(f"Request for: {name}, OS: {os_name}, Arch: {arch_name}")

        profile = self._menu.get_profile(name)
        source_path = resolve(profile, os_name, arch_name, root=self._menu.root)

        logger.info(f"Request file source: {source_path}")
        return ResolvedArtifact(
            profile=profile,
            source_path=source_path,
            os_name=os_name,
            arch_name=arch_name,
        )

    def write_archive(
        self, artifact: ResolvedArtifact, sink: ArchiveSink, compress: bool = True
    ) -> ArchiveSummary:
        """Stream the artifact's archive into sink."""
        return self._streamer.stream(
            artifact.source_path, artifact.profile.name, sink, compress=compress
        )

    def start_download(self, artifact: ResolvedArtifact) -> StreamPipe:
        """Start streaming the compressed archive on a background thread."""
        return self._streamer.stream_to_pipe(artifact.source_path, artifact.profile.name)

    def compute_hash(self, artifact: ResolvedArtifact) -> str:
        """
        Return the hex digest of the compressed archive.

        Raises:
            SourceNotFoundError: If the source path does not exist
            ArchiveError: If the archive walk fails
        """
        sink = DigestSink(self._menu.hash_algorithm)
        self.write_archive(artifact, sink, compress=True)
        digest = sink.hexdigest()
        logger.info(f"Returned hash: {digest} for file source: {artifact.source_path}")
        return digest
