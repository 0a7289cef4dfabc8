"""
Archive streaming.

Walks a file or directory and writes a tar stream, optionally wrapped in
gzip, straight to a sink. Nothing is staged on disk and at most one
source file is open at a time, so the same walk can feed an HTTP
response, a digest or a file.
"""

import gzip
import logging
import os
import stat
import tarfile
import threading
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator

from drivethru.archive.sinks import ArchiveSink, CountingWriter, StreamPipe
from drivethru.core.exceptions import ArchiveError, SourceNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_COMPRESSLEVEL = 9


@dataclass(frozen=True)
class ArchiveSummary:
    """Result of a completed archive stream."""

    archive_name: str
    source_path: str
    entries: int
    bytes_written: int
    compressed: bool


def archive_base_dir(archive_name: str) -> str:
    """Return the directory entries are rehomed under: the name's last segment."""
    return PurePosixPath(archive_name).name


def _walk(path: Path) -> Iterator[Path]:
    """Yield path and everything below it, parents first, children by name."""
    yield path
    if path.is_dir() and not path.is_symlink():
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
        for name in names:
            yield from _walk(path / name)


class ArchiveStreamer:
    """
    Stateless tar/gzip producer.

    One instance can serve any number of concurrent calls; every call
    builds its own encoders and opens its own file handles.

    Args:
        compresslevel: gzip compression level (0-9)
    """

    def __init__(self, compresslevel: int = DEFAULT_COMPRESSLEVEL):
        self._compresslevel = compresslevel

    def stream(
        self,
        source_path: str | Path,
        archive_name: str,
        sink: ArchiveSink,
        compress: bool = True,
    ) -> ArchiveSummary:
        """
        Write an archive of source_path to sink.

        Directory sources are rehomed: every entry is stored under a
        top-level directory named after the last segment of archive_name.
        A single-file source is stored under its own file name.

        The gzip header carries archive_name and a zero timestamp, and
        directory children are visited in name order, so a static source
        always produces identical bytes.

        Args:
            source_path: File or directory to archive
            archive_name: Artifact name, used for rehoming and gzip metadata
            sink: Destination with a ``write`` method; never closed here
            compress: Wrap the tar stream in gzip

        Returns:
            ArchiveSummary for the completed stream

        Raises:
            SourceNotFoundError: source_path is missing or unreadable;
                nothing was written to sink
            ArchiveError: The walk, a sink write, or an encoder close failed;
                ``bytes_written`` reports how much output reached sink
        """
        source_path = Path(source_path)
        try:
            root_stat = source_path.stat()
        except OSError as e:
            raise SourceNotFoundError(
                f"Source not found: {e.strerror or e}",
                artifact_name=archive_name,
                path=str(source_path),
            ) from e

        # A symlinked root is archived as what it points to
        file_name = source_path.name
        source_path = source_path.resolve()
        is_dir = stat.S_ISDIR(root_stat.st_mode)
        base_dir = archive_base_dir(archive_name) if is_dir else None

        counter = CountingWriter(sink)
        gz: gzip.GzipFile | None = None
        tar: tarfile.TarFile | None = None
        error: ArchiveError | None = None
        entries = 0
        current = source_path

        try:
            if compress:
                gz = gzip.GzipFile(
                    filename=archive_name,
                    mode="wb",
                    compresslevel=self._compresslevel,
                    fileobj=counter,
                    mtime=0,
                )
            tar = tarfile.open(fileobj=gz if gz is not None else counter, mode="w|")

            for current in _walk(source_path):
                if base_dir is None:
                    arcname = file_name
                else:
                    relative = current.relative_to(source_path)
                    arcname = PurePosixPath(base_dir, *relative.parts).as_posix()
                self._add_entry(tar, current, arcname)
                entries += 1
        except (OSError, tarfile.TarError) as e:
            error = ArchiveError(
                f"Archive stream failed: {e}",
                artifact_name=archive_name,
                path=str(current),
                bytes_written=counter.bytes_written,
            )
        finally:
            # Trailers are written even after a failure
            for encoder in (tar, gz):
                if encoder is None:
                    continue
                try:
                    encoder.close()
                except (OSError, tarfile.TarError) as e:
                    if error is None:
                        error = ArchiveError(
                            f"Closing archive stream failed: {e}",
                            artifact_name=archive_name,
                            path=str(source_path),
                            bytes_written=counter.bytes_written,
                        )
                    else:
                        logger.debug(f"Ignoring close failure after earlier error: {e}")

        if error is not None:
            error.bytes_written = counter.bytes_written
            error.details["bytes_written"] = counter.bytes_written
            raise error

        logger.debug(
            f"Archived {entries} entries from {source_path} "
            f"({counter.bytes_written} bytes)"
        )
        return ArchiveSummary(
            archive_name=archive_name,
            source_path=str(source_path),
            entries=entries,
            bytes_written=counter.bytes_written,
            compressed=compress,
        )

    def _add_entry(self, tar: tarfile.TarFile, path: Path, arcname: str) -> None:
        """Write the header, and body for regular files, of one entry."""
        tarinfo = tar.gettarinfo(str(path), arcname=arcname)
        if tarinfo is None:
            # Sockets have no tar representation
            logger.debug(f"Skipping unsupported file type: {path}")
            return
        tarinfo.mtime = int(tarinfo.mtime)

        if not tarinfo.isreg():
            tar.addfile(tarinfo)
            return

        with open(path, "rb") as f:
            tar.addfile(tarinfo, f)

    def stream_to_pipe(
        self,
        source_path: str | Path,
        archive_name: str,
        compress: bool = True,
        *,
        max_chunks: int = 16,
    ) -> StreamPipe:
        """
        Run ``stream`` on a background thread feeding a StreamPipe.

        The pipe ends with the stream's error, if any. Closing the pipe
        from the consumer side aborts the walk at its next write.
        """
        pipe = StreamPipe(max_chunks=max_chunks)

        def produce() -> None:
            try:
                self.stream(source_path, archive_name, pipe, compress=compress)
            except Exception as e:
                # Re-raised on the consuming side
                pipe.finish(e)
            else:
                pipe.finish()

        thread = threading.Thread(
            target=produce, name=f"drivethru-stream-{archive_name}", daemon=True
        )
        thread.start()
        return pipe


def stream_archive(
    source_path: str | Path,
    archive_name: str,
    sink: ArchiveSink,
    compress: bool = True,
) -> ArchiveSummary:
    """Stream an archive with a default ArchiveStreamer."""
    return ArchiveStreamer().stream(source_path, archive_name, sink, compress=compress)
