"""
Download endpoints.

Streams the gzip-compressed tar archive of an artifact. The archive is
produced on a background thread and handed over chunk by chunk, so no
archive is ever buffered whole and no Content-Length is sent.
"""

import logging
from typing import Iterator

from fastapi import APIRouter, Request, Response
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from drivethru.api.dependencies import get_delivery
from drivethru.archive.sinks import StreamPipe
from drivethru.core.exceptions import (
    ArchiveError,
    InvalidRequestError,
    SourceNotFoundError,
    UnknownArtifactError,
)
from drivethru.delivery import DeliveryService, ResolvedArtifact

router = APIRouter()
logger = logging.getLogger(__name__)

ARCHIVE_MEDIA_TYPE = "application/gzip"


def _iter_archive(pipe: StreamPipe, first: bytes, artifact: ResolvedArtifact) -> Iterator[bytes]:
    """
    Yield the rest of the archive after the first chunk.

    The status line is already sent at this point, so a failure can only
    be logged; the client sees a truncated archive.
    """
    try:
        yield first
        for chunk in pipe:
            yield chunk
    except ArchiveError as e:
        logger.error(f"Download of {artifact.profile.name} truncated: {e}")
    finally:
        # Aborts the producer if the client went away
        pipe.close()


async def _download(
    service: DeliveryService,
    name: str,
    os_name: str | None = None,
    arch_name: str | None = None,
) -> Response:
    try:
        artifact = service.resolve(name, os_name, arch_name)
    except UnknownArtifactError as e:
        logger.warning(str(e))
        return Response(status_code=404)
    except InvalidRequestError as e:
        logger.error(str(e))
        return Response(status_code=400)

    pipe = service.start_download(artifact)
    try:
        first = await run_in_threadpool(pipe.read)
    except SourceNotFoundError as e:
        logger.error(str(e))
        return Response(status_code=500)
    except ArchiveError as e:
        logger.error(f"Download of {name} failed: {e}")
        return Response(status_code=500)

    if not first:
        return Response(status_code=200, media_type=ARCHIVE_MEDIA_TYPE)

    return StreamingResponse(
        _iter_archive(pipe, first, artifact),
        media_type=ARCHIVE_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.archive_filename}"',
        },
    )


@router.get("/{name}")
async def download_universal(
    name: str,
    request: Request,
) -> Response:
    """
    Download the archive of an artifact without platform qualifiers.

    Only universal profiles resolve without qualifiers; any other profile
    answers 400.
    """
    return await _download(get_delivery(request), name)


@router.get("/{name}/{os_name}/{arch_name}")
async def download_platform(
    name: str,
    os_name: str,
    arch_name: str,
    request: Request,
) -> Response:
    """
    Download the archive of an artifact for one OS and architecture.

    ``x86_64`` is served from the ``amd64`` build directory.

    Returns:
        200 with a streamed tar.gz body, 404 for unknown artifacts,
        400 for invalid qualifiers, 500 with no body if the build is missing
    """
    return await _download(get_delivery(request), name, os_name, arch_name)
