"""
Hash endpoints.

Return the hex digest of the exact compressed archive ``/download``
would stream for the same request.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from drivethru.api.dependencies import get_delivery
from drivethru.core.exceptions import DrivethruError, UnknownArtifactError
from drivethru.delivery import DeliveryService

router = APIRouter()
logger = logging.getLogger(__name__)


async def _hash(
    service: DeliveryService,
    name: str,
    os_name: str | None = None,
    arch_name: str | None = None,
) -> PlainTextResponse:
    try:
        artifact = service.resolve(name, os_name, arch_name)
        digest = await run_in_threadpool(service.compute_hash, artifact)
    except UnknownArtifactError as e:
        logger.warning(str(e))
        return PlainTextResponse(e.message, status_code=404)
    except DrivethruError as e:
        logger.error(str(e))
        return PlainTextResponse(e.message, status_code=500)

    return PlainTextResponse(digest)


@router.get("/{name}", response_class=PlainTextResponse)
async def hash_universal(
    name: str,
    request: Request,
) -> PlainTextResponse:
    """Digest of a universal artifact's archive."""
    return await _hash(get_delivery(request), name)


@router.get("/{name}/{os_name}/{arch_name}", response_class=PlainTextResponse)
async def hash_platform(
    name: str,
    os_name: str,
    arch_name: str,
    request: Request,
) -> PlainTextResponse:
    """Digest of an artifact's archive for one OS and architecture."""
    return await _hash(get_delivery(request), name, os_name, arch_name)
