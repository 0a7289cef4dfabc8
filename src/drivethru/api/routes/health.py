"""
Health check endpoints.

Provides health status and version information for the API.
"""

import logging
import os
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from drivethru import __version__
from drivethru.api.dependencies import get_menu
from drivethru.api.schemas.responses import HealthResponse
from drivethru.core.models import Menu

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Report service health.

    The service is degraded when the build root is missing, since every
    download would then fail.
    """
    menu: Menu = get_menu(request)
    components: dict[str, str] = {"profiles": f"healthy ({len(menu.profiles)} profiles)"}
    overall_status = "healthy"

    if os.path.isdir(menu.root):
        components["root"] = "healthy"
    else:
        components["root"] = f"unhealthy: {menu.root} does not exist"
        overall_status = "degraded"
        logger.warning(f"Build root missing: {menu.root}")

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        components=components,
    )


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness check; always succeeds while the process is up."""
    return {
        "alive": "true",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
