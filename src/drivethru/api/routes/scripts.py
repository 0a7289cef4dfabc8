"""
Install script endpoint.

``curl -s http://<url>/get/<name> | sh`` installs an artifact.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from drivethru.api.dependencies import get_menu
from drivethru.scripts.generator import generate_script

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{name}", response_class=PlainTextResponse)
async def get_script(name: str, request: Request) -> PlainTextResponse:
    """
    Return the install script for an artifact.

    Unknown artifacts, and artifacts whose build directory is missing,
    get a script that prints an error and exits 1.
    """
    return PlainTextResponse(generate_script(get_menu(request), name))
