"""
Profile listing endpoint.
"""

from fastapi import APIRouter, Request

from drivethru.api.dependencies import get_menu
from drivethru.api.schemas.responses import ProfileListResponse, ProfileResponse

router = APIRouter()


@router.get("", response_model=ProfileListResponse)
async def list_profiles(request: Request) -> ProfileListResponse:
    """List configured artifact profiles in registry order."""
    menu = get_menu(request)
    profiles = [ProfileResponse.from_profile(p) for p in menu.profiles]
    return ProfileListResponse(profiles=profiles, total=len(profiles))
