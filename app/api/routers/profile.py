"""
Profile API router. Always operates on the caller's own profile.
"""
from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_principal, get_profile_service
from app.models.schemas import ErrorResponse, Principal, Profile, ProfileUpdate
from app.services.profiles import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])

_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    404: {"model": ErrorResponse, "description": "Profile not found"},
}


@router.get("", response_model=Profile, summary="Get Own Profile", responses=_ERRORS)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Profile:
    return await profile_service.get(principal)


@router.put("", response_model=Profile, summary="Update Own Profile", responses=_ERRORS)
async def update_profile(
    body: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Profile:
    return await profile_service.update(principal, body)
