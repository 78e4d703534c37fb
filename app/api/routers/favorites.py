"""
Favorites API router. All routes act on the caller's own favorites.
"""
from typing import List

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_principal, get_favorite_service
from app.models.schemas import (
    ErrorResponse,
    Favorite,
    FavoriteCreate,
    FavoriteWithMedia,
    MessageResponse,
    Principal,
)
from app.services.favorites import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid parameter or store error"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
}


@router.post(
    "",
    response_model=Favorite,
    summary="Add Favorite",
    description="Idempotent: favoriting the same media twice returns the existing row.",
    responses=_ERRORS,
)
async def add_favorite(
    body: FavoriteCreate,
    principal: Principal = Depends(get_current_principal),
    favorite_service: FavoriteService = Depends(get_favorite_service),
) -> Favorite:
    return await favorite_service.add(principal, body)


@router.get(
    "",
    response_model=List[FavoriteWithMedia],
    summary="List Favorites",
    responses=_ERRORS,
)
async def list_favorites(
    principal: Principal = Depends(get_current_principal),
    favorite_service: FavoriteService = Depends(get_favorite_service),
) -> List[FavoriteWithMedia]:
    return await favorite_service.list(principal)


@router.delete(
    "/{media_id}",
    response_model=MessageResponse,
    summary="Remove Favorite",
    description="Idempotent: removing a favorite that does not exist still succeeds.",
    responses=_ERRORS,
)
async def remove_favorite(
    media_id: str,
    principal: Principal = Depends(get_current_principal),
    favorite_service: FavoriteService = Depends(get_favorite_service),
) -> MessageResponse:
    await favorite_service.remove(principal, media_id)
    return MessageResponse(message="Favorite removed successfully")
