"""
Reviews API router.
Creation and owner-scoped mutation require a verified principal; listing
is public and embeds each author's username.
"""
from typing import List

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_principal, get_review_service
from app.models.schemas import (
    ErrorResponse,
    MessageResponse,
    Principal,
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReviewWithAuthor,
)
from app.services.reviews import ReviewService

router = APIRouter(tags=["reviews"])

_AUTH_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid parameter or store error"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
}
_OWNER_ERRORS = {
    **_AUTH_ERRORS,
    403: {"model": ErrorResponse, "description": "Not your review"},
    404: {"model": ErrorResponse, "description": "Review not found"},
}


@router.post(
    "/reviews",
    response_model=Review,
    summary="Create Review",
    responses=_AUTH_ERRORS,
)
async def create_review(
    body: ReviewCreate,
    principal: Principal = Depends(get_current_principal),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return await review_service.create(principal, body)


@router.get(
    "/media/{media_id}/reviews",
    response_model=List[ReviewWithAuthor],
    summary="List Reviews For Media",
)
async def list_reviews(
    media_id: str,
    review_service: ReviewService = Depends(get_review_service),
) -> List[ReviewWithAuthor]:
    return await review_service.list_for_media(media_id)


@router.put(
    "/reviews/{review_id}",
    response_model=Review,
    summary="Update Review",
    responses=_OWNER_ERRORS,
)
async def update_review(
    review_id: str,
    body: ReviewUpdate,
    principal: Principal = Depends(get_current_principal),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return await review_service.update(principal, review_id, body)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete Review",
    responses=_OWNER_ERRORS,
)
async def delete_review(
    review_id: str,
    principal: Principal = Depends(get_current_principal),
    review_service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    await review_service.delete(principal, review_id)
    return MessageResponse(message="Review deleted successfully")
