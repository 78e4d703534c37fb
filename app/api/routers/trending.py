"""
Trending API router. Newest first, capped at 20 entries.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_trending_service
from app.models.schemas import TrendingWithMedia
from app.services.trending import TrendingService

router = APIRouter(tags=["trending"])


@router.get(
    "/trending",
    response_model=List[TrendingWithMedia],
    summary="List Trending",
    description="Trending entries with embedded media. Paging parameters are ignored.",
)
async def list_trending(
    type: Optional[str] = Query(default=None, description="Trending type filter"),
    trending_service: TrendingService = Depends(get_trending_service),
) -> List[TrendingWithMedia]:
    return await trending_service.list(trending_type=type)
