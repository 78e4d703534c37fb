"""
Media API router.
Catalog search (paginated), single-item lookup, and external catalog detail.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.api.dependencies import get_media_service
from app.models.schemas import CatalogDetail, ErrorResponse, MediaDetail, MediaItem
from app.services.media import MediaService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["media"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid parameter or store error"},
}


@router.get(
    "/media/search",
    response_model=List[MediaItem],
    summary="Search Media",
    description="""
    Search the catalog by case-insensitive title substring and exact type.

    Pagination is page/per_page based: page N of size S returns the rows at
    offsets [(N-1)*S, N*S-1]. A page shorter than per_page is the last one.
    """,
    responses=_ERRORS,
)
async def search_media(
    title: Optional[str] = Query(default=None, description="Title substring"),
    type: Optional[str] = Query(default=None, description="'movie' or 'tv'"),
    page: Optional[int] = Query(default=None, description="1-based page (default 1)"),
    per_page: Optional[int] = Query(default=None, description="Page size (default 20)"),
    media_service: MediaService = Depends(get_media_service),
) -> List[MediaItem]:
    return await media_service.search(
        title=title, media_type=type, page=page, per_page=per_page
    )


@router.get(
    "/movies/search",
    response_model=List[MediaItem],
    summary="Search Movies",
    responses=_ERRORS,
)
async def search_movies(
    title: Optional[str] = Query(default=None),
    page: Optional[int] = Query(default=None),
    per_page: Optional[int] = Query(default=None),
    media_service: MediaService = Depends(get_media_service),
) -> List[MediaItem]:
    return await media_service.search(
        title=title, media_type="movie", page=page, per_page=per_page
    )


@router.get(
    "/tv/search",
    response_model=List[MediaItem],
    summary="Search TV Shows",
    responses=_ERRORS,
)
async def search_tv(
    title: Optional[str] = Query(default=None),
    page: Optional[int] = Query(default=None),
    per_page: Optional[int] = Query(default=None),
    media_service: MediaService = Depends(get_media_service),
) -> List[MediaItem]:
    return await media_service.search(
        title=title, media_type="tv", page=page, per_page=per_page
    )


@router.get(
    "/movies/external/{external_id}",
    response_model=CatalogDetail,
    summary="External Movie Detail",
    description="Live movie detail (credits, videos) from the external catalog.",
    responses={500: {"model": ErrorResponse, "description": "Catalog lookup failed"}},
)
async def external_movie(
    external_id: int = Path(..., ge=1),
    media_service: MediaService = Depends(get_media_service),
) -> CatalogDetail:
    return await media_service.external_detail("movie", external_id)


@router.get(
    "/tv/external/{external_id}",
    response_model=CatalogDetail,
    summary="External TV Detail",
    description="Live TV detail (credits, videos) from the external catalog.",
    responses={500: {"model": ErrorResponse, "description": "Catalog lookup failed"}},
)
async def external_tv(
    external_id: int = Path(..., ge=1),
    media_service: MediaService = Depends(get_media_service),
) -> CatalogDetail:
    return await media_service.external_detail("tv", external_id)


@router.get(
    "/media/{media_id}",
    response_model=MediaItem,
    summary="Get Media",
    responses={404: {"model": ErrorResponse, "description": "Media not found"}},
)
async def get_media(
    media_id: str,
    media_service: MediaService = Depends(get_media_service),
) -> MediaItem:
    return await media_service.get(media_id)


@router.get(
    "/media/{media_id}/details",
    response_model=MediaDetail,
    summary="Get Enriched Media",
    description="Stored media item plus live detail from the external catalog.",
    responses={
        404: {"model": ErrorResponse, "description": "Media not found"},
        500: {"model": ErrorResponse, "description": "Catalog lookup failed"},
    },
)
async def get_media_details(
    media_id: str,
    media_service: MediaService = Depends(get_media_service),
) -> MediaDetail:
    return await media_service.enrich(media_id)
