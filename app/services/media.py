"""
Media service - catalog search, lookup and live enrichment.
"""
import logging
from typing import List, Optional

from app.core.exceptions import InvalidParameterError, NotFoundError
from app.core.pagination import PageWindow, resolve
from app.models.interfaces import MediaRepository
from app.models.schemas import CatalogDetail, MediaDetail, MediaItem, MediaType
from app.services.catalog import CatalogClient

logger = logging.getLogger(__name__)

MEDIA_TYPES = ("movie", "tv")


class MediaService:
    """Read-side access to the catalog."""

    def __init__(
        self,
        media_repo: MediaRepository,
        catalog_client: Optional[CatalogClient] = None,
        default_page: int = 1,
        default_per_page: int = 20,
    ) -> None:
        self._media_repo = media_repo
        self._catalog = catalog_client
        self._default_page = default_page
        self._default_per_page = default_per_page

    def window(self, page: Optional[int], per_page: Optional[int]) -> PageWindow:
        return resolve(
            page,
            per_page,
            default_page=self._default_page,
            default_per_page=self._default_per_page,
        )

    async def search(
        self,
        title: Optional[str] = None,
        media_type: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> List[MediaItem]:
        """
        Paginated catalog search.

        Args:
            title: Case-insensitive substring of the title
            media_type: 'movie' or 'tv'
            page: 1-based page (default 1)
            per_page: Page size (default 20)
        """
        if media_type is not None and media_type not in MEDIA_TYPES:
            raise InvalidParameterError.for_fields(["type"])

        window = self.window(page, per_page)
        items = await self._media_repo.search(
            window, title=title or None, media_type=media_type
        )
        logger.info(
            f"Media search: title={title!r}, type={media_type}, "
            f"window=[{window.start},{window.end}], items={len(items)}"
        )
        return items

    async def get(self, media_id: str) -> MediaItem:
        item = await self._media_repo.get(media_id)
        if item is None:
            raise NotFoundError("Media", media_id)
        return item

    async def external_detail(self, media_type: MediaType, external_id: int) -> CatalogDetail:
        """Proxy one title's detail from the external catalog."""
        return await self._require_catalog().get_details(media_type, external_id)

    async def enrich(self, media_id: str) -> MediaDetail:
        """Stored item plus live detail from the external catalog."""
        item = await self.get(media_id)
        details = await self._require_catalog().enrich(item)
        return MediaDetail(media=item, details=details)

    def _require_catalog(self) -> CatalogClient:
        if self._catalog is None:
            raise RuntimeError("Catalog client is not configured")
        return self._catalog
