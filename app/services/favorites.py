"""
Favorites service.

Every query is scoped to the verified principal's id, so a principal can
only ever add, list or remove its own favorites. Adding an existing pair
returns the stored row; removing a missing pair is not an error.
"""
import logging
from typing import List

from app.models.interfaces import FavoriteRepository
from app.models.schemas import Favorite, FavoriteCreate, FavoriteWithMedia, Principal

logger = logging.getLogger(__name__)


class FavoriteService:

    def __init__(self, favorite_repo: FavoriteRepository) -> None:
        self._favorite_repo = favorite_repo

    async def add(self, principal: Principal, body: FavoriteCreate) -> Favorite:
        return await self._favorite_repo.add(principal.id, body.media_id)

    async def list(self, principal: Principal) -> List[FavoriteWithMedia]:
        return await self._favorite_repo.list_for_user(principal.id)

    async def remove(self, principal: Principal, media_id: str) -> int:
        removed = await self._favorite_repo.remove(principal.id, media_id)
        logger.info(
            f"Favorite remove: media={media_id}, rows={removed}",
            extra={"principal_id": principal.id},
        )
        return removed
