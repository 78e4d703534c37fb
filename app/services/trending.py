"""
Trending service - newest-first trending entries with embedded media,
never more than the configured cap.
"""
from typing import List, Optional

from app.models.interfaces import TrendingRepository
from app.models.schemas import TrendingWithMedia

TRENDING_LIMIT = 20


class TrendingService:

    def __init__(self, trending_repo: TrendingRepository, limit: int = TRENDING_LIMIT) -> None:
        self._trending_repo = trending_repo
        self._limit = max(1, min(limit, TRENDING_LIMIT))

    async def list(self, trending_type: Optional[str] = None) -> List[TrendingWithMedia]:
        entries = await self._trending_repo.list(self._limit, trending_type=trending_type or None)
        return entries[:self._limit]
