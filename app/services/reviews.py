"""
Review service - create, list, and owner-scoped update/delete.

Update and delete are fetch -> authorize -> conditional mutate. The mutate is
conditioned on both id and owner, so a row removed between the fetch and the
mutate shows up as not found rather than being touched.
"""
import logging
from typing import List

from app.core.authorization import authorize_mutation
from app.core.exceptions import InvalidParameterError, NotFoundError
from app.models.interfaces import ReviewRepository
from app.models.schemas import (
    Principal,
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReviewWithAuthor,
)

logger = logging.getLogger(__name__)

NOT_YOUR_REVIEW = "Unauthorized: Not your review"


class ReviewService:

    def __init__(self, review_repo: ReviewRepository) -> None:
        self._review_repo = review_repo

    async def create(self, principal: Principal, body: ReviewCreate) -> Review:
        review = await self._review_repo.create(
            user_id=principal.id,
            media_id=body.media_id,
            rating=body.rating,
            review_text=body.review_text,
        )
        logger.info(
            f"Review created: id={review.id}, media={review.media_id}",
            extra={"principal_id": principal.id},
        )
        return review

    async def list_for_media(self, media_id: str) -> List[ReviewWithAuthor]:
        return await self._review_repo.list_for_media(media_id)

    async def update(
        self, principal: Principal, review_id: str, body: ReviewUpdate
    ) -> Review:
        changes = body.changes()
        if not changes:
            raise InvalidParameterError.for_fields(["rating", "review_text"])

        await self._authorize(principal, review_id)

        updated = await self._review_repo.update(review_id, principal.id, changes)
        if updated is None:
            # Deleted (or re-owned) after the ownership check
            raise NotFoundError("Review", review_id)
        return updated

    async def delete(self, principal: Principal, review_id: str) -> None:
        await self._authorize(principal, review_id)

        if not await self._review_repo.delete(review_id, principal.id):
            raise NotFoundError("Review", review_id)
        logger.info(
            f"Review deleted: id={review_id}",
            extra={"principal_id": principal.id},
        )

    async def _authorize(self, principal: Principal, review_id: str) -> Review:
        stored = await self._review_repo.get(review_id)
        if stored is None:
            raise NotFoundError("Review", review_id)
        authorize_mutation(principal, stored.user_id, message=NOT_YOUR_REVIEW)
        return stored
