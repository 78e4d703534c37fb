"""
Profile service. A principal can only read or change its own profile.
"""
from app.core.exceptions import NotFoundError
from app.models.interfaces import ProfileRepository
from app.models.schemas import Principal, Profile, ProfileUpdate


class ProfileService:

    def __init__(self, profile_repo: ProfileRepository) -> None:
        self._profile_repo = profile_repo

    async def get(self, principal: Principal) -> Profile:
        profile = await self._profile_repo.get(principal.id)
        if profile is None:
            raise NotFoundError("Profile", principal.id)
        return profile

    async def update(self, principal: Principal, body: ProfileUpdate) -> Profile:
        profile = await self._profile_repo.update(principal.id, body.username)
        if profile is None:
            raise NotFoundError("Profile", principal.id)
        return profile
