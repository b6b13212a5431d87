from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import ProfileExistsError, ResourceNotFoundError
from reportverse.core.logging_config import logger
from reportverse.models.mentee_profile import MenteeProfile
from reportverse.models.user import User
from reportverse.schemas.profile import ProfileCreate, ProfileResponse, ProfileUpdate

NESTED_FIELDS = (
    "alumni_family", "father_details", "mother_details",
    "communication_address", "permanent_address",
)
REQUIRED_FIELDS = ("name", "registration_no")


def profile_response(profile: MenteeProfile) -> ProfileResponse:
    return ProfileResponse.model_validate(profile)


def _column_values(data, only_sent: bool) -> dict:
    values = data.model_dump(exclude_unset=only_sent)
    for field in NESTED_FIELDS:
        nested = getattr(data, field, None)
        if field in values:
            values[field] = nested.model_dump(by_alias=True) if nested is not None else None
    return values


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, mentee_id: str) -> Optional[MenteeProfile]:
        result = await self.db.execute(
            select(MenteeProfile).where(MenteeProfile.mentee_id == mentee_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, mentee_id: str) -> MenteeProfile:
        profile = await self.get(mentee_id)
        if profile is None:
            raise ResourceNotFoundError("Profile not found", resource_type="profile")
        return profile

    async def create(self, mentee: User, data: ProfileCreate) -> MenteeProfile:
        if await self.get(mentee.id):
            raise ProfileExistsError()

        profile = MenteeProfile(mentee_id=mentee.id, **_column_values(data, only_sent=False))
        self.db.add(profile)
        mentee.profile_completed = True
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ProfileExistsError()
        await self.db.refresh(profile)

        logger.info(f"Profile created for mentee {mentee.id}", extra={"event_type": "profile"})
        return profile

    async def update(self, mentee: User, data: ProfileUpdate) -> MenteeProfile:
        profile = await self.get_or_404(mentee.id)
        for field, value in _column_values(data, only_sent=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(profile, field, value)
        await self.db.commit()
        await self.db.refresh(profile)
        return profile
