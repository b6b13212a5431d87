from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import AuthorizationError, UnassignedMenteeError, ValidationError
from reportverse.core.logging_config import logger
from reportverse.core.types import as_naive_utc, utcnow
from reportverse.models.achievement import Achievement, AchievementPosition, AchievementType
from reportverse.models.user import User
from reportverse.schemas.achievement import AchievementCreate
from reportverse.services.identity_service import IdentityService

SORT_FIELDS = {
    "dateOfAchievement": Achievement.date_of_achievement.asc(),
    "-dateOfAchievement": Achievement.date_of_achievement.desc(),
    "createdAt": Achievement.created_at.asc(),
    "-createdAt": Achievement.created_at.desc(),
}
DEFAULT_SORT = "-dateOfAchievement"


def _parse_enum(enum_cls, value: Optional[str], field: str):
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}", field=field)


class AchievementService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.identity = IdentityService(db)

    async def _insert(self, mentee_id: str, mentor_id: str, data: AchievementCreate) -> Achievement:
        achievement = Achievement(
            mentee_id=mentee_id,
            mentor_id=mentor_id,
            type=data.type,
            position=data.position,
            description=data.description,
            date_of_achievement=as_naive_utc(data.date_of_achievement) or utcnow(),
            is_completed=data.is_completed,
        )
        self.db.add(achievement)
        await self.db.commit()
        await self.db.refresh(achievement, attribute_names=["mentee"])
        logger.info(
            f"Achievement {achievement.id} logged for mentee {mentee_id}",
            extra={"event_type": "achievement", "mentee_id": mentee_id, "mentor_id": mentor_id}
        )
        return achievement

    async def create(self, mentee: User, data: AchievementCreate) -> Achievement:
        mentor_id = await self.identity.get_assigned_mentor_id(mentee.id)
        if mentor_id is None:
            raise UnassignedMenteeError()
        return await self._insert(mentee.id, mentor_id, data)

    async def create_for_mentee(self, mentor: User, mentee_id: str, data: AchievementCreate) -> Achievement:
        if not await self.identity.is_in_roster(mentor.id, mentee_id):
            raise AuthorizationError("Not authorized to log achievements for this mentee")
        return await self._insert(mentee_id, mentor.id, data)

    async def list_for_mentee(self, mentee_id: str) -> List[Achievement]:
        result = await self.db.execute(
            select(Achievement)
            .where(Achievement.mentee_id == mentee_id)
            .order_by(Achievement.date_of_achievement.desc())
        )
        return list(result.scalars().all())

    async def list_for_mentor(
        self,
        mentor_id: str,
        type: Optional[str] = None,
        position: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[Achievement]:
        query = select(Achievement).where(Achievement.mentor_id == mentor_id)

        achievement_type = _parse_enum(AchievementType, type, "type")
        if achievement_type is not None:
            query = query.where(Achievement.type == achievement_type)

        achievement_position = _parse_enum(AchievementPosition, position, "position")
        if achievement_position is not None:
            query = query.where(Achievement.position == achievement_position)

        sort = sort or DEFAULT_SORT
        if sort not in SORT_FIELDS:
            raise ValidationError(f"Invalid sort: {sort}", field="sort")

        result = await self.db.execute(query.order_by(SORT_FIELDS[sort]))
        return list(result.scalars().all())
