from pydantic import Field, field_serializer
from typing import Optional
from datetime import datetime

from reportverse.models.achievement import AchievementPosition, AchievementType
from reportverse.schemas.common import CamelModel, UserRef, iso, user_ref


class AchievementCreate(CamelModel):
    type: AchievementType
    position: AchievementPosition = AchievementPosition.NOT_APPLICABLE
    description: str = Field(..., min_length=1)
    date_of_achievement: Optional[datetime] = None
    is_completed: bool = True


class MentorAchievementCreate(AchievementCreate):
    mentee_id: str


class AchievementResponse(CamelModel):
    id: str
    mentee: UserRef
    mentor_id: str
    type: str
    position: str
    description: str
    date_of_achievement: datetime
    is_completed: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer("date_of_achievement", "created_at", "updated_at")
    def serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return iso(value)


def achievement_response(achievement) -> AchievementResponse:
    return AchievementResponse(
        id=achievement.id,
        mentee=user_ref(achievement.mentee),
        mentor_id=achievement.mentor_id,
        type=achievement.type.value,
        position=achievement.position.value,
        description=achievement.description,
        date_of_achievement=achievement.date_of_achievement,
        is_completed=achievement.is_completed,
        created_at=achievement.created_at,
        updated_at=achievement.updated_at,
    )
