from sqlalchemy import Column, Boolean, DateTime, Enum as SQLEnum, Text, ForeignKey
from sqlalchemy.orm import relationship
import enum

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class AchievementType(str, enum.Enum):
    SPORTS = "Sports"
    COMPETITIVE_EXAM = "Competitive Exam"
    INTERNSHIP = "Internship"
    RESEARCH_PUBLICATION = "Research Publication"
    AWARD = "Award"
    CULTURAL_EVENT = "Cultural Event"
    TECHNICAL_EVENT = "Technical Event"
    HACKATHON = "Hackathon"
    OTHER = "Other"


class AchievementPosition(str, enum.Enum):
    FIRST = "1st"
    SECOND = "2nd"
    THIRD = "3rd"
    PARTICIPATION = "Participation"
    WINNER = "Winner"
    RUNNER_UP = "Runner-up"
    COMPLETED = "Completed"
    PUBLISHED = "Published"
    NOT_APPLICABLE = "N/A"


class Achievement(Base):
    """Achievement logged for a mentee. Read-only once created."""
    __tablename__ = "achievements"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    mentee_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(SQLEnum(AchievementType), nullable=False)
    position = Column(SQLEnum(AchievementPosition), default=AchievementPosition.NOT_APPLICABLE, nullable=False)
    description = Column(Text, nullable=False)
    date_of_achievement = Column(DateTime, default=utcnow, nullable=False)
    is_completed = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    mentee = relationship("User", foreign_keys=[mentee_id], lazy="selectin")
