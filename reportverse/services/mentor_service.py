"""
Mentor-side roster views: who is on my roster and what have they filed
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import AuthorizationError, ResourceNotFoundError
from reportverse.models.mentee_profile import MenteeProfile
from reportverse.models.mentor_assignment import MentorAssignment
from reportverse.models.user import User, UserRole
from reportverse.schemas.dashboard import MenteeSummary


class MentorService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_mentees(self, mentor_id: str) -> List[MenteeSummary]:
        result = await self.db.execute(
            select(User, MenteeProfile)
            .join(MentorAssignment, MentorAssignment.mentee_id == User.id)
            .outerjoin(MenteeProfile, MenteeProfile.mentee_id == User.id)
            .where(MentorAssignment.mentor_id == mentor_id)
            .order_by(MentorAssignment.assigned_at)
        )
        return [
            MenteeSummary(
                id=mentee.id,
                email=mentee.email,
                profile_completed=mentee.profile_completed,
                name=profile.name if profile else mentee.name,
                registration_no=profile.registration_no if profile else None,
                branch=profile.branch if profile else None,
            )
            for mentee, profile in result.all()
        ]

    async def get_roster_mentee(self, mentor: User, mentee_id: str, resource: str) -> User:
        """
        Load a mentee the mentor is allowed to look at.

        ``resource`` only shapes the error message ("profile", "academic records", ...).
        """
        result = await self.db.execute(
            select(MentorAssignment).where(
                MentorAssignment.mentor_id == mentor.id,
                MentorAssignment.mentee_id == mentee_id,
            )
        )
        assignment = result.scalar_one_or_none()
        if assignment is None:
            raise AuthorizationError(f"Not authorized to access this mentee's {resource}")

        mentee = assignment.mentee
        if mentee is None or mentee.role != UserRole.MENTEE:
            raise ResourceNotFoundError("Mentee not found", resource_type="user")
        return mentee
