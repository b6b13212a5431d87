from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.models.achievement import Achievement
from reportverse.models.issue import Issue, PENDING_STATUSES
from reportverse.models.mentor_assignment import MentorAssignment
from reportverse.models.user import User
from reportverse.schemas.achievement import achievement_response
from reportverse.schemas.dashboard import MenteeDashboard, MentorDashboard, MentorInfo
from reportverse.schemas.issue import issue_response
from reportverse.services.academic_service import AcademicService
from reportverse.services.identity_service import IdentityService

RECENT_LIMIT = 5


class DashboardService:
    """Aggregate counters for the two dashboards"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar_one() or 0

    async def for_mentee(self, mentee: User) -> MenteeDashboard:
        pending_issues = await self._count(
            select(func.count(Issue.id)).where(
                Issue.mentee_id == mentee.id,
                Issue.status.in_(PENDING_STATUSES),
            )
        )
        completed_achievements = await self._count(
            select(func.count(Achievement.id)).where(
                Achievement.mentee_id == mentee.id,
                Achievement.is_completed.is_(True),
            )
        )

        record = await AcademicService(self.db).get(mentee.id)

        recent = await self.db.execute(
            select(Achievement)
            .where(Achievement.mentee_id == mentee.id)
            .order_by(Achievement.updated_at.desc())
            .limit(RECENT_LIMIT)
        )

        mentor_info = None
        assignment = await IdentityService(self.db).get_assignment(mentee.id)
        if assignment is not None:
            mentor = assignment.mentor
            mentor_info = MentorInfo(name=mentor.name, email=mentor.email, phone=mentor.phone)

        return MenteeDashboard(
            profile_completion=100 if mentee.profile_completed else 50,
            pending_issues=pending_issues,
            completed_achievements=completed_achievements,
            backlogs=record.backlogs if record else 0,
            upcoming_events=[],
            recent_achievements=[achievement_response(a) for a in recent.scalars().all()],
            mentor_info=mentor_info,
        )

    async def for_mentor(self, mentor: User) -> MentorDashboard:
        total_mentees = await self._count(
            select(func.count(MentorAssignment.id)).where(MentorAssignment.mentor_id == mentor.id)
        )
        pending_issues = await self._count(
            select(func.count(Issue.id)).where(
                Issue.mentor_id == mentor.id,
                Issue.status.in_(PENDING_STATUSES),
            )
        )
        recent = await self.db.execute(
            select(Issue)
            .where(Issue.mentor_id == mentor.id, Issue.status.in_(PENDING_STATUSES))
            .order_by(Issue.created_at.desc())
            .limit(RECENT_LIMIT)
        )
        return MentorDashboard(
            total_mentees=total_mentees,
            pending_issues=pending_issues,
            recent_issues=[issue_response(i) for i in recent.scalars().all()],
        )
