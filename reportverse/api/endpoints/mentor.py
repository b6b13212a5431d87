"""
Mentor routes. Every route here requires a bearer token with role=mentor;
per-mentee routes additionally require the mentee to be on the caller's roster.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.database import get_db
from reportverse.models.user import User
from reportverse.modules.auth.dependencies import get_current_mentor
from reportverse.schemas.achievement import MentorAchievementCreate, achievement_response
from reportverse.schemas.auth import AssignMenteeRequest
from reportverse.schemas.common import success, user_ref
from reportverse.schemas.issue import MentorCommentCreate, MentorIssueCreate, issue_response
from reportverse.services.academic_service import AcademicService, academic_response
from reportverse.services.achievement_service import AchievementService
from reportverse.services.dashboard_service import DashboardService
from reportverse.services.identity_service import IdentityService
from reportverse.services.issue_service import IssueService
from reportverse.services.mentor_service import MentorService
from reportverse.services.profile_service import ProfileService, profile_response

router = APIRouter(dependencies=[Depends(get_current_mentor)])


@router.get("/dashboard")
async def dashboard(
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    return success(await DashboardService(db).for_mentor(current_user))


# ==================== Roster ====================

@router.get("/mentees")
async def list_mentees(
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    mentees = await MentorService(db).list_mentees(current_user.id)
    return success(mentees, count=len(mentees))


@router.post("/mentees/assign")
async def assign_mentee(
    data: AssignMenteeRequest,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    mentee = await IdentityService(db).assign_mentee(current_user, data.email)
    return success(user_ref(mentee), message="Mentee assigned successfully")


@router.get("/mentees/{mentee_id}/profile")
async def get_mentee_profile(
    mentee_id: str,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    mentee = await MentorService(db).get_roster_mentee(current_user, mentee_id, "profile")
    profile = await ProfileService(db).get(mentee.id) if mentee.profile_completed else None
    if profile is None:
        return success(
            {"user": mentee.id, "email": mentee.email, "profileCompleted": False},
            profileCompleted=False,
            message="Mentee has not completed their profile yet",
        )
    return success(profile_response(profile), profileCompleted=True)


@router.get("/mentees/{mentee_id}/academics")
async def get_mentee_academics(
    mentee_id: str,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    mentee = await MentorService(db).get_roster_mentee(current_user, mentee_id, "academic records")
    record = await AcademicService(db).get(mentee.id)
    if record is None:
        return success(
            academic_response(None),
            message="Mentee has not added any academic records yet",
        )
    return success(academic_response(record))


@router.get("/mentees/{mentee_id}/achievements")
async def get_mentee_achievements(
    mentee_id: str,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    mentee = await MentorService(db).get_roster_mentee(current_user, mentee_id, "achievements")
    achievements = await AchievementService(db).list_for_mentee(mentee.id)
    return success([achievement_response(a) for a in achievements], count=len(achievements))


# ==================== Issues ====================

@router.get("/issues")
async def list_issues(
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    """Issues routed to this mentor, newest first"""
    issues = await IssueService(db).list_for_mentor(current_user.id)
    return success([issue_response(i) for i in issues], count=len(issues))


@router.post("/issues", status_code=status.HTTP_201_CREATED)
async def create_issue(
    data: MentorIssueCreate,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    """File an issue on behalf of a mentee on the roster"""
    issue = await IssueService(db).create_for_mentee(
        current_user, data.mentee_id, data.issue_type, data.description
    )
    return success(issue_response(issue))


@router.get("/issues/{issue_id}")
async def get_issue(
    issue_id: str,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    issue = await IssueService(db).get(issue_id, current_user)
    return success(issue_response(issue))


@router.post("/issues/{issue_id}/comment")
async def add_comment(
    issue_id: str,
    data: MentorCommentCreate,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    """Append a comment and optionally move the issue to a new status"""
    issue, _ = await IssueService(db).add_comment(
        issue_id, current_user, data.text, new_status=data.requested_status
    )
    return success(issue_response(issue))


# ==================== Achievements ====================

@router.get("/achievements")
async def list_achievements(
    type: Optional[str] = Query(None),
    position: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    achievements = await AchievementService(db).list_for_mentor(
        current_user.id, type=type, position=position, sort=sort
    )
    return success([achievement_response(a) for a in achievements], count=len(achievements))


@router.post("/achievements", status_code=status.HTTP_201_CREATED)
async def create_achievement(
    data: MentorAchievementCreate,
    current_user: User = Depends(get_current_mentor),
    db: AsyncSession = Depends(get_db)
):
    """Log an achievement on behalf of a mentee on the roster"""
    achievement = await AchievementService(db).create_for_mentee(current_user, data.mentee_id, data)
    return success(achievement_response(achievement))
