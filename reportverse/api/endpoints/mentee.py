"""
Mentee routes. Every route here requires a bearer token with role=mentee.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.database import get_db
from reportverse.core.exceptions import ResourceNotFoundError
from reportverse.models.user import User
from reportverse.modules.auth.dependencies import get_current_mentee
from reportverse.schemas.academic import AcademicUpdate
from reportverse.schemas.achievement import AchievementCreate, achievement_response
from reportverse.schemas.common import success
from reportverse.schemas.issue import CommentCreate, IssueCreate, comment_response, issue_response
from reportverse.schemas.profile import ProfileCreate, ProfileUpdate
from reportverse.services.academic_service import AcademicService, academic_response
from reportverse.services.achievement_service import AchievementService
from reportverse.services.dashboard_service import DashboardService
from reportverse.services.issue_service import IssueService
from reportverse.services.profile_service import ProfileService, profile_response

router = APIRouter(dependencies=[Depends(get_current_mentee)])


# ==================== Profile ====================

@router.post("/profile", status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: ProfileCreate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    profile = await ProfileService(db).create(current_user, data)
    return success(profile_response(profile))


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    profile = await ProfileService(db).update(current_user, data)
    return success(profile_response(profile))


@router.get("/profile")
async def get_profile(
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    profile = await ProfileService(db).get_or_404(current_user.id)
    return success(profile_response(profile))


# ==================== Issues ====================

@router.post("/issues", status_code=status.HTTP_201_CREATED)
async def create_issue(
    data: IssueCreate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    """Raise an issue with the assigned mentor"""
    issue = await IssueService(db).create(current_user, data.issue_type, data.description)
    return success(issue_response(issue))


@router.get("/issues")
async def list_issues(
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    """Own issues, newest first"""
    issues = await IssueService(db).list_for_mentee(current_user.id)
    return success([issue_response(i) for i in issues], count=len(issues))


@router.get("/issues/{issue_id}")
async def get_issue(
    issue_id: str,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    issue = await IssueService(db).get(issue_id, current_user)
    return success(issue_response(issue))


@router.post("/issues/{issue_id}/comments")
async def add_comment(
    issue_id: str,
    data: CommentCreate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    """Append a comment. Mentees cannot change the status."""
    _, comment = await IssueService(db).add_comment(issue_id, current_user, data.text)
    return success(comment_response(comment))


# ==================== Academics ====================

@router.post("/academics")
async def update_academics(
    data: AcademicUpdate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    """Create or partially update the academic record"""
    record = await AcademicService(db).upsert(current_user.id, data)
    return success(academic_response(record))


@router.get("/academics")
async def get_academics(
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    record = await AcademicService(db).get(current_user.id)
    if record is None:
        raise ResourceNotFoundError("Academic record not found", resource_type="academics")
    return success(academic_response(record))


# ==================== Achievements ====================

@router.post("/achievements", status_code=status.HTTP_201_CREATED)
async def create_achievement(
    data: AchievementCreate,
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    achievement = await AchievementService(db).create(current_user, data)
    return success(achievement_response(achievement))


@router.get("/achievements")
async def list_achievements(
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    achievements = await AchievementService(db).list_for_mentee(current_user.id)
    return success([achievement_response(a) for a in achievements], count=len(achievements))


# ==================== Dashboard ====================

@router.get("/dashboard")
async def dashboard(
    current_user: User = Depends(get_current_mentee),
    db: AsyncSession = Depends(get_db)
):
    return success(await DashboardService(db).for_mentee(current_user))
