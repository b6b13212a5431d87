from typing import List, Optional

from reportverse.schemas.achievement import AchievementResponse
from reportverse.schemas.common import CamelModel
from reportverse.schemas.issue import IssueResponse


class MentorInfo(CamelModel):
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None


class MenteeDashboard(CamelModel):
    profile_completion: int
    pending_issues: int
    completed_achievements: int
    backlogs: int
    upcoming_events: List[dict] = []
    recent_achievements: List[AchievementResponse] = []
    mentor_info: Optional[MentorInfo] = None


class MentorDashboard(CamelModel):
    total_mentees: int
    pending_issues: int
    recent_issues: List[IssueResponse] = []


class MenteeSummary(CamelModel):
    id: str
    email: str
    profile_completed: bool
    name: Optional[str] = None
    registration_no: Optional[str] = None
    branch: Optional[str] = None
