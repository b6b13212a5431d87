"""
Response models for the client.

Every response body is validated here, at the network boundary, so the rest
of the client works with typed objects instead of raw dicts.
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"


class Envelope(ApiModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    count: Optional[int] = None
    token: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    # Sent alongside a mentee profile viewed by their mentor
    profile_completed: Optional[bool] = None


class ErrorBody(ApiModel):
    success: bool = False
    error: str = "Unknown error"
    detail: Optional[str] = None


class UserRef(ApiModel):
    id: str
    email: str
    role: str
    name: Optional[str] = None


class AuthUser(ApiModel):
    id: str
    email: str
    role: str
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_completed: Optional[bool] = None


class Me(ApiModel):
    id: str
    email: str
    role: str
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_completed: bool = False
    assigned_mentor: Optional[str] = None
    mentees: List[str] = []


class Comment(ApiModel):
    id: str
    user: UserRef
    text: str
    created_at: datetime


class Issue(ApiModel):
    id: str
    mentee: UserRef
    mentor: UserRef
    issue_type: str
    description: str
    status: str
    comments: List[Comment] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status in ("Open", "Under Review")


class Achievement(ApiModel):
    id: str
    mentee: UserRef
    mentor_id: str
    type: str
    position: str
    description: str
    date_of_achievement: Optional[datetime] = None
    is_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenteeSummary(ApiModel):
    id: str
    email: str
    profile_completed: bool = False
    name: Optional[str] = None
    registration_no: Optional[str] = None
    branch: Optional[str] = None


class MentorDashboard(ApiModel):
    total_mentees: int
    pending_issues: int
    recent_issues: List[Issue] = []


class MentorInfo(ApiModel):
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None


class MenteeDashboard(ApiModel):
    profile_completion: int
    pending_issues: int
    completed_achievements: int
    backlogs: int
    upcoming_events: List[Any] = []
    recent_achievements: List[Achievement] = []
    mentor_info: Optional[MentorInfo] = None
