from pydantic import Field, field_serializer, field_validator
from typing import List, Optional
from datetime import datetime

from reportverse.models.issue import IssueType
from reportverse.schemas.common import CamelModel, UserRef, iso, user_ref


class IssueCreate(CamelModel):
    issue_type: IssueType
    description: str = Field(..., min_length=1)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value):
        return value.strip() if isinstance(value, str) else value


class MentorIssueCreate(IssueCreate):
    mentee_id: str


class CommentCreate(CamelModel):
    text: Optional[str] = None


class MentorCommentCreate(CommentCreate):
    # Plain strings: unknown values are tolerated and ignored by the service.
    # Older clients send "status" instead of "newStatus".
    new_status: Optional[str] = None
    status: Optional[str] = None

    @property
    def requested_status(self) -> Optional[str]:
        return self.new_status or self.status


class CommentResponse(CamelModel):
    id: str
    user: UserRef
    text: str
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return iso(value)


class IssueResponse(CamelModel):
    id: str
    mentee: UserRef
    mentor: UserRef
    issue_type: str
    description: str
    status: str
    comments: List[CommentResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return iso(value)


def comment_response(comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user=user_ref(comment.author),
        text=comment.text,
        created_at=comment.created_at,
    )


def issue_response(issue) -> IssueResponse:
    return IssueResponse(
        id=issue.id,
        mentee=user_ref(issue.mentee),
        mentor=user_ref(issue.mentor),
        issue_type=issue.issue_type.value,
        description=issue.description,
        status=issue.status.value,
        comments=[comment_response(c) for c in issue.comments],
        created_at=issue.created_at,
        updated_at=issue.updated_at,
    )
