from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class IssueType(str, enum.Enum):
    ACADEMIC = "Academic"
    GRIEVANCES = "Grievances"
    RAGGING = "Ragging"
    HARASSMENT = "Harassment"
    ACCOMMODATION = "Accommodation"
    OTHER = "Other"


class IssueStatus(str, enum.Enum):
    OPEN = "Open"
    UNDER_REVIEW = "Under Review"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


# Statuses that still need the mentor's attention
PENDING_STATUSES = (IssueStatus.OPEN, IssueStatus.UNDER_REVIEW)


class Issue(Base):
    """Issue raised by (or on behalf of) a mentee and routed to their mentor"""
    __tablename__ = "issues"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    mentee_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Fixed at creation; reassigning the mentee later does not move the issue
    mentor_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    issue_type = Column(SQLEnum(IssueType), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(SQLEnum(IssueStatus), default=IssueStatus.OPEN, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    mentee = relationship("User", foreign_keys=[mentee_id], lazy="selectin")
    mentor = relationship("User", foreign_keys=[mentor_id], lazy="selectin")
    comments = relationship(
        "IssueComment",
        back_populates="issue",
        order_by="IssueComment.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def __repr__(self):
        return f"<Issue {self.id} {self.issue_type.value} [{self.status.value}]>"


class IssueComment(Base):
    """Append-only comment. position is the 0-based index within the issue."""
    __tablename__ = "issue_comments"
    __table_args__ = (
        UniqueConstraint("issue_id", "position", name="uq_issue_comment_position"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    issue_id = Column(GUID, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    issue = relationship("Issue", back_populates="comments")
    author = relationship("User", lazy="selectin")
