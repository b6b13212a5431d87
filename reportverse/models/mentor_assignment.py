from sqlalchemy import Column, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class MentorAssignment(Base):
    """
    One mentor -> mentee edge.

    The unique constraint on mentee_id is what guarantees a mentee has at
    most one mentor. A mentor's roster is every row carrying their
    mentor_id, ordered by assigned_at.
    """
    __tablename__ = "mentor_assignments"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    mentor_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentee_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    assigned_at = Column(DateTime, default=utcnow, nullable=False)

    mentor = relationship("User", foreign_keys=[mentor_id], lazy="selectin")
    mentee = relationship("User", foreign_keys=[mentee_id], lazy="selectin")
