from sqlalchemy import Column, DateTime, Integer, ForeignKey, JSON

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class AcademicRecord(Base):
    """
    One academic record per mentee.

    semester_gpa:        [{"semester": int, "gpa": float}]
    semester_marksheets: [{"semester": int, "imageUrl": str | None}]
    """
    __tablename__ = "academic_records"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    mentee_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    semester_gpa = Column(JSON, default=list, nullable=False)
    mooc_courses = Column(JSON, default=list, nullable=False)
    certifications = Column(JSON, default=list, nullable=False)
    semester_marksheets = Column(JSON, default=list, nullable=False)
    backlogs = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
