from sqlalchemy import Column, String, DateTime, ForeignKey, JSON

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class MenteeProfile(Base):
    """Personal details a mentee fills in once and may update later"""
    __tablename__ = "mentee_profiles"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    mentee_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    name = Column(String(255), nullable=False)
    registration_no = Column(String(50), nullable=False, index=True)
    section = Column(String(20), nullable=True)
    roll_no = Column(String(50), nullable=True)
    branch = Column(String(100), nullable=True)
    mobile_no = Column(String(20), nullable=True)
    hostel_block_no = Column(String(20), nullable=True)
    room_no = Column(String(20), nullable=True)
    blood_group = Column(String(10), nullable=True)
    dob = Column(String(20), nullable=True)

    # Nested groups stored as documents: {status, details}, {name, occupation, ...}, {address, pinCode}
    alumni_family = Column(JSON, nullable=True)
    father_details = Column(JSON, nullable=True)
    mother_details = Column(JSON, nullable=True)
    communication_address = Column(JSON, nullable=True)
    permanent_address = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
