from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
import enum

from reportverse.core.database import Base
from reportverse.core.types import GUID, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    MENTOR = "mentor"
    MENTEE = "mentee"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    role = Column(SQLEnum(UserRole), default=UserRole.MENTEE, nullable=False)
    profile_completed = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.email} ({self.role.value if self.role else None})>"
