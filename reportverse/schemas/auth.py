from pydantic import EmailStr, Field, field_validator
from typing import List, Optional

from reportverse.schemas.common import CamelModel


class UserRegister(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class MenteeRegister(UserRegister):
    mentor_id: Optional[str] = None


class UserLogin(CamelModel):
    # Optional so a missing field gets the friendly message instead of a schema error
    email: Optional[str] = None
    password: Optional[str] = None


class RegisteredUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: str


class LoggedInUser(CamelModel):
    id: str
    email: str
    role: str
    profile_completed: bool


class CurrentUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    profile_completed: bool
    assigned_mentor: Optional[str] = None
    mentees: List[str] = []


class AssignMenteeRequest(CamelModel):
    email: Optional[str] = None
