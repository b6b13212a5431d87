"""
Identity & Assignment Service
Registration, login, current-user lookup and mentor -> mentee assignment
"""

from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import (
    AlreadyAssignedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    ValidationError,
)
from reportverse.core.logging_config import logger
from reportverse.core.security import create_access_token, get_password_hash, verify_password
from reportverse.models.mentor_assignment import MentorAssignment
from reportverse.models.user import User, UserRole
from reportverse.schemas.auth import CurrentUser, UserRegister


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})


class IdentityService:
    """Service for user identity and the mentor/mentee relationship"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =====================================================
    # LOOKUPS
    # =====================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def get_assignment(self, mentee_id: str) -> Optional[MentorAssignment]:
        result = await self.db.execute(
            select(MentorAssignment).where(MentorAssignment.mentee_id == mentee_id)
        )
        return result.scalar_one_or_none()

    async def get_assigned_mentor_id(self, mentee_id: str) -> Optional[str]:
        assignment = await self.get_assignment(mentee_id)
        return assignment.mentor_id if assignment else None

    async def get_roster(self, mentor_id: str) -> List[User]:
        """Mentees of a mentor, in the order they were assigned"""
        result = await self.db.execute(
            select(User)
            .join(MentorAssignment, MentorAssignment.mentee_id == User.id)
            .where(MentorAssignment.mentor_id == mentor_id)
            .order_by(MentorAssignment.assigned_at)
        )
        return list(result.scalars().all())

    async def get_roster_ids(self, mentor_id: str) -> List[str]:
        return [mentee.id for mentee in await self.get_roster(mentor_id)]

    async def is_in_roster(self, mentor_id: str, mentee_id: str) -> bool:
        result = await self.db.execute(
            select(MentorAssignment.id).where(
                MentorAssignment.mentor_id == mentor_id,
                MentorAssignment.mentee_id == mentee_id,
            )
        )
        return result.scalar_one_or_none() is not None

    # =====================================================
    # REGISTRATION & LOGIN
    # =====================================================

    async def register(
        self,
        data: UserRegister,
        role: UserRole,
        mentor_id: Optional[str] = None,
    ) -> User:
        """
        Create a user. For mentees, ``mentor_id`` triggers auto-assignment;
        any failure there is logged and the registration still succeeds.
        """
        email = normalize_email(data.email)

        if await self.get_user_by_email(email):
            logger.log_auth_event("register", success=False, user_email=email, reason="email in use")
            raise DuplicateEmailError()

        user = User(
            email=email,
            hashed_password=get_password_hash(data.password),
            name=data.name or email.split("@")[0],
            phone=data.phone,
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateEmailError()
        await self.db.refresh(user)

        logger.log_auth_event("register", success=True, user_email=email, role=role.value)

        if role == UserRole.MENTEE and mentor_id:
            await self._auto_assign(user, mentor_id)

        return user

    async def _auto_assign(self, mentee: User, mentor_id: str) -> None:
        mentee_id, mentee_email = mentee.id, mentee.email
        try:
            mentor = await self.get_user(mentor_id)
            if mentor is None or mentor.role != UserRole.MENTOR:
                logger.warning(
                    f"Auto-assignment skipped for {mentee_email}: {mentor_id} is not a mentor",
                    extra={"event_type": "assignment", "mentor_id": mentor_id}
                )
                return
            self.db.add(MentorAssignment(mentor_id=mentor.id, mentee_id=mentee_id))
            await self.db.commit()
            logger.info(
                f"Mentee {mentee_email} auto-assigned to {mentor.email}",
                extra={"event_type": "assignment", "mentor_id": mentor.id, "mentee_id": mentee_id}
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self.db.refresh(mentee)
            logger.log_error_with_context(e, "auto-assignment", mentee_id=mentee_id, mentor_id=mentor_id)

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = await self.get_user_by_email(email)
        # Same error whether the account is missing or the password is wrong
        if user is None or not verify_password(password, user.hashed_password):
            logger.log_auth_event("login", success=False, user_email=normalize_email(email),
                                  reason="invalid credentials")
            raise InvalidCredentialsError()

        logger.log_auth_event("login", success=True, user_email=user.email)
        return user, issue_token(user)

    async def describe(self, user: User) -> CurrentUser:
        assigned_mentor = None
        mentees: List[str] = []
        if user.role == UserRole.MENTEE:
            assigned_mentor = await self.get_assigned_mentor_id(user.id)
        else:
            mentees = await self.get_roster_ids(user.id)

        return CurrentUser(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            role=user.role.value,
            profile_completed=user.profile_completed,
            assigned_mentor=assigned_mentor,
            mentees=mentees,
        )

    # =====================================================
    # ASSIGNMENT
    # =====================================================

    async def assign_mentee(self, mentor: User, mentee_email: Optional[str]) -> User:
        """Attach the mentee with ``mentee_email`` to ``mentor``. One row, one write."""
        email = normalize_email(mentee_email)
        if not email:
            raise ValidationError("Mentee email is required", field="email")

        result = await self.db.execute(
            select(User).where(User.email == email, User.role == UserRole.MENTEE)
        )
        mentee = result.scalar_one_or_none()
        if mentee is None:
            raise ResourceNotFoundError("Mentee not found with this email", resource_type="user")

        existing = await self.get_assignment(mentee.id)
        if existing is not None:
            raise AlreadyAssignedError(to_caller=existing.mentor_id == mentor.id)

        self.db.add(MentorAssignment(mentor_id=mentor.id, mentee_id=mentee.id))
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with another assignment of the same mentee
            await self.db.rollback()
            raise AlreadyAssignedError()

        logger.info(
            f"Mentee {mentee.email} assigned to {mentor.email}",
            extra={"event_type": "assignment", "mentor_id": mentor.id, "mentee_id": mentee.id}
        )
        return mentee
