from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.database import get_db
from reportverse.core.rate_limiter import auth_rate_limit, strict_rate_limit
from reportverse.models.user import User, UserRole
from reportverse.modules.auth.dependencies import get_current_user
from reportverse.schemas.auth import LoggedInUser, MenteeRegister, RegisteredUser, UserLogin, UserRegister
from reportverse.schemas.common import success
from reportverse.services.identity_service import IdentityService, issue_token

router = APIRouter()


def _registered(user: User) -> dict:
    return success(
        RegisteredUser(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            role=user.role.value,
        ),
        token=issue_token(user),
    )


@router.post("/register/mentor", status_code=status.HTTP_201_CREATED)
@strict_rate_limit()
async def register_mentor(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register a mentor account (rate limited: 3/min)"""
    user = await IdentityService(db).register(user_data, UserRole.MENTOR)
    return _registered(user)


@router.post("/register/mentee", status_code=status.HTTP_201_CREATED)
@strict_rate_limit()
async def register_mentee(
    request: Request,
    user_data: MenteeRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a mentee account. A valid ``mentorId`` assigns the mentee to
    that mentor straight away; an invalid one is ignored.
    """
    user = await IdentityService(db).register(user_data, UserRole.MENTEE, mentor_id=user_data.mentor_id)
    return _registered(user)


@router.post("/login")
@auth_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange email + password for a bearer token (rate limited: 5/min)"""
    user, token = await IdentityService(db).login(credentials.email, credentials.password)
    return success(
        LoggedInUser(
            id=user.id,
            email=user.email,
            role=user.role.value,
            profile_completed=user.profile_completed,
        ),
        token=token,
    )


@router.get("/me")
async def me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return success(await IdentityService(db).describe(current_user))
