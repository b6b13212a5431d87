"""
ReportVerse - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = 'logs/test.log'

from reportverse.main import app
from reportverse.core.database import DatabaseConnectionManager, get_db, set_connection_manager
from reportverse.core.security import get_password_hash
from reportverse.models.mentor_assignment import MentorAssignment
from reportverse.models.user import User, UserRole
from reportverse.services.identity_service import issue_token

fake = Faker()

TEST_PASSWORD = 'testpassword123'


async def _no_sleep(delay: float) -> None:
    return None


@pytest.fixture
async def db_manager(tmp_path) -> AsyncGenerator[DatabaseConnectionManager, None]:
    """A connection manager bound to a throwaway SQLite file"""
    manager = DatabaseConnectionManager(
        url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        sleep=_no_sleep,
    )
    await manager.connect()
    await manager.create_all()
    set_connection_manager(manager)

    yield manager

    set_connection_manager(None)
    await manager.dispose()


@pytest.fixture
async def db_session(db_manager: DatabaseConnectionManager) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting the test database"""
    async with db_manager.session_factory() as session:
        yield session


@pytest.fixture
async def client(db_manager: DatabaseConnectionManager) -> AsyncGenerator[AsyncClient, None]:
    """Create test client; every request gets its own session on the test database"""
    async def override_get_db():
        async with db_manager.session_factory() as session:
            try:
                yield session
                if session.new or session.dirty or session.deleted:
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(
    db: AsyncSession,
    role: UserRole,
    email: Optional[str] = None,
    password: str = TEST_PASSWORD,
) -> User:
    user = User(
        email=(email or fake.unique.email()).lower(),
        hashed_password=get_password_hash(password),
        name=fake.name(),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def assign(db: AsyncSession, mentor: User, mentee: User) -> None:
    db.add(MentorAssignment(mentor_id=mentor.id, mentee_id=mentee.id))
    await db.commit()


def auth_headers_for(user: User) -> dict:
    return {'Authorization': f'Bearer {issue_token(user)}'}


@pytest.fixture
async def mentor(db_session: AsyncSession) -> User:
    """A mentor with no mentees yet"""
    return await create_user(db_session, UserRole.MENTOR)


@pytest.fixture
async def other_mentor(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.MENTOR)


@pytest.fixture
async def mentee(db_session: AsyncSession, mentor: User) -> User:
    """A mentee assigned to ``mentor``"""
    user = await create_user(db_session, UserRole.MENTEE)
    await assign(db_session, mentor, user)
    return user


@pytest.fixture
async def unassigned_mentee(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.MENTEE)


@pytest.fixture
def mentor_headers(mentor: User) -> dict:
    return auth_headers_for(mentor)


@pytest.fixture
def other_mentor_headers(other_mentor: User) -> dict:
    return auth_headers_for(other_mentor)


@pytest.fixture
def mentee_headers(mentee: User) -> dict:
    return auth_headers_for(mentee)


@pytest.fixture
def unassigned_headers(unassigned_mentee: User) -> dict:
    return auth_headers_for(unassigned_mentee)
