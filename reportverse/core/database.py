import asyncio
import time
from enum import Enum
from typing import AsyncGenerator, Awaitable, Callable, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from reportverse.core.config import settings
from reportverse.core.exceptions import DatabaseUnavailableError
from reportverse.core.logging_config import logger

# Create base class for models (can be defined before engine)
Base = declarative_base()


def get_database_url(url: Optional[str] = None) -> str:
    """Get properly formatted database URL"""
    db_url = url or settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")
    return db_url


def build_engine(db_url: str) -> AsyncEngine:
    """
    Create the async engine for a URL.

    Connection pooling strategy:
    - SQLite: NullPool (required for thread safety)
    - PostgreSQL Development: NullPool (simpler debugging)
    - PostgreSQL Production: QueuePool with connection limits
    """
    if "sqlite" in db_url:
        return create_async_engine(
            db_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    if settings.DEBUG or settings.ENVIRONMENT == "development":
        return create_async_engine(
            db_url,
            echo=settings.DB_ECHO,
            poolclass=NullPool,
        )
    return create_async_engine(
        db_url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Verify connections before use, reconnects dropped ones
    )


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class DatabaseConnectionManager:
    """
    Owns the engine, the session factory and the connection state.

    ``connect()`` verifies the database is reachable, retrying with
    exponential backoff. After ``max_retries`` failed attempts it raises
    DatabaseUnavailableError and the caller decides whether to exit.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        max_retries: Optional[int] = None,
        max_delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.url = get_database_url(url)
        self.max_retries = max_retries if max_retries is not None else settings.DB_CONNECT_MAX_RETRIES
        self.max_delay = max_delay if max_delay is not None else settings.DB_CONNECT_MAX_DELAY
        self.state = ConnectionState.DISCONNECTED
        self.attempts = 0
        self._sleep = sleep
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = build_engine(self.url)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False
            )
        return self._session_factory

    @property
    def host(self) -> Optional[str]:
        return self.engine.url.host

    @property
    def database_name(self) -> Optional[str]:
        return self.engine.url.database

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    def get_retry_delay(self, attempt: int) -> float:
        """Backoff before retry number ``attempt`` (0-based): 1s, 2s, 4s ... capped"""
        return min(2 ** attempt, self.max_delay)

    async def connect(self) -> None:
        self.state = ConnectionState.CONNECTING
        last_error: Optional[str] = None

        for attempt in range(self.max_retries):
            self.attempts = attempt + 1
            try:
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                self.state = ConnectionState.CONNECTED
                logger.info(
                    f"Database connected (attempt {self.attempts})",
                    extra={"event_type": "db_connect", "db_host": self.host, "attempt": self.attempts}
                )
                return
            except (SQLAlchemyError, OSError) as e:
                last_error = str(e)
                logger.warning(
                    f"Database connection attempt {self.attempts}/{self.max_retries} failed: {e}",
                    extra={"event_type": "db_connect_failed", "attempt": self.attempts}
                )
                if attempt < self.max_retries - 1:
                    delay = self.get_retry_delay(attempt)
                    logger.info(f"Retrying database connection in {delay:.0f}s")
                    await self._sleep(delay)

        self.state = ConnectionState.FAILED
        raise DatabaseUnavailableError(self.max_retries, last_error)

    async def ping(self) -> Optional[float]:
        """Run ``SELECT 1``. Returns latency in ms, or None when unreachable."""
        try:
            start = time.perf_counter()
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            latency = (time.perf_counter() - start) * 1000
            self.state = ConnectionState.CONNECTED
            return round(latency, 2)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}", extra={"event_type": "db_ping_failed"})
            self.state = ConnectionState.DISCONNECTED
            return None

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self.state = ConnectionState.DISCONNECTED


# Lazy manager initialization - create on first use to avoid import-time issues
_manager: Optional[DatabaseConnectionManager] = None


def get_connection_manager() -> DatabaseConnectionManager:
    global _manager
    if _manager is None:
        _manager = DatabaseConnectionManager()
    return _manager


def set_connection_manager(manager: Optional[DatabaseConnectionManager]) -> None:
    """Swap the process-wide manager (tests point it at their own database)"""
    global _manager
    _manager = manager


# Dependency to get DB session
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session - only commits if there are pending changes"""
    session_factory = get_connection_manager().session_factory
    async with session_factory() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Connect (with retries) and create tables"""
    manager = get_connection_manager()
    await manager.connect()
    await manager.create_all()


async def close_db() -> None:
    if _manager is not None:
        await _manager.dispose()
