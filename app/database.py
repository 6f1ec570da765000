import asyncio
import logging
from typing import Awaitable, Callable, TypeVar
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, QueuePool
from app.config import settings
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Determine pool class based on database URL
if "sqlite" in settings.DATABASE_URL:
    # SQLite doesn't support connection pooling the same way
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=False,
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )
else:
    # PostgreSQL with connection pooling
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=False,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Dependency for getting database session.
    Usage in FastAPI:
        @app.get("/")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_with_retry(
    db: AsyncSession,
    stage: Callable[[], Awaitable[T]],
    operation: str,
) -> T:
    """
    Stage writes on the session and commit them as one transaction.

    ``stage`` is re-run from scratch after a rollback when the store reports a
    transient error (lock contention, dropped connection), with exponential
    backoff between attempts. Anything other than an ``OperationalError``
    propagates immediately.

    Args:
        db: Database session
        stage: Coroutine factory that adds/updates rows without committing
        operation: Name used in log messages

    Returns:
        Whatever ``stage`` returned on the attempt that committed
    """
    attempts = max(1, settings.STORE_RETRY_ATTEMPTS)

    for attempt in range(attempts):
        try:
            result = await stage()
            await db.commit()
            return result
        except OperationalError as e:
            await db.rollback()
            if attempt + 1 >= attempts:
                logger.error(
                    sanitize_log_message(
                        "Store write failed, giving up",
                        Operation=operation,
                        Attempts=attempts,
                        Error=str(e)
                    )
                )
                raise

            delay = settings.STORE_RETRY_BACKOFF * (2 ** attempt)
            logger.warning(
                sanitize_log_message(
                    "Retrying store write",
                    Operation=operation,
                    Attempt=attempt + 1,
                    MaxAttempts=attempts,
                    Delay=f"{delay:.3f}s"
                )
            )
            await asyncio.sleep(delay)


async def init_db() -> None:
    """Initialize database (create tables)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
