"""
Async Database Manager for the contact submissions store
- Lazily created engine, reused for the lifetime of the process
- Table initialization on startup
- Session-per-request dependency for FastAPI
"""
from importlib import import_module
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine
)
import logging
from app.core.config import settings
from app.models.base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions and table setup."""

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    async def init(self, database_url: Optional[str] = None):
        """Initialize the engine and create missing tables."""
        db_url = self._ensure_ssl(database_url or settings.DATABASE_URL)
        try:
            engine_kwargs = {"pool_pre_ping": True, "echo": settings.DATABASE_ECHO}
            if not db_url.startswith("sqlite"):
                engine_kwargs.update(pool_size=5, max_overflow=5, pool_recycle=300)
            self.engine = create_async_engine(db_url, **engine_kwargs)

            async with self.engine.begin() as conn:
                await self._setup_database(conn)

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
                autoflush=False
            )

        except Exception as e:
            logger.error(f"❌ Database initialization failed: {e}")
            raise

    def _ensure_ssl(self, db_url: str) -> str:
        """Ensure SSL is properly configured for Render"""
        if "render.com" in db_url and "?ssl=" not in db_url:
            return f"{db_url}?ssl=require"
        return db_url

    async def _setup_database(self, conn):
        """Initialize database schema"""
        await conn.execute(text("SELECT 1"))
        for model in settings.DB_MODELS:
            import_module(model)

        await conn.run_sync(Base.metadata.create_all)
        logger.info(f"📝 Tables ready: {list(Base.metadata.tables.keys())}")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for safe session handling"""
        if not self.session_factory:
            raise RuntimeError("DatabaseSessionManager not initialized")
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        if not self.engine:
            return False
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def close(self):
        """Cleanup connection pool"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

# Initialize session manager
session_manager = DatabaseSessionManager()

async def aget_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions
    Usage:
    @router.get("/")
    async def endpoint(db: AsyncSession = Depends(aget_db)):
        ...
    """
    async with session_manager.get_session() as session:
        yield session
