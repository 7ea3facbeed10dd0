# backend/sitecontent/core/shared/database_service.py
"""
Database service for async SQLAlchemy session management.

Provides a singleton service for managing database connections,
sessions, and health checks. Supports both SQLite (development)
and PostgreSQL (production).

Usage:
    from sitecontent.core.shared.database_service import database_service

    # Get async session (context manager)
    async with database_service.get_session() as session:
        repository = SqlAlchemyContentGroupRepository(session)
        groups = await repository.get_all()

    # Initialize database (create tables)
    await database_service.init_db()

    # Health check
    health = await database_service.health_check()
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ...config import settings
from ..database.base import Base


class DatabaseService:
    """
    Database service for managing async SQLAlchemy sessions.

    Attributes:
        _engine: Async SQLAlchemy engine
        _session_factory: Async session factory
        _logger: Logger instance

    Methods:
        get_session(): Get async database session (context manager)
        init_db(): Initialize database (create all tables)
        health_check(): Check database connectivity
        close(): Close database engine and connections
    """

    def __init__(self, database_url: Optional[str] = None):
        """
        Initialize database service.

        Args:
            database_url: Overrides settings.database_url (tests use an
                in-memory SQLite URL)
        """
        self._logger = logging.getLogger("sitecontent.database")
        self._database_url = database_url or settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None
        self._initialize_engine()

    @property
    def database_type(self) -> str:
        return "sqlite" if self._database_url.startswith("sqlite") else "postgresql"

    def _initialize_engine(self) -> None:
        """
        Initialize database engine based on the database URL.

        SQLite Configuration:
            - Uses aiosqlite async driver
            - check_same_thread=False for async support
            - In-memory databases share a single connection (StaticPool)
            - Creates data directory if needed

        PostgreSQL Configuration:
            - Uses asyncpg async driver
            - Connection pooling from settings (db_pool_size, db_max_overflow)
            - Pool pre-ping for connection health
        """
        database_url = self._database_url

        self._logger.info(f"Initializing database: {database_url.split('@')[-1].split('?')[0]}")

        if database_url.startswith("sqlite"):
            engine_kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}

            if ":memory:" in database_url:
                engine_kwargs["poolclass"] = StaticPool
            elif ":///" in database_url:
                db_path = database_url.split("///")[1].split("?")[0]
                db_dir = os.path.dirname(db_path)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    self._logger.info(f"Created database directory: {db_dir}")

            self._engine = create_async_engine(database_url, echo=settings.debug, **engine_kwargs)
            self._logger.info("Using SQLite database (development mode)")

        else:
            self._engine = create_async_engine(
                database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
                pool_recycle=settings.db_pool_recycle,
                echo=settings.debug,
            )
            self._logger.info(
                f"Using PostgreSQL database (pool_size={settings.db_pool_size}, "
                f"max_overflow={settings.db_max_overflow})"
            )

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get async database session as context manager.

        Automatically handles commit on success and rollback on error.

        Yields:
            AsyncSession: Async database session

        Raises:
            RuntimeError: If database is not initialized
            Exception: Any database errors (triggers rollback)
        """
        if not self._session_factory:
            raise RuntimeError("Database not initialized")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_db(self) -> None:
        """
        Initialize database by creating all tables.

        Safe to call multiple times (won't recreate existing tables).
        Production deployments run the Alembic migrations instead.
        """
        if not self._engine:
            raise RuntimeError("Database engine not initialized")

        self._logger.info("Creating database tables...")

        async with self._engine.begin() as conn:
            # Import all models to ensure they're registered with Base
            from ..database import models  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

        self._logger.info("Database tables created successfully")

    async def health_check(self) -> Dict[str, Any]:
        """
        Check database connectivity and count stored content groups.

        Returns:
            Dict with health status:
                {
                    "status": "healthy" | "unhealthy",
                    "connected": True | False,
                    "database_type": "sqlite" | "postgresql",
                    "content_groups": count,
                    "error": "error message" (if unhealthy),
                }
        """
        from ..database.models import ContentGroup

        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
                result = await session.execute(select(func.count()).select_from(ContentGroup))
                group_count = result.scalar() or 0

            return {
                "status": "healthy",
                "connected": True,
                "database_type": self.database_type,
                "content_groups": group_count,
            }
        except Exception as e:
            self._logger.error(f"Database health check failed: {str(e)}")
            return {
                "status": "unhealthy",
                "connected": False,
                "database_type": self.database_type,
                "error": str(e),
            }

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine:
            await self._engine.dispose()
            self._logger.info("Database connections closed")

    def __repr__(self) -> str:
        db_type = "SQLite" if self.database_type == "sqlite" else "PostgreSQL"
        return f"<DatabaseService(type={db_type})>"


# Global singleton instance
database_service = DatabaseService()
