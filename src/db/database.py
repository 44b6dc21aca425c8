"""
Database manager

The one context object of the app:
- owns the async engine and session factory
- validates the relation registry
- creates the schema
- hands out sessions and raw connections

Built once at startup, passed explicitly to whoever needs it, closed on exit.
"""

from pathlib import Path
from typing import Optional, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncConnection,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from db.errors import StoreFailure
from db.models import Base
from db.relations import RELATIONS, RelationConfig, validate_relations
from utils.logger import get_logger

logger = get_logger("OrmIntro")

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite only enforces REFERENCES when asked to, per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Database manager

    Usage:
        db_manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
        await db_manager.initialize()

        async with db_manager.session() as session:
            repo = ArticleRepository(session)
            ...

        await db_manager.close()
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
    ):
        """
        Args:
            database_url: async SQLAlchemy URL, in-memory SQLite by default
            echo: log every SQL statement
        """
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

        # file-backed SQLite needs its directory to exist
        database_path = self._sqlite_file_path()
        if database_path is not None:
            database_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"DatabaseManager created with URL: {self._mask_url(self.database_url)}")

    def _mask_url(self, url: str) -> str:
        """Hide credentials in server URLs"""
        if ":///" in url:
            return url
        if "@" in url:
            return f"***@{url.split('@')[-1]}"
        return url

    def _is_sqlite(self) -> bool:
        return "sqlite" in self.database_url.lower()

    def _sqlite_file_path(self) -> Optional[Path]:
        """Database file of a SQLite URL, None for in-memory or other backends"""
        if not self._is_sqlite():
            return None
        database = make_url(self.database_url).database
        if not database or database == ":memory:":
            return None
        return Path(database)

    async def initialize(self) -> None:
        """
        Finalize the container

        - validate the relation registry
        - create engine and session factory
        - create all tables
        """
        if self._initialized:
            logger.debug("Database already initialized")
            return

        validate_relations(Base.metadata)
        logger.info(f"Registered relations: {', '.join(self.relations)}")

        engine_kwargs = {
            "echo": self.echo,
        }

        if self._is_sqlite():
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # an in-memory database lives as long as its single connection
            if ":memory:" in self.database_url:
                engine_kwargs["poolclass"] = StaticPool

        self._engine = create_async_engine(self.database_url, **engine_kwargs)

        if self._is_sqlite():
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        try:
            await self._create_tables()
        except SQLAlchemyError as e:
            logger.exception(f"Database initialization failed: {e}")
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            raise StoreFailure("initialize", e) from e

        self._initialized = True
        logger.info("Database initialized successfully")

    async def _create_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session context manager, commits on success and rolls back on error

        Yields:
            AsyncSession
        """
        if not self._initialized:
            await self.initialize()

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Raw connection inside a transaction, for hand-written statements

        Yields:
            AsyncConnection
        """
        if not self._initialized:
            await self.initialize()

        async with self._engine.begin() as conn:
            yield conn

    async def close(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._initialized = False
            logger.info("Database connection closed")

    @property
    def relations(self) -> Dict[str, RelationConfig]:
        return RELATIONS

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._initialized


def create_test_database_manager() -> DatabaseManager:
    """In-memory database manager for tests"""
    return DatabaseManager(
        database_url=DEFAULT_DATABASE_URL,
        echo=False,
    )
