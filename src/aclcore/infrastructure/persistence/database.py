"""ACL store engine, sessions and transactions on SQLAlchemy 2.0 async.

Every ACL operation runs its store calls inside unit_of_work(). SQLite
(aiosqlite) and PostgreSQL (asyncpg) are supported.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from aclcore.core.config import Settings, get_settings
from aclcore.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseManager:
    """Owns the async engine and the session factory built on it.

    Both are created lazily; disconnect() disposes the engine so the next
    access starts a fresh pool.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            is_sqlite = self.settings.database_url.startswith("sqlite")
            pool_args = (
                {}
                if is_sqlite
                else {
                    "pool_size": self.settings.db_pool_size,
                    "max_overflow": self.settings.db_max_overflow,
                    "pool_timeout": self.settings.db_pool_timeout,
                    "pool_recycle": self.settings.db_pool_recycle,
                }
            )
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                connect_args={"check_same_thread": False} if is_sqlite else {},
                **pool_args,
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create every ACL table that does not exist yet (development only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    async def check_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Run a block of store calls as one transaction.

    The transaction commits when the block exits normally and rolls back
    when it raises, so partial writes are never observable.

    Example:
        async with unit_of_work(factory) as session:
            await ApiPermissionRepository(session).persist(ApiPermission(1, "listVMs"))
    """
    async with session_factory() as session:
        async with session.begin():
            yield session


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_database(db: DatabaseManager | None = None) -> None:
    """Initialize the database.

    Creates tables (development only; use migrations in production) and
    seeds the ROOT domain and the root admin account.
    """
    # Register all models with Base.metadata before create_tables()
    from aclcore.infrastructure.persistence import models  # noqa: F401

    db = db or get_db_manager()
    settings = db.settings

    if settings.database_url.startswith("sqlite"):
        db_path = settings.database_url.split(":///")[-1]
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.is_production:
        logger.info("Production mode: Skipping auto-create, use migrations")
    else:
        await db.create_tables()

    await _seed_root(db)


async def _seed_root(db: DatabaseManager) -> None:
    """Seed the ROOT domain and root admin account if missing."""
    from aclcore.domain.entities.account import AccountType
    from aclcore.infrastructure.persistence.models import AccountModel, DomainModel

    settings = db.settings
    async with unit_of_work(db.session_factory) as session:
        root = (
            await session.execute(select(DomainModel).where(DomainModel.parent_id.is_(None)))
        ).scalar_one_or_none()
        if root is None:
            root = DomainModel(name=settings.root_domain_name, path="/")
            session.add(root)
            await session.flush()
            logger.info("Seeded root domain", domain_id=root.id)

        admin = (
            await session.execute(
                select(AccountModel).where(
                    AccountModel.name == settings.root_admin_account_name,
                    AccountModel.domain_id == root.id,
                )
            )
        ).scalar_one_or_none()
        if admin is None:
            session.add(
                AccountModel(
                    name=settings.root_admin_account_name,
                    domain_id=root.id,
                    account_type=AccountType.ADMIN.value,
                )
            )
            logger.info("Seeded root admin account", name=settings.root_admin_account_name)
