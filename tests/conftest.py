"""Pytest configuration for all tests."""

from dataclasses import dataclass
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from aclcore.core.config import Settings
from aclcore.core.events import EventBus
from aclcore.domain.entities import Account, AccountType, CallContext, Domain
from aclcore.domain.services import AclService, PermissionCache
from aclcore.infrastructure.persistence.models import DomainModel
from aclcore.infrastructure.persistence.database import Base, unit_of_work
from aclcore.infrastructure.persistence.repositories import (
    AccountRepository,
    DomainRepository,
)


@dataclass
class DomainTree:
    """Seeded domains and accounts.

    ROOT (/)
      eng (/eng/)
        qa (/eng/qa/)
      sales (/sales/)
    """

    root: Domain
    eng: Domain
    qa: Domain
    sales: Domain
    root_admin: Account
    eng_admin: Account
    qa_admin: Account
    sales_admin: Account
    eng_user: Account
    qa_user: Account

    def ctx(self, account: Account) -> CallContext:
        return CallContext(caller=account)


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated in-memory database."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        default_page_size=50,
        max_page_size=100,
    )


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session, rolled back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def domain_tree(session_factory: async_sessionmaker[AsyncSession]) -> DomainTree:
    """Seed a small domain tree with admins and users."""
    async with unit_of_work(session_factory) as session:
        domains = DomainRepository(session)
        accounts = AccountRepository(session)

        root_model = DomainModel(name="ROOT", path="/")
        session.add(root_model)
        await session.flush()
        root = Domain(id=root_model.id, name="ROOT", path="/")

        eng = await domains.create_child(root, "eng")
        qa = await domains.create_child(eng, "qa")
        sales = await domains.create_child(root, "sales")

        return DomainTree(
            root=root,
            eng=eng,
            qa=qa,
            sales=sales,
            root_admin=await accounts.create("admin", root.id, AccountType.ADMIN),
            eng_admin=await accounts.create("eng-admin", eng.id, AccountType.DOMAIN_ADMIN),
            qa_admin=await accounts.create("qa-admin", qa.id, AccountType.DOMAIN_ADMIN),
            sales_admin=await accounts.create("sales-admin", sales.id, AccountType.DOMAIN_ADMIN),
            eng_user=await accounts.create("eng-user", eng.id),
            qa_user=await accounts.create("qa-user", qa.id),
        )


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def published(event_bus: EventBus) -> list:
    """Collect every event published on the test bus."""
    events: list = []
    event_bus.subscribe("*", events.append)
    return events


@pytest.fixture
def acl_service(
    session_factory: async_sessionmaker[AsyncSession],
    event_bus: EventBus,
    test_settings: Settings,
) -> AclService:
    return AclService(
        session_factory,
        event_bus=event_bus,
        permission_cache=PermissionCache(ttl_seconds=300),
        settings=test_settings,
    )
