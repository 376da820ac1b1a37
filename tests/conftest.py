# Shared pytest configuration and fixtures for all test types
import os
import secrets
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from slowapi import Limiter
from slowapi.util import get_remote_address
from unittest.mock import patch

# Keep test output free of console log exports
os.environ.setdefault("OTEL_CONSOLE_LOGS", "false")

# Create test limiter with no limits and in-memory storage
test_limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://",
)

# Patch the limiter before importing the app so decorators use test limiter
with patch("common.providers.rate_limiter.limiter.limiter", test_limiter):
    from api.main import app

from common.db.session import get_db, get_db_readonly
from common.db.base import Base
from common.providers.caching import PassthroughCache
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.users.models.database.user import UserEntity
from packages.users.models.domain.enums import UserRole
from packages.membership.models.database import MembershipLevelEntity, SubscriptionEntity  # noqa: F401
from packages.billing.models.database import OrderEntity, PaymentEntity  # noqa: F401
from packages.quota.models.database import QuotaEntity, QuotaLedgerEntryEntity  # noqa: F401
from packages.generations.models.database import GenerationEntity  # noqa: F401

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch session factories to use test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", test_session_factory)
    monkeypatch.setattr(
        "common.db.scoped.AsyncSessionLocalReadonly", test_session_factory
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def passthrough_cache(monkeypatch):
    """Never touch Redis from tests; cache tests install their own provider."""
    monkeypatch.setattr(
        "common.providers.caching.factory._cache_provider", PassthroughCache()
    )


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession, test_user):
    """Create a test client."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    def override_get_current_active_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_readonly] = override_get_db
    app.dependency_overrides[get_current_active_user] = override_get_current_active_user

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def anonymous_client(test_db: AsyncSession):
    """Test client without an authenticated user override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_readonly] = override_get_db

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def sample_user(test_db: AsyncSession):
    """Create a sample user for testing."""
    user = UserEntity(email="shopper@example.com", name="Test Shopper", role="USER")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def other_user(test_db: AsyncSession):
    user = UserEntity(email="other@example.com", name="Other Shopper", role="USER")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def admin_user(test_db: AsyncSession):
    user = UserEntity(email="admin@example.com", name="Admin", role="ADMIN")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def test_user(sample_user):
    """Create a test authenticated user."""
    return AuthenticatedUser(
        user_id=sample_user.id,
        email=sample_user.email,
        role=UserRole.USER,
    )


@pytest_asyncio.fixture(scope="function")
async def basic_level(test_db: AsyncSession):
    """Active membership level used by purchase tests."""
    level = MembershipLevelEntity(
        level="BASIC",
        name="基础会员",
        price=Decimal("29.90"),
        yearly_price=Decimal("299.00"),
        monthly_quota=50,
        max_resolution="1024x1024",
        priority=1,
        commercial_use=False,
        watermark=True,
        features='["每月50次生成额度", "1024x1024分辨率"]',
        is_active=True,
        sort_order=1,
    )
    test_db.add(level)
    await test_db.commit()
    await test_db.refresh(level)
    return level


@pytest_asyncio.fixture(scope="function")
async def premium_level(test_db: AsyncSession):
    level = MembershipLevelEntity(
        level="PREMIUM",
        name="高级会员",
        price=Decimal("99.90"),
        yearly_price=Decimal("999.00"),
        monthly_quota=500,
        max_resolution="2048x2048",
        priority=3,
        commercial_use=True,
        watermark=False,
        features='["每月500次生成额度", "商用授权"]',
        is_active=True,
        sort_order=2,
    )
    test_db.add(level)
    await test_db.commit()
    await test_db.refresh(level)
    return level


@pytest_asyncio.fixture(scope="function")
async def inactive_level(test_db: AsyncSession):
    level = MembershipLevelEntity(
        level="LEGACY",
        name="旧版会员",
        price=Decimal("19.90"),
        yearly_price=Decimal("199.00"),
        monthly_quota=20,
        max_resolution="512x512",
        features="not json",
        is_active=False,
        sort_order=99,
    )
    test_db.add(level)
    await test_db.commit()
    await test_db.refresh(level)
    return level


@pytest_asyncio.fixture(scope="function")
async def make_quota_order(test_db: AsyncSession, sample_user):
    """Factory for PENDING quota orders (bypasses pricing)."""

    async def _make(quota_amount: int = 10, user_id: int = None) -> OrderEntity:
        order = OrderEntity(
            order_no=f"ORDTEST{secrets.token_hex(6).upper()}",
            user_id=user_id or sample_user.id,
            type="QUOTA",
            amount=Decimal(quota_amount) * Decimal("0.20"),
            currency="CNY",
            quota_amount=quota_amount,
            expire_at=datetime.now(timezone.utc) + timedelta(minutes=30),
        )
        test_db.add(order)
        await test_db.commit()
        await test_db.refresh(order)
        return order

    return _make
