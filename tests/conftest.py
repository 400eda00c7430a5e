from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import settings

# Override settings for tests
settings.jwt_secret_key = "test-secret-key-that-is-at-least-32-bytes-long"
settings.app_env = "development"
settings.mixpanel_token = ""
settings.smtp_host = ""
settings.sentry_dsn = ""

from app.core.analytics import Analytics, get_analytics  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.core.security import create_session_token, hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.postgres import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.profile import Profile  # noqa: E402
from app.models.user import User  # noqa: E402

# Use a test database: NullPool avoids asyncpg connection conflicts between tests
TEST_DB_URL = settings.postgres_url.rsplit("/", 1)[0] + f"/{settings.postgres_db}_test"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test and drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def mixpanel_client() -> MagicMock:
    """Stand-in for the Mixpanel SDK client; inspect .track / .people_set calls."""
    return MagicMock()


@pytest.fixture(autouse=True)
def analytics(mixpanel_client: MagicMock):
    tracker = Analytics(mixpanel_client)
    app.dependency_overrides[get_analytics] = lambda: tracker
    yield tracker
    app.dependency_overrides.pop(get_analytics, None)


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def user_and_profile(db: AsyncSession) -> tuple[User, Profile]:
    """Create a test user whose first profile is active."""
    user = User(
        email="test@example.com",
        password_hash=hash_password("testpassword123"),
        full_name="Test User",
    )
    db.add(user)
    await db.flush()

    profile = Profile(user_id=user.id, handle="tester")
    db.add(profile)
    await db.flush()

    user.active_profile_id = profile.id
    await db.commit()
    return user, profile


@pytest.fixture
async def other_user(db: AsyncSession) -> tuple[User, Profile]:
    user = User(email="other@example.com", password_hash=hash_password("otherpassword123"))
    db.add(user)
    await db.flush()

    profile = Profile(user_id=user.id, handle="someone-else")
    db.add(profile)
    await db.flush()

    user.active_profile_id = profile.id
    await db.commit()
    return user, profile


@pytest.fixture
async def auth_headers(user_and_profile: tuple[User, Profile]) -> dict[str, str]:
    """Get auth headers with a valid session token."""
    user, _ = user_and_profile
    token = create_session_token(user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def other_auth_headers(other_user: tuple[User, Profile]) -> dict[str, str]:
    user, _ = other_user
    return {"Authorization": f"Bearer {create_session_token(user.email)}"}
