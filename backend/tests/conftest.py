"""
Admin Panel API - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from faker import Faker

# Set testing environment before the settings object is built
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DEBUG'] = 'false'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['ACTIVITY_LOG_DATABASE_URL'] = ''
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing-only-0123456789'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='admin-panel-uploads-')

from app.main import app, setup_services, teardown_services
from app.core.database import AsyncSessionLocal, init_db, drop_db, close_db
from app.core.security import get_password_hash, create_access_token
from app.models.user import User, UserRole, UserStatus

fake = Faker()

DEFAULT_PASSWORD = 'Password@123'


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory database and app services for each test"""
    await init_db()
    setup_services(app)
    yield
    await teardown_services(app)
    await drop_db()
    await close_db()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data directly"""
    async with AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """Test client bound to the ASGI app"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def make_account(database) -> Callable:
    """Factory creating committed accounts through a short-lived session"""

    async def _make_account(
        role: UserRole = UserRole.USER,
        status: UserStatus = UserStatus.ACTIVE,
        password: str = DEFAULT_PASSWORD,
        **overrides
    ) -> User:
        async with AsyncSessionLocal() as session:
            user = User(
                name=overrides.pop('name', fake.name()),
                email=overrides.pop('email', fake.unique.email()).lower(),
                hashed_password=get_password_hash(password),
                role=role,
                status=status,
                **overrides
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_account


def auth_headers_for(user: User) -> Dict[str, str]:
    """Bearer header for an account, shaped like the login token"""
    token = create_access_token({'sub': str(user.id), 'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest_asyncio.fixture
async def super_admin(make_account) -> User:
    return await make_account(role=UserRole.SUPER_ADMIN)


@pytest_asyncio.fixture
async def admin_user(make_account) -> User:
    return await make_account(role=UserRole.ADMIN)


@pytest_asyncio.fixture
async def test_user(make_account) -> User:
    return await make_account(role=UserRole.USER)


@pytest.fixture
def super_admin_headers(super_admin: User) -> Dict[str, str]:
    return auth_headers_for(super_admin)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    """Authentication headers for a regular account"""
    return auth_headers_for(test_user)


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers_for
