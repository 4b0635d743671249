# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock

# 애플리케이션 설정이 로드되기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from tapcellar.main import app as main_app  # noqa: E402
from tapcellar.core import dependencies as deps  # noqa: E402
from tapcellar.core.database import get_session  # noqa: E402
from tapcellar.core.security import create_access_token  # noqa: E402

# --- 모든 모델 임포트 ---
# SQLModel.metadata.create_all()이 모든 테이블을 인식하도록 합니다.
from tapcellar.domains.models import *  # noqa: F401, F403, E402
from tapcellar.domains.usr import models as usr_models  # noqa: E402


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 새 인메모리 SQLite DB를 만들어 테스트 간 격리를 보장합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 테이블을 생성한 새 DB에 연결된 비동기 세션을 제공합니다.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await test_engine.dispose()


@pytest.fixture(scope="function")
def persist(db_session: AsyncSession) -> Callable[..., Awaitable]:
    """
    모델 객체를 저장(commit)하고 갱신된 객체를 반환하는 헬퍼입니다.
    여러 객체를 넘기면 같은 순서의 목록을 반환합니다.
    """
    async def _persist(*objects):
        db_session.add_all(objects)
        await db_session.commit()
        for obj in objects:
            await db_session.refresh(obj)
        return objects[0] if len(objects) == 1 else list(objects)
    return _persist


# --- 역할별 사용자 픽스처 ---
@pytest.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    역할과 속성을 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    """
    async def _create_user(
        handle: str,
        role: usr_models.UserRole = usr_models.UserRole.USER,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user_data = {
            "google_id": f"google-{handle}",
            "email": f"{handle}@example.com",
            "name": handle.title(),
            "role": role,
            "is_active": is_active,
            **kwargs,
        }
        user = usr_models.User(**user_data)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable) -> usr_models.User:
    return await user_factory("reader")


@pytest_asyncio.fixture(scope="function")
async def test_curator_user(user_factory: Callable) -> usr_models.User:
    return await user_factory("curator", role=usr_models.UserRole.CURATOR)


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    return await user_factory("admin", role=usr_models.UserRole.ADMIN)


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def app_with_test_db(db_session: AsyncSession):
    """
    get_session과 deps.get_db_session 모두 테스트 세션을 주입하도록 오버라이드합니다.
    """
    def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session
        main_app.dependency_overrides[deps.get_db_session] = override_get_session
        yield main_app
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


def _token_for(user: usr_models.User) -> str:
    return create_access_token(data={"sub": str(user.id)})


@pytest_asyncio.fixture(scope="function")
async def client(app_with_test_db) -> AsyncGenerator[AsyncClient, None]:
    """
    인증되지 않은 사용자를 위한 AsyncClient 인스턴스입니다.
    """
    async with AsyncClient(transport=ASGITransport(app=app_with_test_db), base_url="http://test") as async_client:
        yield async_client


@pytest.fixture(scope="function")
def authorized_client_factory(app_with_test_db) -> Callable[[usr_models.User], AsyncClient]:
    """
    특정 사용자의 세션 토큰을 Authorization 헤더에 담은 AsyncClient를 생성합니다.
    """
    def _create_client(user: usr_models.User) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app_with_test_db),
            base_url="http://test",
            headers={"Authorization": f"Bearer {_token_for(user)}"},
        )
    return _create_client


@pytest_asyncio.fixture(scope="function")
async def authorized_client(authorized_client_factory, test_user) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자(user 역할)로 인증된 클라이언트"""
    async with authorized_client_factory(test_user) as async_client:
        yield async_client


@pytest_asyncio.fixture(scope="function")
async def curator_client(authorized_client_factory, test_curator_user) -> AsyncGenerator[AsyncClient, None]:
    """큐레이터로 인증된 클라이언트"""
    async with authorized_client_factory(test_curator_user) as async_client:
        yield async_client


@pytest_asyncio.fixture(scope="function")
async def admin_client(authorized_client_factory, test_admin_user) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트"""
    async with authorized_client_factory(test_admin_user) as async_client:
        yield async_client


# --- 저장소 장애 시뮬레이션 ---
def _store_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.fixture(scope="function")
def unavailable_session() -> MagicMock:
    """
    모든 쿼리와 커밋에서 OperationalError를 발생시키는 가짜 세션입니다.
    """
    session = MagicMock(name="UnavailableSession")
    session.exec = AsyncMock(side_effect=_store_error())
    session.execute = AsyncMock(side_effect=_store_error())
    session.get = AsyncMock(side_effect=_store_error())
    session.commit = AsyncMock(side_effect=_store_error())
    session.flush = AsyncMock(side_effect=_store_error())
    session.refresh = AsyncMock(side_effect=_store_error())
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    return session


@pytest_asyncio.fixture(scope="function")
async def unavailable_store_client(
    app_with_test_db, unavailable_session, test_curator_user
) -> AsyncGenerator[AsyncClient, None]:
    """
    카탈로그 쿼리(deps.get_db_session)만 장애 세션을 받는 큐레이터 클라이언트입니다.
    인증(get_session)은 정상 테스트 DB를 사용합니다.
    """
    def override_get_db_session():
        yield unavailable_session

    app_with_test_db.dependency_overrides[deps.get_db_session] = override_get_db_session
    async with AsyncClient(
        transport=ASGITransport(app=app_with_test_db),
        base_url="http://test",
        headers={"Authorization": f"Bearer {_token_for(test_curator_user)}"},
    ) as async_client:
        yield async_client
