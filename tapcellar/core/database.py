# tapcellar/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- 엔진은 임포트 시점이 아니라 애플리케이션 시작 시 `init_db()`로 한 번 생성합니다.
  (init -> ready -> `close_db()` 수명 주기)
- 초기화 전에 세션을 요청하면 `DatabaseNotInitializedError`가 발생합니다.
- 초기화 시 저장소에 연결할 수 없으면 시작 단계에서 바로 실패합니다.
"""

import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.config import settings

logger = logging.getLogger(__name__)


class DatabaseNotInitializedError(RuntimeError):
    """init_db()가 호출되기 전에 세션을 요청한 경우 발생합니다."""


# 수명 주기 동안 유지되는 엔진과 세션 공장 (init_db에서 설정)
engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None


def _engine_options(database_url: str) -> dict:
    """백엔드에 맞는 엔진 옵션을 반환합니다. SQLite는 커넥션 풀 크기 옵션을 받지 않습니다."""
    options = {"echo": settings.DEBUG_MODE, "future": True}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_recycle=3600,   # 1시간마다 연결 재활용
        pool_size=10,        # 최소 10개의 연결 유지
        max_overflow=20,     # 최대 20개의 추가 연결 허용
        pool_pre_ping=True,
    )
    return options


# =============================================================================
# 엔진 수명 주기
# =============================================================================
async def init_db(database_url: Optional[str] = None, *, create_tables: Optional[bool] = None) -> AsyncEngine:
    """
    엔진과 세션 공장을 생성하고 저장소 연결을 확인합니다.
    `create_tables`가 참이면 누락된 테이블을 생성합니다 (개발용, 기존 테이블은 유지).
    """
    global engine, AsyncSessionLocal

    # 모든 SQLModel 테이블이 metadata에 등록되도록 임포트합니다.
    from tapcellar.domains import models  # noqa: F401

    url = database_url or settings.DATABASE_URL.get_secret_value()
    if create_tables is None:
        create_tables = settings.DB_AUTO_CREATE

    new_engine = create_async_engine(url, **_engine_options(url))
    try:
        async with new_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_tables:
                await conn.run_sync(SQLModel.metadata.create_all)
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error("Database is not reachable during start-up: %s", e, exc_info=True)
        await new_engine.dispose()
        raise

    engine = new_engine
    AsyncSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Database engine initialised (tables created: %s)", bool(create_tables))
    return engine


async def close_db() -> None:
    """엔진의 커넥션 풀을 정리하고 수명 주기를 종료 상태로 되돌립니다."""
    global engine, AsyncSessionLocal

    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


def get_sessionmaker() -> sessionmaker:
    if AsyncSessionLocal is None:
        raise DatabaseNotInitializedError("Database not initialized. Call init_db() first.")
    return AsyncSessionLocal


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    스크립트 등 요청 밖의 비동기 컨텍스트에서 사용할 독립적인 세션을 제공합니다.
    """
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
