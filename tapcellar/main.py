# tapcellar/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from tapcellar import API_PREFIX
from tapcellar.core.config import settings
from tapcellar.core.crud_base import STORE_UNAVAILABLE_ERRORS
from tapcellar.core.database import init_db, close_db, get_session

from tapcellar.domains.usr.routers import router as usr_router
from tapcellar.domains.loc.routers import router as loc_router
from tapcellar.domains.beer.routers import router as beer_router
from tapcellar.domains.wine.routers import router as wine_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    시작 시 데이터베이스 엔진을 초기화하고(연결 실패 시 시작 중단), 종료 시 커넥션 풀을 정리합니다.
    """
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.APP_ENV)
    await init_db()

    yield  # 애플리케이션 실행

    logger.info("Shutting down %s", settings.APP_NAME)
    await close_db()


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# -- CORS 미들웨어 설정 --
# 세션 쿠키를 쓰므로 allow_credentials=True. 운영 환경에서는 CORS_ORIGINS를 프론트엔드 도메인으로 제한합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr")
app.include_router(loc_router, prefix=f"{API_PREFIX}/loc")
app.include_router(beer_router, prefix=f"{API_PREFIX}/beer")
app.include_router(wine_router, prefix=f"{API_PREFIX}/wine")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    TapCellar API의 루트 엔드포인트입니다.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error("Health check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available"
        )
    if result.first() != 1:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    return {"status": "ok", "database_connection": "successful"}


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("tapcellar.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
