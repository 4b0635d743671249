# tapcellar/core/config.py

from typing import List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "TapCellar API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Beer & wine catalog API (breweries, styles, wineries, varietals, locations)"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and SQL echo")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async database URL (postgresql+asyncpg:// or sqlite+aiosqlite://)")
    DB_AUTO_CREATE: bool = Field(False, description="Create missing tables on start-up (development only)")

    # --- 세션 토큰 (JWT) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for session token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for session token signing")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="Session token lifetime in minutes")
    SESSION_COOKIE_NAME: str = Field("tapcellar_session", description="Name of the HttpOnly session cookie")
    SESSION_COOKIE_SECURE: bool = Field(False, description="Send the session cookie over HTTPS only")

    # --- Google 인증 설정 ---
    GOOGLE_CLIENT_ID: Optional[str] = Field(None, description="OAuth client ID expected as the ID token audience")
    GOOGLE_CERTS_URL: str = Field(
        "https://www.googleapis.com/oauth2/v3/certs",
        description="JWKS endpoint used to verify Google ID tokens"
    )
    GOOGLE_HTTP_TIMEOUT: float = Field(10.0, description="Timeout in seconds for identity provider requests")

    # --- 기타 ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    LOCATION_PATH_SEPARATOR: str = Field(" → ", description="Separator used when rendering location paths")


settings = Settings()
