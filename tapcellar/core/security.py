# tapcellar/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수 및 의존성 주입을 정의하는 모듈입니다.

- 세션 토큰(JWT) 생성 및 검증.
- Bearer 헤더 또는 HttpOnly 세션 쿠키에서 현재 사용자 획득.
- 사용자 역할(role) 기반 권한 부여(Authorization) 검사.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.config import settings
from tapcellar.core.crud_base import STORE_UNAVAILABLE_ERRORS
from tapcellar.core.database import get_session
from tapcellar.domains.usr import models as usr_models

logger = logging.getLogger(__name__)

# Authorization 헤더가 없어도 쿠키로 인증할 수 있도록 auto_error를 끕니다.
bearer_scheme = HTTPBearer(auto_error=False)

CURATOR_ROLES = (usr_models.UserRole.CURATOR, usr_models.UserRole.ADMIN)
ADMIN_ROLES = (usr_models.UserRole.ADMIN,)


# --- JWT 토큰 생성 및 검증 ---
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    세션 토큰을 생성합니다.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """
    세션 토큰을 검증하고 사용자 ID(sub)를 반환합니다. 유효하지 않으면 None.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug("Rejected session token: %s", e)
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def _load_user(db: AsyncSession, user_id: int) -> Optional[usr_models.User]:
    try:
        return await db.get(usr_models.User, user_id)
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error("Store unavailable while loading session user: %s", e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not available")


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session),
) -> Optional[usr_models.User]:
    """
    세션이 있으면 사용자를, 없거나 유효하지 않으면 None을 반환합니다. (공개 엔드포인트용)
    """
    token = _extract_token(request, credentials)
    if not token:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        return None
    user = await _load_user(db, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user_from_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    세션 토큰을 디코딩하고 검증하여 현재 사용자를 데이터베이스에서 가져옵니다.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    user = await _load_user(db, user_id)
    if user is None:
        raise credentials_exception
    return user


# --- 역할 기반 권한 부여 의존성 ---

def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """
    현재 인증된 활성 사용자를 반환합니다.
    계정이 비활성화된 경우 400 Bad Request를 발생시킵니다.
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_current_curator_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """
    카탈로그를 변경할 수 있는 사용자(curator, admin)를 반환합니다.
    """
    if current_user.role not in CURATOR_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Curator role required."
        )
    return current_user


def get_current_admin_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """
    현재 인증된 관리자 사용자를 반환합니다.
    관리자 권한이 없는 경우 403 Forbidden을 발생시킵니다.
    """
    if current_user.role not in ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required."
        )
    return current_user
