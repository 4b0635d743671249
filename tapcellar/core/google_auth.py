# tapcellar/core/google_auth.py

"""
외부 인증 제공자(Google) 경계 모듈입니다.

클라이언트가 전달한 Google ID 토큰(credential)을 Google 공개키(JWKS)로 검증하고,
애플리케이션이 사용하는 `GoogleIdentity`로 변환합니다.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from jose import jwt, JWTError
from pydantic import BaseModel

from tapcellar.core.config import settings

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleAuthError(Exception):
    """Google 자격 증명이 유효하지 않은 경우 발생합니다. (401)"""


class GoogleAuthUnavailableError(GoogleAuthError):
    """Google 로그인이 설정되지 않았거나 공개키를 가져올 수 없는 경우 발생합니다. (503)"""


class GoogleIdentity(BaseModel):
    """검증된 Google 계정 정보"""
    external_id: str
    email: str
    name: Optional[str] = None
    picture_url: Optional[str] = None


async def fetch_google_certs() -> Dict[str, Any]:
    """
    Google ID 토큰 서명 검증용 JWKS를 가져옵니다.
    """
    async with httpx.AsyncClient(timeout=settings.GOOGLE_HTTP_TIMEOUT) as client:
        response = await client.get(settings.GOOGLE_CERTS_URL)
        response.raise_for_status()
        return response.json()


async def verify_google_token(credential: str) -> GoogleIdentity:
    """
    Google ID 토큰을 검증하고 계정 정보를 반환합니다.
    서명(RS256), audience(GOOGLE_CLIENT_ID), issuer, 만료 시간을 확인합니다.
    """
    if not settings.GOOGLE_CLIENT_ID:
        raise GoogleAuthUnavailableError("Google sign-in is not configured")

    try:
        jwks = await fetch_google_certs()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Failed to fetch Google signing keys: %s", e)
        raise GoogleAuthUnavailableError("Google sign-in is temporarily unavailable") from e

    try:
        claims = jwt.decode(
            credential,
            jwks,
            algorithms=["RS256"],
            audience=settings.GOOGLE_CLIENT_ID,
            options={"verify_at_hash": False},
        )
    except JWTError as e:
        logger.info("Rejected Google credential: %s", e)
        raise GoogleAuthError("Invalid Google credential") from e

    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise GoogleAuthError("Invalid Google credential issuer")

    subject = claims.get("sub")
    email = claims.get("email")
    if not subject or not email:
        raise GoogleAuthError("Google credential is missing the account id or email")

    return GoogleIdentity(
        external_id=str(subject),
        email=email,
        name=claims.get("name"),
        picture_url=claims.get("picture"),
    )
