# tests/test_google_auth.py

"""
Google ID 토큰 검증(verify_google_token)에 대한 테스트입니다.
실제 RSA 키로 서명한 토큰과 가짜 JWKS를 사용하며 네트워크에 접근하지 않습니다.
"""

import time

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from tapcellar.core import google_auth
from tapcellar.core.config import settings
from tapcellar.core.google_auth import GoogleAuthError, GoogleAuthUnavailableError, verify_google_token

KEY_ID = "test-key"


@pytest.fixture(scope="module")
def signing_key() -> str:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def google_jwks(monkeypatch, signing_key):
    """Google 공개키 엔드포인트 대신 테스트 키의 JWKS를 반환합니다."""
    public_jwk = jwk.construct(signing_key, "RS256").public_key().to_dict()
    public_jwk["kid"] = KEY_ID

    async def fake_fetch():
        return {"keys": [public_jwk]}

    monkeypatch.setattr(google_auth, "fetch_google_certs", fake_fetch)


def _id_token(signing_key: str, **overrides) -> str:
    claims = {
        "iss": "https://accounts.google.com",
        "aud": settings.GOOGLE_CLIENT_ID,
        "sub": "1234567890",
        "email": "taster@example.com",
        "name": "Taster",
        "picture": "https://example.com/taster.png",
        "iat": int(time.time()),
        "exp": int(time.time()) + 600,
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, signing_key, algorithm="RS256", headers={"kid": KEY_ID})


@pytest.mark.asyncio
async def test_verify_valid_token(google_jwks, signing_key):
    identity = await verify_google_token(_id_token(signing_key))

    assert identity.external_id == "1234567890"
    assert identity.email == "taster@example.com"
    assert identity.name == "Taster"
    assert identity.picture_url == "https://example.com/taster.png"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else.apps.googleusercontent.com"},
        {"iss": "https://evil.example.com"},
        {"exp": int(time.time()) - 60},
        {"email": None},
    ],
)
async def test_verify_rejects_bad_claims(google_jwks, signing_key, overrides):
    with pytest.raises(GoogleAuthError):
        await verify_google_token(_id_token(signing_key, **overrides))


@pytest.mark.asyncio
async def test_verify_rejects_garbage(google_jwks):
    with pytest.raises(GoogleAuthError):
        await verify_google_token("not.a.jwt")


@pytest.mark.asyncio
async def test_verify_unavailable_when_keys_cannot_be_fetched(monkeypatch, signing_key):
    async def failing_fetch():
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(google_auth, "fetch_google_certs", failing_fetch)
    with pytest.raises(GoogleAuthUnavailableError):
        await verify_google_token(_id_token(signing_key))


@pytest.mark.asyncio
async def test_verify_unavailable_when_not_configured(monkeypatch, signing_key):
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", None)
    with pytest.raises(GoogleAuthUnavailableError):
        await verify_google_token(_id_token(signing_key, aud="anything"))
