# tests/domains/test_usr_n.py

"""
'usr' 도메인 (Google 로그인, 세션, 사용자 역할) 관련 API 엔드포인트에 대한 통합 테스트입니다.

- `POST /usr/auth/google` (로그인: 사용자 생성/갱신, 세션 쿠키 발급)
- `GET /usr/auth/me` (현재 사용자, 비로그인 시 null)
- `POST /usr/auth/logout` (세션 쿠키 삭제)
- `GET /usr/users`, `PUT /usr/users/{id}/role` (관리자 전용)
"""

from typing import Callable

import pytest
from httpx import AsyncClient

from tapcellar.core import dependencies as deps
from tapcellar.core.config import settings
from tapcellar.core.google_auth import GoogleAuthError, GoogleAuthUnavailableError, GoogleIdentity
from tapcellar.core.security import create_access_token
from tapcellar.domains.usr import models as usr_models
from tapcellar.domains.usr.routers import get_identity_verifier

BASE_URL = "/api/v1/usr"


@pytest.fixture
def identity_verifier(app_with_test_db) -> Callable[[GoogleIdentity], None]:
    """
    Google ID 토큰 검증 대신 주어진 GoogleIdentity를 반환(또는 예외 발생)하도록 교체합니다.
    """
    def _install(result):
        async def _verify(credential: str) -> GoogleIdentity:
            if isinstance(result, Exception):
                raise result
            return result
        app_with_test_db.dependency_overrides[get_identity_verifier] = lambda: _verify
    return _install


@pytest.mark.asyncio
async def test_google_sign_in_creates_user(client: AsyncClient, identity_verifier):
    """
    처음 로그인한 Google 계정은 user 역할로 생성되고 세션 쿠키를 받는지 테스트합니다.
    """
    print("\n--- Running test_google_sign_in_creates_user ---")
    identity_verifier(GoogleIdentity(
        external_id="g-123", email="new@example.com", name="New Person", picture_url="https://img/p.png"
    ))

    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": "google-id-token"})
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "user"
    assert body["user"]["picture"] == "https://img/p.png"
    assert settings.SESSION_COOKIE_NAME in response.cookies

    # 쿠키만으로 현재 사용자를 조회할 수 있어야 합니다.
    response = await client.get(f"{BASE_URL}/auth/me")
    assert response.status_code == 200
    assert response.json()["email"] == "new@example.com"
    print("test_google_sign_in_creates_user passed.")


@pytest.mark.asyncio
async def test_google_sign_in_keeps_existing_role(client: AsyncClient, identity_verifier, test_curator_user):
    """
    기존 사용자는 역할을 유지하고 프로필 정보만 갱신되어야 합니다.
    """
    identity_verifier(GoogleIdentity(
        external_id=test_curator_user.google_id, email="renamed@example.com", name="Renamed"
    ))

    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": "google-id-token"})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == test_curator_user.id
    assert user["role"] == "curator"
    assert user["email"] == "renamed@example.com"
    assert user["name"] == "Renamed"


@pytest.mark.asyncio
async def test_google_sign_in_rejected(client: AsyncClient, identity_verifier):
    identity_verifier(GoogleAuthError("Invalid Google credential"))
    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": "forged"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid Google credential"

    identity_verifier(GoogleAuthUnavailableError("Google sign-in is temporarily unavailable"))
    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": "any"})
    assert response.status_code == 503

    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_google_sign_in_inactive_user(client: AsyncClient, identity_verifier, user_factory):
    inactive = await user_factory("sleeper", is_active=False)
    identity_verifier(GoogleIdentity(external_id=inactive.google_id, email=inactive.email))

    response = await client.post(f"{BASE_URL}/auth/google", json={"credential": "google-id-token"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Inactive user"


@pytest.mark.asyncio
async def test_read_me(authorized_client: AsyncClient, client: AsyncClient, test_user):
    """
    로그인 상태에서는 사용자 정보를, 비로그인/잘못된 토큰이면 null을 반환하는지 테스트합니다.
    """
    response = await authorized_client.get(f"{BASE_URL}/auth/me")
    assert response.status_code == 200
    assert response.json()["id"] == test_user.id
    assert response.json()["role"] == "user"

    response = await client.get(f"{BASE_URL}/auth/me")
    assert response.status_code == 200
    assert response.json() is None

    response = await client.get(f"{BASE_URL}/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.json() is None


@pytest.mark.asyncio
async def test_logout_clears_session_cookie(client: AsyncClient, identity_verifier):
    identity_verifier(GoogleIdentity(external_id="g-out", email="out@example.com"))
    await client.post(f"{BASE_URL}/auth/google", json={"credential": "google-id-token"})

    response = await client.post(f"{BASE_URL}/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    set_cookie = response.headers.get("set-cookie", "")
    assert settings.SESSION_COOKIE_NAME in set_cookie
    assert "Max-Age=0" in set_cookie

    client.cookies.clear()
    response = await client.get(f"{BASE_URL}/auth/me")
    assert response.json() is None


@pytest.mark.asyncio
async def test_invalid_token_on_protected_endpoint(client: AsyncClient):
    response = await client.post(
        "/api/v1/beer/breweries/",
        json={"name": "Nope"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"

    response = await client.post(
        "/api/v1/beer/breweries/",
        json={"name": "Nope"},
        headers={"Authorization": f"Bearer {create_access_token(data={'sub': '9999'})}"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_inactive_user_cannot_curate(authorized_client_factory, user_factory):
    inactive = await user_factory("retired", role=usr_models.UserRole.CURATOR, is_active=False)
    async with authorized_client_factory(inactive) as inactive_client:
        response = await inactive_client.post("/api/v1/beer/breweries/", json={"name": "Nope"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Inactive user"


# --- 관리자 전용 엔드포인트 ---

@pytest.mark.asyncio
async def test_read_users_admin_only(admin_client: AsyncClient, authorized_client: AsyncClient, test_user):
    response = await admin_client.get(f"{BASE_URL}/users")
    assert response.status_code == 200
    emails = [row["email"] for row in response.json()]
    assert emails == sorted(emails)
    assert test_user.email in emails

    response = await authorized_client.get(f"{BASE_URL}/users")
    assert response.status_code == 403
    assert response.json()["detail"] == "Not enough permissions. Admin role required."


@pytest.mark.asyncio
async def test_update_user_role(admin_client: AsyncClient, curator_client: AsyncClient, test_user, test_admin_user):
    """
    관리자가 사용자 역할을 변경하고, 자기 자신의 관리자 권한은 해제할 수 없는지 테스트합니다.
    """
    response = await admin_client.put(f"{BASE_URL}/users/{test_user.id}/role", json={"role": "curator"})
    assert response.status_code == 200
    assert response.json()["role"] == "curator"

    response = await admin_client.put(f"{BASE_URL}/users/{test_admin_user.id}/role", json={"role": "user"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Admins cannot remove their own admin role."

    response = await admin_client.put(f"{BASE_URL}/users/9999/role", json={"role": "user"})
    assert response.status_code == 404

    response = await admin_client.put(f"{BASE_URL}/users/{test_user.id}/role", json={"role": "owner"})
    assert response.status_code == 422

    response = await curator_client.put(f"{BASE_URL}/users/{test_user.id}/role", json={"role": "admin"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_user_role_store_unavailable(
    admin_client: AsyncClient, app_with_test_db, unavailable_session, test_user
):
    """
    저장소 장애 중의 역할 변경은 'User not found'가 아니라 503이어야 합니다.
    인증은 정상 세션(get_session)을 그대로 사용합니다.
    """
    def override_get_db_session():
        yield unavailable_session

    app_with_test_db.dependency_overrides[deps.get_db_session] = override_get_db_session
    response = await admin_client.put(f"{BASE_URL}/users/{test_user.id}/role", json={"role": "curator"})
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 503
    assert response.json()["detail"] == "Database not available"
