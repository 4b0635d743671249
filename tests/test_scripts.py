# tests/test_scripts.py

"""
관리 스크립트(scripts/set_user_role.py) 테스트입니다.
"""

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from scripts.set_user_role import set_user_role
from tapcellar.domains.usr.models import UserRole


@pytest.mark.asyncio
async def test_set_user_role_promotes_user(db_session: AsyncSession, test_user):
    updated = await set_user_role(db_session, email=test_user.email, role=UserRole.ADMIN)

    assert updated is not None
    assert updated.id == test_user.id
    assert updated.role == UserRole.ADMIN


@pytest.mark.asyncio
async def test_set_user_role_unknown_email(db_session: AsyncSession):
    assert await set_user_role(db_session, email="nobody@example.com", role=UserRole.CURATOR) is None
