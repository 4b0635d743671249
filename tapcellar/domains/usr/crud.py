# tapcellar/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

import logging
from datetime import datetime, UTC
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.crud_base import CRUDBase, write_transaction
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# users 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserSignIn, usr_schemas.UserRoleUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.User, order_by=("email",))

    async def get_by_google_id(self, db: AsyncSession, *, google_id: str) -> Optional[usr_models.User]:
        """Google 계정 ID로 사용자를 조회합니다."""
        return await self.get_by_attribute(db, attribute="google_id", value=google_id)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 사용자를 조회합니다."""
        return await self.get_by_attribute(db, attribute="email", value=email)

    async def upsert_from_sign_in(self, db: AsyncSession, *, obj_in: usr_schemas.UserSignIn) -> usr_models.User:
        """
        Google 로그인 시 사용자를 생성하거나 갱신합니다.
        기존 사용자는 이메일/이름/프로필 이미지와 마지막 로그인 일시만 갱신하고 역할은 유지합니다.
        """
        now = datetime.now(UTC)
        db_user = await self.get_by_google_id(db, google_id=obj_in.google_id)

        async with write_transaction(db, action="sign in user"):
            if db_user is None:
                db_user = usr_models.User(**obj_in.model_dump(), last_signed_in=now)
                logger.info("Registering new user %s", obj_in.email)
            else:
                db_user.email = obj_in.email
                db_user.name = obj_in.name
                db_user.picture = obj_in.picture
                db_user.last_signed_in = now
            db.add(db_user)
        await db.refresh(db_user)
        return db_user

    async def set_role(
        self, db: AsyncSession, *, db_obj: usr_models.User, role: usr_models.UserRole
    ) -> usr_models.User:
        """사용자의 역할을 변경합니다."""
        logger.info("Changing role of user %s: %s -> %s", db_obj.id, db_obj.role, role)
        return await super().update(db, db_obj=db_obj, obj_in={"role": role})


user = CRUDUser()
