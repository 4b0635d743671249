# tapcellar/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.

- 조회 메서드는 저장소에 연결할 수 없을 때 예외 대신 빈 결과를 반환하고 로그를 남깁니다.
- 변경 메서드는 하나의 트랜잭션으로 실행되며, 실패 시 롤백 후 HTTPException을 발생시킵니다.
  (저장소 장애: 503, 무결성 제약 위반: 400)
"""

import functools
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import InstrumentedAttribute
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

# 저장소 연결 불가로 간주하는 예외
STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError)


def degrade_on_store_error(default_factory: Callable[[], Any]):
    """
    조회용 코루틴을 감싸서, 저장소에 연결할 수 없으면 `default_factory()` 결과를 반환합니다.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except STORE_UNAVAILABLE_ERRORS as e:
                logger.error("Store unavailable during %s: %s", func.__qualname__, e, exc_info=True)
                return default_factory()
        return wrapper
    return decorator


@asynccontextmanager
async def write_transaction(db: AsyncSession, *, action: str) -> AsyncIterator[AsyncSession]:
    """
    블록 안의 모든 변경을 하나의 트랜잭션으로 커밋합니다.
    블록이나 커밋에서 예외가 발생하면 롤백하고, DB 예외는 HTTPException으로 변환합니다.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Integrity error during %s: %s", action, e.orig if e.orig else e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot {action} due to a data integrity constraint."
        )
    except STORE_UNAVAILABLE_ERRORS as e:
        await db.rollback()
        logger.error("Store unavailable during %s: %s", action, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available"
        )
    except Exception:
        await db.rollback()
        raise


async def ensure_reference(db: AsyncSession, model: Type[SQLModel], id: Optional[int], *, entity: str) -> None:
    """
    요청 본문이 참조하는 ID가 존재하는지 확인합니다. 없으면 400을 발생시킵니다. (None은 통과)
    """
    if id is None:
        return
    if await get_or_unavailable(db, model, id, action=f"checking {entity} reference") is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{entity} not found for the given ID"
        )


async def get_or_unavailable(db: AsyncSession, model: Type[SQLModel], id: Any, *, action: str) -> Optional[SQLModel]:
    """
    변경 경로에서 사용하는 단건 조회입니다. 저장소 장애를 '없음'으로 숨기지 않고 503으로 알립니다.
    """
    try:
        return await db.get(model, id)
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error("Store unavailable while %s: %s", action, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available"
        )


async def clear_reference(db: AsyncSession, column: InstrumentedAttribute, value: Any) -> None:
    """
    `column == value`인 행의 참조 컬럼을 NULL로 바꿉니다. (호출자 트랜잭션 안에서 실행)
    updated_at을 직접 채워서, 세션에 올라와 있는 객체도 만료 없이 새 값으로 맞춰집니다.
    """
    await db.exec(
        update(column.class_)
        .where(column == value)
        .values({column.key: None, "updated_at": datetime.now(timezone.utc)})
    )


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    `order_by`에 지정한 필드 순(오름차순)으로 목록을 정렬하며, 동일 값은 id 순입니다.
    """
    def __init__(self, model: Type[ModelType], *, order_by: Sequence[str] = ()):
        self.model = model
        self.order_by = tuple(order_by)

    def _apply_order(self, query):
        for field in self.order_by:
            query = query.order_by(getattr(self.model, field))
        return query.order_by(self.model.id)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    @degrade_on_store_error(lambda: None)
    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다. 없으면 None을 반환합니다.
        """
        return await db.get(self.model, id)

    async def get_for_update(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        수정 대상 레코드를 조회합니다. 없으면 None, 저장소 장애면 503을 발생시킵니다.
        """
        return await get_or_unavailable(db, self.model, id, action=f"loading {self.entity_name} for update")

    @degrade_on_store_error(list)
    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = None, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 필터링을 위한 키워드 인자(필드 == 값)를 지원합니다.
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        query = self._apply_order(query).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await db.exec(query)
        return list(result.all())

    @degrade_on_store_error(lambda: None)
    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.exec(statement)
        return response.first()

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        async with write_transaction(db, action=f"create {self.entity_name}"):
            db.add(db_obj)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다. 요청에 명시된 필드만 반영합니다 (null 포함).
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        async with write_transaction(db, action=f"update {self.entity_name}"):
            for key, value in update_data.items():
                setattr(db_obj, key, value)
            db.add(db_obj)
        await db.refresh(db_obj)
        return db_obj

    async def before_delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """
        레코드 삭제 직전에 같은 트랜잭션 안에서 호출됩니다.
        하위 데이터 정리(연쇄 삭제, 참조 NULL 처리)가 필요한 도메인에서 재정의합니다.
        """

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다. 대상이 없으면 None을 반환합니다.
        """
        async with write_transaction(db, action=f"delete {self.entity_name}"):
            db_obj = await db.get(self.model, id)
            if db_obj is None:
                return None
            await self.before_delete(db, db_obj)
            await db.delete(db_obj)
        return db_obj
