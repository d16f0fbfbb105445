# invcal/core/crud_base.py

"""
공통 CRUD 작업을 위한 기본 클래스 모듈입니다.
원장(History)은 append-only이므로 update/delete는 제공하지 않습니다.
"""

from typing import Generic, List, Optional, Type, TypeVar, Any, Dict, Union
from datetime import date, timedelta

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class ReadOnlyCRUDBase(Generic[ModelType]):
    """
    조회 작업에 대한 기본 클래스를 정의합니다.
    append-only 원장처럼 별도 경로로만 기록되는 모델에 사용합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_multi(self, db: AsyncSession, **kwargs: Any) -> List[ModelType]:
        """
        모든 레코드를 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        (페이징은 지원하지 않습니다.)
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # 다중 속성 필터: {"attribute_name": "value"}
        date_range_field: Optional[str] = None,    # 기간 검색을 적용할 날짜 필드 이름 (예: "date")
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        order_by: Optional[List[str]] = None,      # 정렬 필드 목록 (오름차순)
    ) -> List[ModelType]:
        """
        다중 속성 및 기간 검색 기능을 포함한 다중 조회.
        """
        query = select(self.model)
        conditions = []

        # 1. 다중 속성 필터링
        if filters:
            for attribute, value in filters.items():
                if not hasattr(self.model, attribute):
                    raise ValueError(f"Model {self.model.__name__} has no attribute '{attribute}'")
                conditions.append(getattr(self.model, attribute) == value)

        # 2. 기간 검색 필터링
        if date_range_field:
            date_field = getattr(self.model, date_range_field)
            if start_date is not None:
                conditions.append(date_field >= start_date)
            if end_date is not None:
                # end_date 당일까지 포함하기 위함
                conditions.append(date_field < end_date + timedelta(days=1))

        if conditions:
            query = query.where(*conditions)

        # 3. 정렬
        for field in order_by or []:
            query = query.order_by(getattr(self.model, field).asc())

        result = await db.execute(query)
        return result.scalars().all()


class CRUDBase(ReadOnlyCRUDBase[ModelType], Generic[ModelType, CreateSchemaType]):
    """
    생성/조회 작업에 대한 기본 클래스를 정의합니다.
    """

    async def create(
        self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj
