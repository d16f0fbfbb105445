# invcal/domains/cal/crud.py

from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core.crud_base import CRUDBase
from invcal.domains.cal import models as cal_models
from invcal.domains.cal import schemas as cal_schemas

DEFAULT_DESCRIPTION = "내용 없음"


class EventCRUD(CRUDBase[cal_models.Event, cal_schemas.EventCreate]):
    """Event 모델에 특화된 CRUD 작업을 처리합니다."""

    async def create(
        self, db: AsyncSession, *, obj_in: cal_schemas.EventCreate
    ) -> cal_models.Event:
        event_data = obj_in.model_dump()
        event_data["description"] = obj_in.description or DEFAULT_DESCRIPTION
        return await super().create(db, obj_in=event_data)

    async def get_all_by_date(self, db: AsyncSession) -> List[cal_models.Event]:
        """모든 일정을 날짜 오름차순으로 조회합니다."""
        return await self.get_filtered(db, order_by=["date", "id"])


event = EventCRUD(cal_models.Event)
