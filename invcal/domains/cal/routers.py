# invcal/domains/cal/routers.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core import dependencies as deps
from invcal.domains.cal import crud as cal_crud, schemas as cal_schemas

router = APIRouter()


@router.post(
    "/events",
    response_model=cal_schemas.EventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    event_create: cal_schemas.EventCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """새로운 일정을 생성합니다."""
    return await cal_crud.event.create(db=db, obj_in=event_create)


@router.get("/events", response_model=List[cal_schemas.EventResponse])
async def read_events(db: AsyncSession = Depends(deps.get_db_session)):
    """모든 일정을 날짜 순으로 조회합니다."""
    return await cal_crud.event.get_all_by_date(db)
