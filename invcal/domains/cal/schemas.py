# invcal/domains/cal/schemas.py

from typing import Optional
from datetime import datetime, date as date_type

from pydantic import Field, field_validator
from sqlmodel import SQLModel

from invcal.core.types import BusinessDate


class EventCreate(SQLModel):
    title: str = Field(..., min_length=1, max_length=200, description="일정 제목")
    date: BusinessDate = Field(..., description="일정 날짜 (YYYY-MM-DD)")
    description: Optional[str] = Field(None, description="일정 내용 (생략 시 '내용 없음')")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value


class EventResponse(SQLModel):
    id: int
    title: str
    date: date_type
    description: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
