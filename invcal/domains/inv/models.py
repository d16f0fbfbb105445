# invcal/domains/inv/models.py

"""
'inv' 도메인 (품목 및 재고 원장)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- Item: 품목과 현재 재고량. 재고량은 원장 엔진(crud.stock_ledger)만 변경합니다.
- StockHistory: 재고 변동 이력. 생성 후 변경/삭제되지 않는 append-only 원장입니다.
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from datetime import datetime, date as date_type, UTC
from decimal import Decimal

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import JSON, Index, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP, DATE


# PostgreSQL에서는 JSONB, 그 외(SQLite 등)에서는 일반 JSON 컬럼을 사용합니다.
SpecsJSON = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# 0. 열거형 (카테고리, 거래 유형)
# =============================================================================
class ItemCategory(str, Enum):
    """품목 카테고리. DB에는 이름 문자열로 저장됩니다."""
    RAW_MATERIAL_FILM = "RAW_MATERIAL_FILM"  # 원단
    CORE_TUBE = "CORE_TUBE"                  # 지관
    ADHESIVE = "ADHESIVE"                    # 점착제
    FINISHED_PRODUCT = "FINISHED_PRODUCT"    # 생산품

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: Dict[ItemCategory, str] = {
    ItemCategory.RAW_MATERIAL_FILM: "원단",
    ItemCategory.CORE_TUBE: "지관",
    ItemCategory.ADHESIVE: "점착제",
    ItemCategory.FINISHED_PRODUCT: "생산품",
}


class TransactionType(str, Enum):
    """재고 변동 유형. 입고(초록), 출고(빨강), 생산(파랑)."""
    IN = "IN"
    OUT = "OUT"
    PROD = "PROD"

    def signed(self, amount: Decimal) -> Decimal:
        """
        수량(크기)에 부호를 붙여 실제 재고 변동량을 반환합니다.
        PROD는 완제품 증가만 반영합니다. 원자재 차감(BOM 소모)은 아직 지원하지 않습니다.
        """
        if self is TransactionType.OUT:
            return -amount
        return amount


# =============================================================================
# 1. items 테이블 모델
# =============================================================================
class ItemBase(SQLModel):
    category: ItemCategory = Field(index=True, description="품목 카테고리")
    name: str = Field(max_length=100, description="화면에 보여줄 이름 (예: 청색 원단 38mic)")
    # 카테고리별 세부 스펙. 형태는 schemas.ItemSpecs(카테고리 태그 union)로 검증됩니다.
    specs: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(SpecsJSON))
    unit: str = Field(default="ea", max_length=20, description="단위 (ea, roll, kg 등)")


class Item(ItemBase, table=True):
    __tablename__ = "items"

    id: Optional[int] = Field(default=None, primary_key=True)
    current_stock: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(19, 4), nullable=False, server_default="0"),
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    histories: List["StockHistory"] = Relationship(back_populates="item")


# =============================================================================
# 2. stock_histories 테이블 모델 (append-only)
# =============================================================================
class StockHistory(SQLModel, table=True):
    __tablename__ = "stock_histories"
    __table_args__ = (
        # 캘린더 조회용: 날짜 순, 같은 날짜는 생성 순
        Index("ix_stock_histories_date_id", "date", "id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    date: date_type = Field(sa_column=Column(DATE, nullable=False), description="업무 일자 (시간은 무시)")
    type: TransactionType = Field(description="IN / OUT / PROD")
    item_id: int = Field(foreign_key="items.id", index=True)
    item_name: str = Field(max_length=100, description="거래 시점의 품목명 스냅샷")
    change_amount: Decimal = Field(sa_column=Column(Numeric(19, 4), nullable=False))
    final_stock: Decimal = Field(sa_column=Column(Numeric(19, 4), nullable=False))
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )

    item: Optional["Item"] = Relationship(back_populates="histories")
