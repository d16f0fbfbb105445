# invcal/domains/inv/schemas.py

"""
'inv' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

품목 스펙은 카테고리를 태그로 하는 union(ItemSpecs)으로 정의되어,
카테고리와 맞지 않는 스펙 항목은 요청 단계에서 거부됩니다.
"""

from typing import Annotated, Any, List, Literal, Optional, Union
from datetime import datetime, date as date_type
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from sqlmodel import SQLModel

from invcal.core.types import BusinessDate
from invcal.domains.inv.models import ItemCategory, TransactionType


# =============================================================================
# 1. 카테고리별 스펙 (태그 union)
# =============================================================================
class _SpecsBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FilmSpecs(_SpecsBase):
    """원단 스펙"""
    kind: Literal["RAW_MATERIAL_FILM"] = "RAW_MATERIAL_FILM"
    color: Optional[str] = Field(None, description="색상 (청색, 투명)")
    thickness: Optional[float] = Field(None, gt=0, description="두께 (38, 40...)")
    width: Optional[float] = Field(None, gt=0, description="폭 (1040, 1240...)")
    length: Optional[float] = Field(None, gt=0, description="길이 (3000, 125...)")


class CoreTubeSpecs(_SpecsBase):
    """지관 스펙"""
    kind: Literal["CORE_TUBE"] = "CORE_TUBE"
    core_type: Optional[str] = Field(None, description="지관 타입")
    width: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)


class AdhesiveSpecs(_SpecsBase):
    """점착제 스펙"""
    kind: Literal["ADHESIVE"] = "ADHESIVE"
    adhesive_type: Optional[str] = Field(None, description="점착제 타입")


class FinishedProductSpecs(_SpecsBase):
    """생산품 스펙"""
    kind: Literal["FINISHED_PRODUCT"] = "FINISHED_PRODUCT"
    color: Optional[str] = None
    thickness: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    core_type: Optional[str] = None
    adhesive_type: Optional[str] = None


ItemSpecs = Annotated[
    Union[FilmSpecs, CoreTubeSpecs, AdhesiveSpecs, FinishedProductSpecs],
    Field(discriminator="kind"),
]


# =============================================================================
# 2. items 스키마
# =============================================================================
class ItemCreate(SQLModel):
    category: ItemCategory = Field(..., description="품목 카테고리 (RAW_MATERIAL_FILM, CORE_TUBE, ADHESIVE, FINISHED_PRODUCT)")
    name: str = Field(..., min_length=1, max_length=100, description="품목명")
    specs: Optional[ItemSpecs] = Field(None, description="카테고리별 세부 스펙")
    unit: str = Field("ea", min_length=1, max_length=20, description="단위 (ea, roll, kg 등)")

    @model_validator(mode="before")
    @classmethod
    def tag_specs_with_category(cls, data: Any) -> Any:
        # 클라이언트가 kind를 생략하면 카테고리로 채웁니다.
        if isinstance(data, dict) and isinstance(data.get("specs"), dict) and "kind" not in data["specs"]:
            category = data.get("category")
            kind = category.value if isinstance(category, ItemCategory) else category
            data = {**data, "specs": {**data["specs"], "kind": kind}}
        return data

    @model_validator(mode="after")
    def specs_match_category(self) -> "ItemCreate":
        if self.specs is not None and self.specs.kind != self.category.value:
            raise ValueError(
                f"specs kind '{self.specs.kind}' does not match category '{self.category.value}'"
            )
        return self

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class ItemResponse(SQLModel):
    id: int = Field(..., description="품목 고유 ID")
    category: ItemCategory
    name: str
    specs: Optional[ItemSpecs] = None
    unit: str
    current_stock: float = Field(..., description="현재 재고량")
    created_at: datetime = Field(..., description="레코드 생성 일시")
    updated_at: datetime = Field(..., description="레코드 마지막 업데이트 일시")

    class Config:
        from_attributes = True


# =============================================================================
# 3. 재고 거래 (Transaction) 스키마
# =============================================================================
class TransactionCreate(SQLModel):
    item_id: int = Field(..., description="대상 품목 ID")
    type: TransactionType = Field(..., description="거래 유형 (IN, OUT, PROD)")
    # 자릿수는 Numeric(19, 4) 컬럼 정밀도에 맞춥니다. 소수 5자리 이상이나 너무 큰 수는 422입니다.
    amount: Decimal = Field(
        ..., ge=0, max_digits=15, decimal_places=4,
        description="이동 수량 (부호는 거래 유형으로 결정)",
    )
    date: BusinessDate = Field(..., description="업무 일자 (YYYY-MM-DD, 시간은 무시)")


class TransactionResult(SQLModel):
    current_stock: float = Field(..., description="거래 반영 후 재고량")


# =============================================================================
# 4. stock_histories 스키마 (읽기 전용)
# =============================================================================
class StockHistoryResponse(SQLModel):
    id: int
    date: date_type
    type: TransactionType
    item_id: int
    item_name: str
    change_amount: float = Field(..., description="실제 반영된 변동량 (출고는 음수)")
    final_stock: float = Field(..., description="변동 후 재고 (검증용 체크포인트)")
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 5. 원장 감사 (Ledger audit) 스키마
# =============================================================================
class LedgerAuditResponse(SQLModel):
    item_id: int
    item_name: str
    current_stock: float
    history_total: float = Field(..., description="이력 change_amount 합계")
    last_final_stock: Optional[float] = Field(None, description="마지막 이력의 final_stock")
    entry_count: int
    broken_checkpoint_ids: List[int] = Field(default_factory=list, description="누적합과 final_stock이 다른 이력 ID")
    is_consistent: bool
