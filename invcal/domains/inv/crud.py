# invcal/domains/inv/crud.py

"""
'inv' 도메인의 CRUD 및 재고 원장(Transaction Engine) 로직을 정의하는 모듈입니다.

재고 변경은 반드시 StockLedger.apply_transaction을 거칩니다.
- 재고 증감은 `UPDATE ... SET current_stock = current_stock + :change RETURNING`
  한 문장으로 원자적으로 수행되어, 같은 품목에 대한 동시 거래가 서로의 변경을
  덮어쓰지 않습니다 (lost update 방지).
- 이력(StockHistory) 추가는 같은 DB 트랜잭션 안에서 수행되므로,
  둘 다 커밋되거나 둘 다 롤백됩니다.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from datetime import date
from decimal import Decimal

from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core.crud_base import CRUDBase, ReadOnlyCRUDBase
from invcal.core.exceptions import ItemNotFoundError, LedgerStorageError, LedgerValidationError
from invcal.domains.inv import models as inv_models
from invcal.domains.inv import schemas as inv_schemas

#  로거 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Numeric(19, 4) 컬럼 정밀도에 맞춘 비교 단위
_STOCK_QUANTUM = Decimal("0.0001")


def _q(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(_STOCK_QUANTUM)


class ItemCRUD(CRUDBase[inv_models.Item, inv_schemas.ItemCreate]):
    """Item 모델에 특화된 CRUD 작업을 처리합니다. (등록/조회만 제공)"""

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.ItemCreate
    ) -> inv_models.Item:
        """
        새로운 품목을 등록합니다. 재고는 항상 0에서 시작하며 이력은 생성하지 않습니다.
        스펙은 kind 태그를 포함한 JSON으로 저장됩니다.
        """
        item_data = obj_in.model_dump(exclude={"specs"})
        item_data["specs"] = (
            obj_in.specs.model_dump(mode="json", exclude_none=True) if obj_in.specs else None
        )
        try:
            return await super().create(db, obj_in=item_data)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("품목 등록 실패 (name=%s): %s", obj_in.name, exc)
            raise LedgerStorageError("Failed to register item.") from exc

    async def get_or_404(self, db: AsyncSession, item_id: int) -> inv_models.Item:
        """ID로 품목을 조회하고, 없으면 ItemNotFoundError를 발생시킵니다."""
        item = await db.get(self.model, item_id, populate_existing=True)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item


class StockHistoryCRUD(ReadOnlyCRUDBase[inv_models.StockHistory]):
    """
    StockHistory(원장) 조회 전용 CRUD입니다.
    이력 레코드는 StockLedger만 생성하며, 수정/삭제 경로는 없습니다.
    """

    async def get_calendar_feed(
        self,
        db: AsyncSession,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[inv_models.StockHistory]:
        """전체 이력을 날짜 오름차순(같은 날짜는 생성 순)으로 조회합니다."""
        if start_date and end_date and start_date > end_date:
            raise LedgerValidationError("start_date must not be after end_date.")
        return await self.get_filtered(
            db,
            date_range_field="date",
            start_date=start_date,
            end_date=end_date,
            order_by=["date", "id"],
        )

    async def get_by_item(
        self, db: AsyncSession, *, item_id: int
    ) -> List[inv_models.StockHistory]:
        """특정 품목의 이력을 날짜 오름차순으로 조회합니다."""
        return await self.get_filtered(
            db, filters={"item_id": item_id}, order_by=["date", "id"]
        )


class StockLedger:
    """
    재고 거래 엔진.
    품목 재고 변경과 이력 추가를 하나의 작업 단위로 처리합니다.
    """

    async def apply_transaction(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[inv_schemas.TransactionCreate, Dict[str, Any]],
    ) -> inv_models.StockHistory:
        """
        재고 거래를 적용하고 생성된 이력 레코드를 반환합니다.
        반환된 이력의 final_stock이 거래 반영 후의 재고량입니다.

        - IN / PROD: 재고 + amount
        - OUT: 재고 - amount (음수 재고 허용)
        """
        if isinstance(obj_in, dict):
            try:
                obj_in = inv_schemas.TransactionCreate.model_validate(obj_in)
            except ValidationError as exc:
                raise LedgerValidationError(
                    [{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in exc.errors()]
                ) from exc

        change = obj_in.type.signed(obj_in.amount)
        item_table = inv_models.Item

        # 1~3. 품목 조회와 재고 증감을 한 문장으로 처리합니다.
        stmt = (
            update(item_table)
            .where(item_table.id == obj_in.item_id)
            .values(current_stock=item_table.current_stock + change)
            .returning(item_table.current_stock, item_table.name)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            row = result.one_or_none()
            if row is None:
                await db.rollback()
                raise ItemNotFoundError(obj_in.item_id)
            final_stock, item_name = row

            # 4. 같은 트랜잭션에서 이력을 추가합니다.
            entry = inv_models.StockHistory(
                date=obj_in.date,
                type=obj_in.type,
                item_id=obj_in.item_id,
                item_name=item_name,
                change_amount=change,
                final_stock=final_stock,
            )
            db.add(entry)
            await db.flush()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error(
                "재고 거래 실패, 롤백됨 (item_id=%s, type=%s, change=%s): %s",
                obj_in.item_id, obj_in.type.value, change, exc,
            )
            raise LedgerStorageError("Failed to apply stock transaction.") from exc

        try:
            await db.commit()
        except SQLAlchemyError as exc:
            # 커밋 결과를 알 수 없는 경우입니다. 재고와 원장의 정합성 점검 대상입니다.
            await db.rollback()
            logger.error(
                "재고 거래 커밋 실패: 재고/원장 정합성 점검 필요 (item_id=%s, type=%s, change=%s): %s",
                obj_in.item_id, obj_in.type.value, change, exc,
            )
            raise LedgerStorageError("Stock transaction commit failed; reconciliation required.") from exc

        logger.info(
            "재고 거래 반영 (item_id=%s, type=%s, change=%s, final_stock=%s)",
            entry.item_id, entry.type.value, entry.change_amount, entry.final_stock,
        )
        return entry

    async def audit_item(self, db: AsyncSession, *, item_id: int) -> Dict[str, Any]:
        """
        품목의 현재 재고를 원장과 대조합니다.
        - 현재 재고 == 이력 change_amount 합계
        - 마지막 이력의 final_stock == 현재 재고
        - 생성 순으로 누적한 합계 == 각 이력의 final_stock
        """
        db_item = await item.get_or_404(db, item_id)

        query = (
            select(inv_models.StockHistory)
            .where(inv_models.StockHistory.item_id == item_id)
            .order_by(inv_models.StockHistory.id)
        )
        result = await db.execute(query)
        entries = result.scalars().all()

        running = Decimal("0")
        broken_ids: List[int] = []
        for entry in entries:
            running += _q(entry.change_amount)
            if running != _q(entry.final_stock):
                broken_ids.append(entry.id)

        current = _q(db_item.current_stock)
        last_final = _q(entries[-1].final_stock) if entries else None
        is_consistent = (
            current == running
            and (last_final is None or last_final == current)
            and not broken_ids
        )
        if not is_consistent:
            logger.warning(
                "원장 불일치 감지 (item_id=%s, current_stock=%s, history_total=%s, broken=%s)",
                item_id, current, running, broken_ids,
            )

        return {
            "item_id": db_item.id,
            "item_name": db_item.name,
            "current_stock": current,
            "history_total": running,
            "last_final_stock": last_final,
            "entry_count": len(entries),
            "broken_checkpoint_ids": broken_ids,
            "is_consistent": is_consistent,
        }


#  각 CRUD 클래스의 인스턴스 생성
item = ItemCRUD(inv_models.Item)
stock_history = StockHistoryCRUD(inv_models.StockHistory)
stock_ledger = StockLedger()
