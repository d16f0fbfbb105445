# invcal/domains/inv/tasks.py

import logging
from typing import Any, Dict

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core.database import get_async_session_context
from invcal.domains.inv import crud as inv_crud
from invcal.domains.inv import models as inv_models

#  로거 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def _reconcile_all(db: AsyncSession) -> Dict[str, Any]:
    result = await db.execute(select(inv_models.Item.id).order_by(inv_models.Item.id))
    item_ids = result.scalars().all()

    inconsistent_ids = []
    for item_id in item_ids:
        report = await inv_crud.stock_ledger.audit_item(db, item_id=item_id)
        if not report["is_consistent"]:
            inconsistent_ids.append(item_id)

    if inconsistent_ids:
        logger.warning(
            "재고 원장 대사 완료: %d개 품목 중 %d개 불일치 %s",
            len(item_ids), len(inconsistent_ids), inconsistent_ids,
        )
    else:
        logger.info("재고 원장 대사 완료: %d개 품목 모두 일치", len(item_ids))
    return {
        "status": "ok",
        "checked_count": len(item_ids),
        "inconsistent_item_ids": inconsistent_ids,
    }


async def reconcile_item_ledgers_task(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    모든 품목의 현재 재고를 원장(이력 합계, final_stock 체크포인트)과 대조하는 태스크.
    불일치는 WARNING 로그로 남기며, 자동 보정은 하지 않습니다.

    ctx에 'db' 세션이 있으면 그 세션을 사용하고 (동기 실행),
    없으면 ARQ 워커에서 독립 세션을 엽니다.
    """
    logger.info("백그라운드 작업 시작: 재고 원장 대사")
    db = ctx.get("db")
    if db is not None:
        return await _reconcile_all(db)
    async with get_async_session_context() as session:
        return await _reconcile_all(session)
