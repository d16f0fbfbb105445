# invcal/domains/inv/routers.py

from typing import Any, Dict, List, Optional
from datetime import date

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core import dependencies as deps
from invcal.domains.inv import crud as inv_crud, schemas as inv_schemas
from invcal.domains.inv import tasks as inv_tasks

router = APIRouter(
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. items 엔드포인트
# =============================================================================
@router.post(
    "/items",
    response_model=inv_schemas.ItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_item(
    item_create: inv_schemas.ItemCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """새로운 품목을 등록합니다. 재고는 0에서 시작합니다."""
    return await inv_crud.item.create(db=db, obj_in=item_create)


@router.get("/items", response_model=List[inv_schemas.ItemResponse])
async def read_items(db: AsyncSession = Depends(deps.get_db_session)):
    """모든 품목 목록을 조회합니다."""
    return await inv_crud.item.get_multi(db)


@router.get("/items/{item_id}", response_model=inv_schemas.ItemResponse)
async def read_item(item_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """ID로 특정 품목을 조회합니다."""
    return await inv_crud.item.get_or_404(db, item_id)


@router.get(
    "/items/{item_id}/histories",
    response_model=List[inv_schemas.StockHistoryResponse],
)
async def read_item_histories(item_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """특정 품목의 재고 변동 이력을 날짜 순으로 조회합니다."""
    await inv_crud.item.get_or_404(db, item_id)
    return await inv_crud.stock_history.get_by_item(db, item_id=item_id)


@router.get("/items/{item_id}/audit", response_model=inv_schemas.LedgerAuditResponse)
async def audit_item_ledger(item_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """품목의 현재 재고를 이력 합계 및 final_stock 체크포인트와 대조합니다."""
    return await inv_crud.stock_ledger.audit_item(db, item_id=item_id)


# =============================================================================
# 2. 재고 거래 엔드포인트
# =============================================================================
@router.post(
    "/transactions",
    response_model=inv_schemas.TransactionResult,
    status_code=status.HTTP_201_CREATED,
)
async def apply_transaction(
    transaction_create: inv_schemas.TransactionCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    재고 거래를 적용합니다.
    - IN / PROD: 재고 증가, OUT: 재고 감소
    - 재고 변경과 이력 추가는 하나의 DB 트랜잭션으로 처리됩니다.
    """
    entry = await inv_crud.stock_ledger.apply_transaction(db=db, obj_in=transaction_create)
    return inv_schemas.TransactionResult(current_stock=entry.final_stock)


# =============================================================================
# 3. 이력 (캘린더 피드) 엔드포인트
# =============================================================================
@router.get("/histories", response_model=List[inv_schemas.StockHistoryResponse])
async def read_histories(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """전체 재고 변동 이력을 날짜 오름차순으로 조회합니다. (캘린더 화면용)"""
    return await inv_crud.stock_history.get_calendar_feed(
        db, start_date=start_date, end_date=end_date
    )


# =============================================================================
# 4. 원장 대사 (Reconciliation) 엔드포인트
# =============================================================================
@router.post("/reconciliation")
async def run_reconciliation(
    response: Response,
    db: AsyncSession = Depends(deps.get_db_session),
    arq_redis_pool: Any = Depends(deps.get_arq_pool),
) -> Dict[str, Any]:
    """
    모든 품목의 원장 대사를 실행합니다.
    - ARQ Redis 풀이 있으면: 백그라운드 작업으로 등록 (202 Accepted)
    - 없으면: 동기 실행 후 결과 반환 (200 OK)
    """
    if arq_redis_pool:
        job = await arq_redis_pool.enqueue_job("reconcile_item_ledgers_task")
        response.status_code = status.HTTP_202_ACCEPTED
        return {"status": "queued", "job_id": job.job_id if job else None}
    return await inv_tasks.reconcile_item_ledgers_task({"db": db})
