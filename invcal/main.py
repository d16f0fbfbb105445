# invcal/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import create_pool, RedisSettings
from redis.exceptions import RedisError

from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from invcal import API_PREFIX
from invcal.core.config import settings
from invcal.core.database import engine, create_db_and_tables, get_session, ping_database

# 태스크 모듈 임포트
from invcal.core import tasks as core_tasks
from invcal.domains.inv import tasks as inv_tasks

# 도메인 라우터 임포트
from invcal.domains.inv.routers import router as inv_router
from invcal.domains.cal.routers import router as cal_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    inv_tasks.reconcile_item_ledgers_task,
]


# ARQ 워커 설정 클래스 (실행: arq invcal.main.ArqWorkerSettings)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        cron(core_tasks.health_check_database_task, name="daily_db_health_check",
             hour=0, minute=0, timeout=300, keep_result=600),
        # 매일 새벽 2시 재고 원장 대사
        cron(inv_tasks.reconcile_item_ledgers_task, name="daily_stock_ledger_reconciliation",
             hour=2, minute=0, timeout=1800, keep_result=3600),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    Redis에 연결할 수 없으면 app.state.redis는 None이 되고,
    백그라운드 작업은 요청 안에서 동기로 실행됩니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중...")
    await create_db_and_tables()

    try:
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except (OSError, RedisError) as e:
        app.state.redis = None
        logger.warning("ARQ Redis에 연결할 수 없어 동기 실행 모드로 동작합니다: %s", e)

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    if app.state.redis:
        await app.state.redis.close()
        logger.info("ARQ Redis 연결 풀 종료 완료.")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 (모바일/웹 클라이언트와의 통신) --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 라우터 포함 --
app.include_router(inv_router, prefix=f"{API_PREFIX}/inv", tags=["Inventory Ledger (재고 원장)"])
app.include_router(cal_router, prefix=f"{API_PREFIX}/cal", tags=["Calendar (캘린더 일정)"])


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """서버 상태 확인용 루트 엔드포인트입니다."""
    return {"message": "InvCal API is running. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스에 SELECT 1을 실행하여 (ping_database) 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        alive = await ping_database(session)
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database connection error during health check: {e}"
        )
    if not alive:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    return {"status": "ok", "database_connection": "successful"}


# -- Uvicorn 서버 직접 실행 (개발용): python -m invcal.main --
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("invcal.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=settings.DEBUG_MODE)
