# invcal/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 테이블을 생성하는 함수를 포함합니다.
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core.config import settings

# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 도메인 모델을 임포트합니다.
from invcal.domains.inv import models  # noqa
from invcal.domains.cal import models  # noqa

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _engine_options(url: str) -> Dict[str, Any]:
    """URL의 드라이버에 맞는 create_async_engine 옵션을 구성합니다."""
    options: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "future": True}
    if make_url(url).get_backend_name() == "sqlite":
        # SQLite는 연결 풀 크기 옵션을 받지 않습니다. 잠금 대기 시간만 지정합니다.
        options["connect_args"] = {"timeout": settings.DB_TIMEOUT}
    else:
        options.update(
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return options


def configure_sqlite_locking(async_engine: AsyncEngine) -> None:
    """
    SQLite 엔진의 모든 트랜잭션을 BEGIN IMMEDIATE로 시작하도록 설정합니다.
    쓰기 잠금을 트랜잭션 시작 시점에 잡으므로, 동시 재고 변경이 잠금 승격 단계에서
    'database is locked'로 실패하지 않고 busy timeout 동안 순서대로 대기합니다.
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # 드라이버의 암묵적 BEGIN을 끄고, 아래 begin 이벤트에서 직접 발행합니다.
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str) -> AsyncEngine:
    """설정된 URL로 비동기 엔진을 생성합니다. (테스트에서도 재사용)"""
    async_engine = create_async_engine(url, **_engine_options(url))
    configure_sqlite_locking(async_engine)
    return async_engine


# SQLModel 엔진을 생성합니다.
engine: AsyncEngine = build_engine(settings.DATABASE_URL.get_secret_value())

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(async_engine: AsyncEngine = engine) -> None:
    """
    모든 테이블을 생성합니다. 기존 테이블은 삭제하지 않습니다.
    """
    logger.info("데이터베이스 테이블 생성을 시도합니다...")
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성이 완료되었습니다 (또는 이미 존재).")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task 등 비동기 컨텍스트에서 사용할 수 있는
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def ping_database(session: AsyncSession) -> bool:
    """
    SELECT 1로 데이터베이스 응답을 확인합니다.
    연결 오류(SQLAlchemyError)는 호출자에게 그대로 전달합니다.
    """
    result = await session.execute(select(1))
    return result.scalar_one_or_none() == 1
