# tests/conftest.py

import os
import tempfile
from typing import AsyncGenerator, Callable, Awaitable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession


# --- 테스트용 데이터베이스 설정 ---
# 실제 운영 DB와 분리된 테스트 전용 DB URL을 사용합니다.
# 기본값은 임시 디렉토리의 SQLite 파일이며, TEST_DATABASE_URL로 PostgreSQL을 지정할 수 있습니다.
_TMP_DIR = tempfile.mkdtemp(prefix="invcal-test-")
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test_invcal.db')}",
)
# invcal.core.config는 임포트 시점에 DATABASE_URL을 요구합니다.
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

# 앱 임포트는 환경 변수 설정 이후에 해야 합니다.
from invcal.main import app as main_app  # noqa: E402
from invcal.core import dependencies as deps  # noqa: E402
from invcal.core.database import get_session, configure_sqlite_locking  # noqa: E402
from invcal.domains.inv import models as inv_models  # noqa: E402
from invcal.domains.inv import crud as inv_crud  # noqa: E402
from invcal.domains.inv import schemas as inv_schemas  # noqa: E402


test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,             # 테스트 시 SQL 쿼리 출력하지 않음
    future=True,
    poolclass=NullPool,     # 각 연결이 독립적으로 사용되고 바로 닫히도록 함
    connect_args={"timeout": 30} if TEST_DATABASE_URL.startswith("sqlite") else {},
)
configure_sqlite_locking(test_engine)

# 테스트용 세션 팩토리 생성 (AsyncSession)
TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_database():
    """
    각 테스트 시작 시 모든 테이블을 삭제하고 재생성합니다.
    API가 요청마다 커밋하므로 트랜잭션 롤백 대신 테이블 재생성으로 격리합니다.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield  # 테스트 실행

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    테스트 함수에서 직접 사용하는 비동기 데이터베이스 세션입니다.
    SQLite는 트랜잭션 시작 시 쓰기 잠금을 잡으므로, API 호출 전에는
    이 세션의 트랜잭션을 commit/rollback으로 끝내 두어야 합니다.
    """
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def session_factory() -> Callable[[], AsyncSession]:
    """동시성 테스트처럼 독립 세션이 여러 개 필요할 때 사용하는 세션 공장입니다."""
    return TestingSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """
    요청마다 새로운 테스트 DB 세션을 주입하는 AsyncClient입니다.
    """
    async def override_get_session():
        async with TestingSessionLocal() as session:
            yield session

    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides.update({
        get_session: override_get_session,
        deps.get_db_session: override_get_session,
        deps.get_arq_pool: lambda: None,  # Redis 없이 동기 실행
    })
    try:
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides = original_overrides


# --- 품목 픽스처 (팩토리 사용으로 간결화) ---
@pytest.fixture(scope="function")
def item_factory(db_session: AsyncSession) -> Callable[..., Awaitable[inv_models.Item]]:
    """
    테스트용 품목을 CRUD 계층으로 등록하는 팩토리를 반환합니다.
    등록 후 세션 트랜잭션을 종료하여 쓰기 잠금을 반환합니다.
    """
    async def _create_item(
        name: str = "청색 원단 38mic",
        category: inv_models.ItemCategory = inv_models.ItemCategory.RAW_MATERIAL_FILM,
        **extra,
    ) -> inv_models.Item:
        item_in = inv_schemas.ItemCreate(category=category, name=name, **extra)
        item = await inv_crud.item.create(db_session, obj_in=item_in)
        await db_session.commit()
        return item

    return _create_item


@pytest_asyncio.fixture(scope="function")
async def film_item(item_factory) -> inv_models.Item:
    """재고 0으로 등록된 원단 품목"""
    return await item_factory(
        name="청색 원단 38mic",
        specs={"color": "청색", "thickness": 38, "width": 1040, "length": 3000},
    )


@pytest_asyncio.fixture(scope="function")
async def core_tube_item(item_factory) -> inv_models.Item:
    """재고 0으로 등록된 지관 품목"""
    return await item_factory(
        name="3인치 지관",
        category=inv_models.ItemCategory.CORE_TUBE,
        specs={"core_type": "3inch", "width": 1040},
    )
