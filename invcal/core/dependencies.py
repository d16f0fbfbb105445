# invcal/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- ARQ Redis 풀 접근 (get_arq_pool).
"""

from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlmodel.ext.asyncio.session import AsyncSession

from invcal.core.database import get_session as get_main_app_session


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    invcal.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


def get_arq_pool(request: Request) -> Optional[Any]:
    """lifespan에서 생성한 ARQ Redis 풀을 반환합니다. 없으면 None."""
    return getattr(request.app.state, "redis", None)
