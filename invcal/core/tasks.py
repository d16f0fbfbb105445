# invcal/core/tasks.py

import logging
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from invcal.core.database import get_async_session_context, ping_database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def health_check_database_task(ctx: Dict[str, Any]) -> Dict[str, str]:
    """
    ARQ 워커가 주기적으로 실행하는 DB 헬스 체크 태스크.
    결과는 ARQ 작업 결과로 남기고, 실패는 ERROR 로그로 기록합니다.
    """
    try:
        async with get_async_session_context() as db:
            alive = await ping_database(db)
    except SQLAlchemyError as e:
        logger.error("DB 헬스 체크 실패: 연결 오류 %s", e)
        return {"status": "failed", "message": f"Database connection error: {e}"}

    if not alive:
        logger.error("DB 헬스 체크 실패: SELECT 1 결과 없음")
        return {"status": "failed", "message": "Database health check failed: No result from test query."}
    logger.info("DB 헬스 체크 성공")
    return {"status": "success", "message": "Database connection successful."}
