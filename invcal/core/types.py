# invcal/core/types.py

"""
여러 도메인 스키마가 함께 쓰는 Pydantic 어노테이션 타입입니다.
"""

from typing import Annotated, Any
from datetime import datetime, date

from pydantic import BeforeValidator


def drop_time_of_day(value: Any) -> Any:
    """
    날짜+시간 값(datetime 또는 ISO 문자열)에서 날짜만 남깁니다.
    'YYYY-MM-DD' 형식은 그대로 두어 Pydantic의 date 검증에 맡깁니다.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError("유효한 날짜 형식이 필요합니다.")
    return value


# 업무 일자: 시간 정보는 버리고 날짜만 저장합니다.
BusinessDate = Annotated[date, BeforeValidator(drop_time_of_day)]
