# invcal/core/exceptions.py

"""
재고 원장(inv) 도메인의 예외 계층입니다.

모든 예외는 FastAPI의 HTTPException을 상속하므로, CRUD 계층에서 그대로 raise하면
FastAPI가 상태 코드와 detail을 가진 응답으로 변환합니다.
HTTP를 거치지 않는 호출자(ARQ 태스크, 테스트)는 `LedgerError` 또는
하위 클래스를 잡아서 세 가지 실패 유형을 구분할 수 있습니다.
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class LedgerError(HTTPException):
    """재고 원장 관련 모든 실패의 기본 클래스."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Inventory ledger error."

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ItemNotFoundError(LedgerError):
    """참조한 품목이 존재하지 않습니다. 어떤 변경도 일어나기 전에 발생합니다."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Item not found."

    def __init__(self, item_id: Any = None):
        self.item_id = item_id
        detail = f"Item {item_id} not found." if item_id is not None else None
        super().__init__(detail)


class LedgerValidationError(LedgerError):
    """잘못된 입력 (날짜, 거래 유형, 수량, 카테고리). 어떤 변경도 일어나기 전에 발생합니다."""

    status_code = 422
    default_detail = "Invalid inventory transaction."


class LedgerStorageError(LedgerError):
    """영속화 단계의 실패 (연결, 쓰기 실패, 타임아웃)."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Inventory storage is unavailable."
