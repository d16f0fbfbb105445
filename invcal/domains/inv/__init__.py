# invcal/domains/inv/__init__.py

"""
'inv' 도메인 패키지: 품목(Item)과 재고 원장(StockHistory)을 관리합니다.

주요 서브모듈:
- `models.py`: items / stock_histories 테이블 SQLModel 정의, 카테고리·거래 유형 Enum.
- `schemas.py`: 요청/응답 Pydantic 모델 (카테고리별 스펙 태그 union 포함).
- `crud.py`: 품목 등록·조회, 이력 조회, 재고 거래 엔진(StockLedger).
- `routers.py`: FastAPI API 엔드포인트.
- `tasks.py`: ARQ 원장 대사 태스크.

생산(PROD) 거래는 완제품 재고 증가만 반영합니다.
원자재 소모(BOM) 처리는 아직 구현되지 않았습니다.
"""

__title__ = "InvCal Inventory Ledger Domain"
__version__ = "0.1.0"
__all__ = []
